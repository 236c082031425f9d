"""Process root: builds the aiohttp app and runs it until a shutdown signal."""
import logging
import os
import sys

from aiohttp import web

from .config import Settings
from .routes import create_app

logger = logging.getLogger(__name__)


def run(settings=None):
    """Serve the probe API; aiohttp handles SIGINT/SIGTERM and runs the shutdown hooks."""
    settings = settings or Settings.from_env()
    app = create_app(settings)
    logger.info('=' * 60)
    logger.info('🎮 Minecraft server status probe API')
    logger.info('=' * 60)
    logger.info(f"🌐 API running at http://{settings.host}:{settings.port}")
    if settings.development:
        logger.info("🛠️  Development mode: internal error details are returned to clients")
    try:
        web.run_app(
            app,
            host=settings.host,
            port=settings.port,
            handle_signals=True,
            shutdown_timeout=settings.shutdown_timeout,
            print=None,
        )
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    finally:
        logger.info("✅ Server shutdown complete")


if __name__ == '__main__':
    from dotenv import load_dotenv
    load_dotenv()
    # The launcher (app.py) normally configures logging; only set it up here if nothing has.
    root = logging.getLogger()
    if not root.handlers:
        level = getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO)
        logging.basicConfig(level=level, format='%(asctime)s - %(message)s')
    try:
        run()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

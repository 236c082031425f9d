"""Command-line launcher for the probe API."""
import argparse
import dataclasses
import logging
import os

from dotenv import load_dotenv

from .config import Settings
from .main import run

parser = argparse.ArgumentParser(prog='mcprobe', description='Minecraft server status probe API')
parser.add_argument('--level', '-l', default=None, help='Logging level (DEBUG, INFO, WARNING, ERROR)')
parser.add_argument('--host', default=None, help='Interface to bind (default: HOST or 0.0.0.0)')
parser.add_argument('--port', '-p', type=int, default=None, help='Port to listen on (default: PORT or 3000)')


def configure_logging(level_name):
    level = getattr(logging, (level_name or 'INFO').upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s - %(message)s')
    # Ensure root logger and all handlers use the selected level (some libraries preconfigure handlers)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def load_settings(args, environ=None):
    settings = Settings.from_env(environ)
    overrides = {k: v for k, v in (('host', args.host), ('port', args.port)) if v is not None}
    return dataclasses.replace(settings, **overrides)


def main(argv=None):
    load_dotenv()
    args = parser.parse_args(argv)
    configure_logging(args.level or os.getenv('LOG_LEVEL', 'INFO'))
    logger = logging.getLogger(__name__)
    try:
        settings = load_settings(args)
    except ValueError as e:
        logger.error(f'Invalid configuration: {e}')
        return 1
    run(settings)
    return 0

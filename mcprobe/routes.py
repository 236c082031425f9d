"""HTTP surface: JSON endpoints over the status probes (aiohttp)."""
import logging
from datetime import datetime, timezone

from aiohttp import web

from .combinators import TIMED_OUT, with_deadline
from .config import BEDROCK_PORT, JAVA_PORT, Settings
from .errors import InvalidInput, ProbeError, ProbeTimeout
from .prober import StatusProber
from .registry import SocketRegistry
from .results import ProbeTarget

logger = logging.getLogger(__name__)

SETTINGS_KEY = web.AppKey('settings', Settings)
REGISTRY_KEY = web.AppKey('registry', SocketRegistry)
PROBER_KEY = web.AppKey('prober', StatusProber)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Origin, X-Requested-With, Content-Type, Accept',
}

routes = web.RouteTableDef()


def now_utc():
    return datetime.now(timezone.utc)


def require_ip(request):
    ip = request.query.get('ip', '').strip()
    if not ip:
        raise InvalidInput('please provide a server IP or domain')
    return ip


def parse_port(raw, default, label='port'):
    if raw is None or raw == '':
        return default
    port = int(raw) if raw.isascii() and raw.isdigit() else 0
    if not 1 <= port <= 65535:
        raise InvalidInput(f'invalid {label}, it must be a number between 1 and 65535')
    return port


def outcome_response(outcome):
    return web.json_response(outcome.to_dict(), status=200 if outcome.ok else 404)


async def detect_response(request, host, java_port, bedrock_port):
    settings = request.app[SETTINGS_KEY]
    prober = request.app[PROBER_KEY]
    detection = await with_deadline(prober.auto_detect(host, java_port, bedrock_port), settings.detect_timeout)
    if detection is TIMED_OUT:
        raise ProbeTimeout(
            'server edition auto-detection timed out, specify the edition parameter or try again later',
            cause=f'auto-detection timed out after {settings.detect_timeout}s',
        )
    return outcome_response(detection)


@routes.get('/')
async def index(request):
    return web.json_response({'success': True, 'message': 'API is running', 'time': now_utc().isoformat()})


@routes.get('/mcserver')
async def mcserver(request):
    ip = require_ip(request)
    edition = (request.query.get('edition') or 'java').lower()
    port = parse_port(request.query.get('port'), BEDROCK_PORT if edition == 'bedrock' else JAVA_PORT)
    prober = request.app[PROBER_KEY]

    if request.query.get('auto', 'false').lower() == 'true':
        # a non-default port is assumed to be shared by both editions
        bedrock_port = BEDROCK_PORT if port == JAVA_PORT else port
        return await detect_response(request, ip, port, bedrock_port)
    if edition == 'bedrock':
        return outcome_response(await prober.bedrock(ProbeTarget(ip, port)))
    return outcome_response(await prober.java(ProbeTarget(ip, port)))


@routes.get('/bedrock')
async def bedrock(request):
    ip = require_ip(request)
    port = parse_port(request.query.get('port'), BEDROCK_PORT)
    return outcome_response(await request.app[PROBER_KEY].bedrock(ProbeTarget(ip, port)))


@routes.get('/auto')
async def auto(request):
    ip = require_ip(request)
    java_port = parse_port(request.query.get('javaPort'), JAVA_PORT, label='java port')
    bedrock_port = parse_port(request.query.get('bedrockPort'), BEDROCK_PORT, label='bedrock port')
    return await detect_response(request, ip, java_port, bedrock_port)


@web.middleware
async def cors_middleware(request, handler):
    response = await handler(request)
    response.headers.update(CORS_HEADERS)
    return response


@web.middleware
async def error_middleware(request, handler):
    try:
        return await handler(request)
    except ProbeError as e:
        body = {'success': False, 'message': e.message}
        if e.cause is not None:
            body['error'] = e.cause
        if e.status >= 500:
            logger.error(f"Probe error on {request.path}: {e.message}")
        return web.json_response(body, status=e.status)
    except web.HTTPException as e:
        if e.status in (404, 405):
            return web.json_response({'success': False, 'message': 'not found'}, status=404)
        raise
    except Exception as e:
        logger.error(f"❌ Unhandled error on {request.path_qs}: {e}", exc_info=True)
        development = request.app[SETTINGS_KEY].development
        return web.json_response({
            'success': False,
            'message': 'internal server error',
            'error': str(e) if development else 'contact the administrator',
        }, status=500)


async def shutdown_handler(app):
    """Force-close UDP sockets still open when the server stops"""
    closed = app[REGISTRY_KEY].force_close_all()
    if closed:
        logger.info(f"🧹 Closed {closed} lingering UDP socket(s)")


def create_app(settings=None, prober=None):
    settings = settings or Settings()
    registry = prober.registry if prober is not None else SocketRegistry()
    app = web.Application(middlewares=[cors_middleware, error_middleware])
    app[SETTINGS_KEY] = settings
    app[REGISTRY_KEY] = registry
    app[PROBER_KEY] = prober or StatusProber(settings, registry)
    app.add_routes(routes)
    app.on_shutdown.append(shutdown_handler)
    return app

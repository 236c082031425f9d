"""Status queries delegated to mcstatus.

These are the only functions that speak the edition wire protocols. The
probes treat them as opaque and accept substitutes with the same signature.
"""
import asyncio
import logging
import struct

from mcstatus import BedrockServer, JavaServer

from .errors import ProbeFailure, ProbeTimeout

logger = logging.getLogger(__name__)

# raised by mcstatus for refused, truncated or garbled responses
QUERY_ERRORS = (OSError, EOFError, ValueError, struct.error)


async def query_java_status(host, port, timeout):
    """Handshake + status request; returns the raw status JSON with a ``ping`` key added."""
    server = JavaServer(host, port, timeout=timeout)
    try:
        status = await asyncio.wait_for(server.async_status(), timeout)
    except asyncio.TimeoutError as e:
        raise ProbeTimeout(f"java status query timed out after {timeout}s") from e
    except QUERY_ERRORS as e:
        raise ProbeFailure(str(e) or type(e).__name__) from e
    payload = dict(status.raw)
    payload['ping'] = status.latency
    logger.debug(f"Java status from {host}:{port}: {payload.get('version')}")
    return payload


async def query_bedrock_status(host, port, timeout):
    server = BedrockServer(host, port, timeout=timeout)
    try:
        status = await asyncio.wait_for(server.async_status(), timeout)
    except asyncio.TimeoutError as e:
        raise ProbeTimeout(f"bedrock status query timed out after {timeout}s") from e
    except QUERY_ERRORS as e:
        raise ProbeFailure(str(e) or type(e).__name__) from e
    logger.debug(f"Bedrock status from {host}:{port}: {status.version.name}")
    return {
        'version': status.version.name,
        'players_online': status.players.online,
        'players_max': status.players.max,
        'motd': status.motd.to_plain(),
    }

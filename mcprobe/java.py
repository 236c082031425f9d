"""Java edition status probe: TCP connect latency alongside the status query."""
import asyncio
import logging
from typing import Optional

from .normalize import normalize_description, normalize_version
from .queries import query_java_status
from .results import (Edition, Failure, LatencyEstimate, LatencySource, ProbeTarget, StatusResult,
                      Success, reconcile_latency, reported_latency)

logger = logging.getLogger(__name__)

JAVA_UNREACHABLE = 'cannot reach java server'


async def measure_tcp_latency(target: ProbeTarget, timeout: float) -> Optional[LatencyEstimate]:
    """Time a bare TCP connect (no handshake). None if it cannot connect in time."""
    loop = asyncio.get_running_loop()
    started = loop.time()
    try:
        _, writer = await asyncio.wait_for(asyncio.open_connection(target.host, target.port), timeout)
    except asyncio.TimeoutError:
        logger.debug(f"TCP connect to {target.address} timed out after {timeout}s")
        return None
    except OSError as e:
        logger.debug(f"TCP connect to {target.address} failed: {e}")
        return None
    elapsed = int((loop.time() - started) * 1000)
    writer.close()
    try:
        await writer.wait_closed()
    except OSError as e:
        logger.debug(f"Error closing TCP probe connection to {target.address}: {e}")
    return LatencyEstimate(elapsed, LatencySource.MEASURED)


async def probe_java(target, settings, query=query_java_status, connect=measure_tcp_latency):
    # settle both: a failed connect measurement must never fail the query
    latency, status = await asyncio.gather(
        connect(target, settings.java_connect_timeout),
        query(target.host, target.port, settings.java_query_timeout),
        return_exceptions=True,
    )
    if isinstance(status, Exception):
        logger.info(f"Java probe of {target.address} failed: {status}")
        return Failure(JAVA_UNREACHABLE, str(status) or type(status).__name__)
    measured = latency if isinstance(latency, LatencyEstimate) else None

    try:
        estimate = reconcile_latency(measured, reported_latency(status.get('ping')))
        players = status['players']
        result = StatusResult(
            edition=Edition.JAVA,
            version=normalize_version(status.get('version')),
            online_players=int(players['online']),
            max_players=int(players['max']),
            description=normalize_description(status.get('description')),
            favicon=status.get('favicon'),
            ping=estimate.value,
            server_address=target.address,
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Malformed java status from {target.address}: {e!r}")
        return Failure(JAVA_UNREACHABLE, f"malformed status response: {e}")
    logger.debug(f"Java {target.address} ping {estimate.value}ms ({estimate.source.value})")
    return Success(result)

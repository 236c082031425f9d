"""Bedrock edition status probe: UDP ping latency alongside the status query."""
import asyncio
import logging

from .combinators import TIMED_OUT, with_deadline
from .normalize import strip_formatting
from .queries import query_bedrock_status
from .results import Edition, Failure, LatencyEstimate, StatusResult, Success, reconcile_latency
from .udp_ping import probe_udp_latency

logger = logging.getLogger(__name__)

BEDROCK_UNREACHABLE = 'cannot reach bedrock server'


async def probe_bedrock(target, settings, registry=None, query=query_bedrock_status):
    ping = with_deadline(
        probe_udp_latency(target, attempts=settings.udp_attempts, deadline=settings.udp_deadline, registry=registry),
        settings.ping_cap,
    )
    lookup = query(target.host, target.port, settings.bedrock_query_timeout)
    settled = await with_deadline(asyncio.gather(ping, lookup, return_exceptions=True), settings.bedrock_deadline)
    if settled is TIMED_OUT:
        logger.info(f"Bedrock probe of {target.address} timed out after {settings.bedrock_deadline}s")
        return Failure(BEDROCK_UNREACHABLE, f"bedrock probe timed out after {settings.bedrock_deadline}s")

    latency, status = settled
    if isinstance(status, Exception):
        logger.info(f"Bedrock probe of {target.address} failed: {status}")
        return Failure(BEDROCK_UNREACHABLE, str(status) or type(status).__name__)
    if isinstance(latency, Exception):
        logger.debug(f"UDP ping to {target.address} raised {latency!r}, using default latency")
    measured = latency if isinstance(latency, LatencyEstimate) else None
    estimate = reconcile_latency(measured)

    try:
        result = StatusResult(
            edition=Edition.BEDROCK,
            version=str(status['version']),
            online_players=int(status['players_online']),
            max_players=int(status['players_max']),
            description=strip_formatting(str(status['motd'] or '')),
            ping=estimate.value,
            server_address=target.address,
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Malformed bedrock status from {target.address}: {e!r}")
        return Failure(BEDROCK_UNREACHABLE, f"malformed status response: {e}")
    return Success(result)

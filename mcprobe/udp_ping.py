"""Round-trip latency over RakNet unconnected pings (Bedrock edition, UDP)."""
import asyncio
import logging
from typing import List, Optional

from .registry import SocketRegistry
from .results import LatencyEstimate, LatencySource, ProbeTarget

logger = logging.getLogger(__name__)

# id 0x01, zeroed 8-byte timestamp, offline magic and a fixed client id.
# The server only has to echo a pong, so the contents never change.
UNCONNECTED_PING = bytes([
    0x01,
    0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
    0x00, 0xff, 0xff, 0x00, 0xfe, 0xfe, 0xfe, 0xfe,
    0xfd, 0xfd, 0xfd, 0xfd, 0x12, 0x34, 0x56, 0x78,
])


class _DatagramQueue(asyncio.DatagramProtocol):
    def __init__(self):
        self.queue = asyncio.Queue()

    def datagram_received(self, data, addr):
        self.queue.put_nowait(data)

    def error_received(self, exc):
        self.queue.put_nowait(exc)

    def connection_lost(self, exc):
        # wakes a pending receive() if the transport is swept from under us
        self.queue.put_nowait(exc or ConnectionAbortedError('UDP transport closed'))


class UdpSession:
    """A UDP transport aimed at one target, released on every exit path.

    Use as ``async with UdpSession(target, registry) as session``. The
    transport is registered with ``registry`` while open so a shutdown sweep
    can reach it; close() is idempotent.
    """

    def __init__(self, target: ProbeTarget, registry: Optional[SocketRegistry] = None):
        self.target = target
        self.registry = registry
        self.transport = None
        self.protocol = None
        self._closed = False

    async def __aenter__(self):
        loop = asyncio.get_running_loop()
        self.transport, self.protocol = await loop.create_datagram_endpoint(
            _DatagramQueue, remote_addr=(self.target.host, self.target.port))
        if self.registry is not None:
            self.registry.register(self.transport)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, payload: bytes):
        self.transport.sendto(payload)

    async def receive(self) -> bytes:
        item = await self.protocol.queue.get()
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        if self._closed or self.transport is None:
            return
        self._closed = True
        self.transport.close()
        if self.registry is not None:
            self.registry.unregister(self.transport)


async def _exchange(session: UdpSession, attempts: int, samples: List[int]):
    loop = asyncio.get_running_loop()
    for _ in range(attempts):
        sent_at = loop.time()
        session.send(UNCONNECTED_PING)
        # any inbound datagram counts as the pong for the latest ping
        await session.receive()
        samples.append(int((loop.time() - sent_at) * 1000))


async def _measure(target: ProbeTarget, attempts: int, registry: Optional[SocketRegistry], samples: List[int]):
    async with UdpSession(target, registry) as session:
        await _exchange(session, attempts, samples)


async def probe_udp_latency(target: ProbeTarget, attempts: int = 2, deadline: float = 1.2,
                            registry: Optional[SocketRegistry] = None) -> Optional[LatencyEstimate]:
    """Average ``attempts`` sequential ping round trips, all within one ``deadline``.

    Returns the floored mean of whatever samples arrived before the deadline,
    or None when none did. Socket errors (including an ICMP port-unreachable)
    give None straight away.
    """
    samples: List[int] = []
    try:
        await asyncio.wait_for(_measure(target, attempts, registry, samples), deadline)
    except asyncio.TimeoutError:
        logger.debug(f"UDP ping to {target.address} hit its {deadline}s deadline with {len(samples)}/{attempts} replies")
    except OSError as e:
        logger.debug(f"UDP ping to {target.address} failed: {e}")
        return None
    if not samples:
        return None
    return LatencyEstimate(sum(samples) // len(samples), LatencySource.MEASURED)

"""Advisory registry of open UDP transports, swept at shutdown."""
import logging

logger = logging.getLogger(__name__)


class SocketRegistry:
    """Tracks transports that are currently open.

    Each probe closes its own transport; the registry only exists so the
    shutdown hook can force-close whatever is still in flight. Removal is
    idempotent because both paths may race to it.
    """

    def __init__(self):
        self._open = set()

    def register(self, transport):
        self._open.add(transport)

    def unregister(self, transport):
        self._open.discard(transport)

    def force_close_all(self):
        stragglers = list(self._open)
        self._open.clear()
        for transport in stragglers:
            try:
                transport.close()
            except Exception as e:
                logger.warning(f"Error closing UDP transport: {e}")
        return len(stragglers)

    def __len__(self):
        return len(self._open)

    def __contains__(self, transport):
        return transport in self._open

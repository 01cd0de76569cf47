"""Connection admission control for the WebSocket gateway.

Manages the pool of admitted WebSocket connections and enforces the
MAX_CONCURRENT_CONNECTIONS limit:

1. Semaphore acquisition (with timeout) reserves a slot
2. Lock-protected bookkeeping tracks the admitted connection ids

Example:
    handler = ConnectionHandler(max_connections=100)

    if not await handler.connect(connection_id):
        ...  # reject: server at capacity
    try:
        ...  # run the message loop
    finally:
        await handler.disconnect(connection_id)
"""

import asyncio
import logging

from ..config import MAX_CONCURRENT_CONNECTIONS, WS_HANDSHAKE_ACQUIRE_TIMEOUT_S

logger = logging.getLogger(__name__)


class ConnectionHandler:
    """Admits connections up to a concurrency limit.

    Attributes:
        max_connections: Maximum allowed concurrent connections.
        acquire_timeout: Max seconds to wait for a connection slot.
        active_connections: Ids of the currently admitted connections.
    """

    def __init__(
        self,
        max_connections: int | None = None,
        acquire_timeout: float = WS_HANDSHAKE_ACQUIRE_TIMEOUT_S,
    ):
        if max_connections is None:
            max_connections = MAX_CONCURRENT_CONNECTIONS
        if max_connections <= 0:
            raise ValueError("max_connections must be positive")
        self.max_connections = max_connections
        self.acquire_timeout = acquire_timeout
        self.active_connections: set[str] = set()
        self._lock = asyncio.Lock()
        self._semaphore = asyncio.Semaphore(max_connections)

    async def connect(self, connection_id: str) -> bool:
        """Reserve a slot for ``connection_id``.

        Returns:
            True if the connection was admitted, False if at capacity.
        """
        try:
            await asyncio.wait_for(self._semaphore.acquire(), timeout=self.acquire_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Connection rejected: at capacity (%s/%s)",
                len(self.active_connections),
                self.max_connections,
            )
            return False

        try:
            async with self._lock:
                self.active_connections.add(connection_id)
                logger.info(
                    "Connection accepted: %s/%s active",
                    len(self.active_connections),
                    self.max_connections,
                )
                return True
        except BaseException:
            self._semaphore.release()
            raise

    async def disconnect(self, connection_id: str) -> None:
        """Release the slot held by ``connection_id`` (idempotent)."""
        should_release = False
        async with self._lock:
            if connection_id in self.active_connections:
                self.active_connections.remove(connection_id)
                should_release = True
                logger.info(
                    "Connection removed: %s/%s active",
                    len(self.active_connections),
                    self.max_connections,
                )
        if should_release:
            self._semaphore.release()

    def get_connection_count(self) -> int:
        return len(self.active_connections)

    def get_capacity_info(self) -> dict:
        """Get capacity information.

        Returns:
            Dict with active, max, and available connection counts
        """
        active = len(self.active_connections)
        return {
            "active": active,
            "max": self.max_connections,
            "available": self.max_connections - active,
            "at_capacity": active >= self.max_connections,
        }


__all__ = ["ConnectionHandler"]

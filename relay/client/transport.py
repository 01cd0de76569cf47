"""Client transports: an inbound async stream plus an outbound send.

The correlation engine only needs four things from a connection: whether
it is open, a way to send one text frame, an async iterator over inbound
frames that ends when the connection closes, and a way to close it.
``WebSocketTransport`` provides them over the ``websockets`` asyncio client;
tests substitute in-memory doubles with the same shape.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable
from collections.abc import AsyncIterator

from websockets.protocol import State
from websockets.exceptions import ConnectionClosedOK, ConnectionClosedError
from websockets.asyncio.client import ClientConnection, connect

from ..config.client import CONNECT_TIMEOUT_S
from ..config.websocket import WS_CLOSE_NORMAL_CODE

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Bidirectional text-frame connection consumed by one reader."""

    @property
    def is_open(self) -> bool: ...

    @property
    def close_code(self) -> int | None: ...

    @property
    def close_reason(self) -> str | None: ...

    async def send(self, frame: str) -> None: ...

    def __aiter__(self) -> AsyncIterator[str]: ...

    async def close(self) -> None: ...


class WebSocketTransport:
    """Transport over a ``websockets`` client connection."""

    def __init__(self, ws: ClientConnection) -> None:
        self._ws = ws

    @classmethod
    async def open(cls, url: str, *, open_timeout: float = CONNECT_TIMEOUT_S) -> WebSocketTransport:
        ws = await connect(url, open_timeout=open_timeout, max_queue=None)
        logger.info("connected to %s", url)
        return cls(ws)

    @property
    def is_open(self) -> bool:
        return self._ws.state is State.OPEN

    @property
    def close_code(self) -> int | None:
        return self._ws.close_code

    @property
    def close_reason(self) -> str | None:
        return self._ws.close_reason

    async def send(self, frame: str) -> None:
        await self._ws.send(frame)

    async def __aiter__(self) -> AsyncIterator[str]:
        try:
            async for message in self._ws:
                if isinstance(message, bytes):
                    message = message.decode("utf-8", errors="replace")
                yield message
        except ConnectionClosedOK:
            return
        except ConnectionClosedError as exc:
            logger.info("connection closed abnormally: %s", exc)

    async def close(self) -> None:
        await self._ws.close(code=WS_CLOSE_NORMAL_CODE)


__all__ = ["Transport", "WebSocketTransport"]

"""High-level session client.

``SessionClient`` wraps one connection and tracks the single session the
client currently belongs to:

    async with SessionClient("ws://localhost:8080/ws") as client:
        unsubscribe = client.on_message(print)
        session_id = await client.create_session()
        await client.send_message("hello")
        unsubscribe()

Server refusals raise ``CommandFailedError``; local misuse (not connected,
not in a session) fails fast without touching the wire.
"""

from __future__ import annotations

import logging
import itertools
from typing import Any
from functools import partial
from collections.abc import Callable, Awaitable

from .transport import Transport, WebSocketTransport
from .correlation import CorrelationEngine
from ..protocol.envelopes import build_command, is_success
from ..config.client import COMMAND_TIMEOUT_S, CONNECT_TIMEOUT_S, DEFAULT_SERVER_URL
from ..config.protocol import KEY_ID, KEY_PAYLOAD, CMD_JOIN, CMD_LEAVE, CMD_CREATE, CMD_MESSAGE
from ..errors.client import (
    NotConnectedError,
    NotInSessionError,
    CommandFailedError,
    AlreadyConnectedError,
    ConnectionClosedError,
    ConnectionFailedError,
)

logger = logging.getLogger(__name__)

MessageHandler = Callable[[str], Any]
TransportFactory = Callable[[str], Awaitable[Transport]]


class SessionClient:
    """Client facade for creating, joining and messaging relay sessions.

    Attributes:
        url: WebSocket URL of the relay endpoint.
        timeout_s: Per-command response timeout.
    """

    def __init__(
        self,
        url: str = DEFAULT_SERVER_URL,
        *,
        timeout_s: float = COMMAND_TIMEOUT_S,
        open_timeout_s: float = CONNECT_TIMEOUT_S,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        self.url = url
        self.timeout_s = float(timeout_s)
        self._transport_factory = transport_factory or partial(WebSocketTransport.open, open_timeout=open_timeout_s)
        self._engine: CorrelationEngine | None = None
        self._session_id: str | None = None
        self._handlers: dict[int, MessageHandler] = {}
        self._handler_ids = itertools.count()

    # ============================================================================
    # Connection
    # ============================================================================
    @property
    def is_connected(self) -> bool:
        return self._engine is not None and self._engine.is_open

    @property
    def current_session_id(self) -> str | None:
        return self._session_id

    async def connect(self) -> None:
        """Open the connection and start reading frames.

        Raises:
            AlreadyConnectedError: The client is already connected.
            ConnectionFailedError: The connection could not be opened.
        """
        if self.is_connected:
            raise AlreadyConnectedError()
        if self._engine is not None:
            # connection dropped underneath us; release it before reopening
            await self.disconnect()
        try:
            transport = await self._transport_factory(self.url)
        except Exception as exc:
            raise ConnectionFailedError(f"Failed to connect to {self.url}: {exc}") from exc

        engine = CorrelationEngine(
            transport,
            on_relayed=self._dispatch_relayed,
            on_closed=partial(self._handle_closed, transport),
            timeout_s=self.timeout_s,
        )
        self._engine = engine
        self._session_id = None
        engine.start()

    async def disconnect(self) -> None:
        """Close the connection; pending commands fail with ConnectionClosedError."""
        engine = self._engine
        self._engine = None
        self._session_id = None
        if engine is not None:
            await engine.close()

    async def __aenter__(self) -> SessionClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.disconnect()

    # ============================================================================
    # Session commands
    # ============================================================================
    async def create_session(self) -> str:
        """Create a session; the server makes this client its first member.

        Returns:
            The new session id, which becomes the current session.
        """
        response = await self._request(CMD_CREATE, "create session")
        session_id = response.get(KEY_ID)
        if not isinstance(session_id, str):
            raise CommandFailedError("create session", response)
        self._session_id = session_id
        return session_id

    async def join_session(self, session_id: str) -> str:
        response = await self._request(CMD_JOIN, "join session", **{KEY_ID: session_id})
        joined = response.get(KEY_ID)
        self._session_id = joined if isinstance(joined, str) else session_id
        return self._session_id

    async def leave_session(self) -> None:
        session_id = self._require_session()
        await self._request(CMD_LEAVE, "leave session", **{KEY_ID: session_id})
        if self._session_id == session_id:
            self._session_id = None

    async def send_message(self, payload: str) -> None:
        """Relay ``payload`` verbatim to every other member of the current session."""
        session_id = self._require_session()
        await self._request(
            CMD_MESSAGE,
            "send message",
            **{KEY_ID: session_id, KEY_PAYLOAD: payload},
        )

    # ============================================================================
    # Relayed frames
    # ============================================================================
    def on_message(self, handler: MessageHandler) -> Callable[[], None]:
        """Subscribe to relayed frames; returns an idempotent unsubscribe."""
        handler_id = next(self._handler_ids)
        self._handlers[handler_id] = handler

        def unsubscribe() -> None:
            self._handlers.pop(handler_id, None)

        return unsubscribe

    def _dispatch_relayed(self, frame: str) -> None:
        for handler in list(self._handlers.values()):
            try:
                handler(frame)
            except Exception:  # noqa: BLE001
                logger.exception("message handler failed")

    # ============================================================================
    # Internals
    # ============================================================================
    def _require_session(self) -> str:
        if self._session_id is None:
            raise NotInSessionError()
        return self._session_id

    async def _request(self, msg_type: str, operation: str, **fields: Any) -> dict[str, Any]:
        engine = self._engine
        if engine is None:
            raise NotConnectedError()
        response = await engine.send_command(build_command(msg_type, **fields))
        if not is_success(response):
            raise CommandFailedError(operation, response)
        return response

    def _handle_closed(self, transport: Transport, exc: ConnectionClosedError) -> None:
        engine = self._engine
        if engine is not None and engine.transport is not transport:
            return
        logger.info("session connection closed: %s", exc)
        self._session_id = None


__all__ = ["SessionClient"]

"""Primary WebSocket connection handler orchestration.

This module contains the entry point for every client connection. It
orchestrates:

1. Connection Setup:
   - Connection admission (capacity check, 1013 on rejection)
   - Registration of the member with the session registry
   - Lifecycle watchdog initialization

2. Message Routing:
   - create  - allocate a new empty session
   - join    - become a member of a session
   - leave   - stop being a member of a session
   - message - relay a payload to the other members

3. Rate Limiting:
   - Per-connection sliding-window command limit

4. Cleanup:
   - Implicit leave of the connection's session (no response is sent)
   - Connection slot release
"""

from __future__ import annotations

import uuid
import logging
import contextlib

import anyio
from fastapi import WebSocket

from .helpers import safe_send_json
from ...logging import log_context
from .errors import reject_connection
from .lifecycle import WebSocketLifecycle
from .message_loop import run_message_loop
from .disconnects import is_expected_disconnect
from ..limits import SlidingWindowRateLimiter
from ...telemetry import get_metrics
from ...state.session import Member
from ...runtime.dependencies import RuntimeDeps
from ...protocol.envelopes import build_response
from ...config.websocket import WS_CLOSE_BUSY_CODE
from ...config.protocol import KEY_REASON, RESPONSE_ERROR, REASON_INTERNAL_ERROR, REASON_SERVER_AT_CAPACITY

logger = logging.getLogger(__name__)


def _remote_label(ws: WebSocket) -> str:
    client = ws.client
    if client is None:
        return "-"
    return f"{client.host}:{client.port}"


async def _prepare_connection(ws: WebSocket, connection_id: str, runtime_deps: RuntimeDeps) -> bool:
    """Admit a WebSocket connection or reject it when at capacity.

    Returns:
        True if connection was accepted, False if rejected.
    """
    connections = runtime_deps.connections
    if not await connections.connect(connection_id):
        get_metrics().connections_rejected_total.add(1, {"reason": "capacity"})
        capacity_info = connections.get_capacity_info()
        await reject_connection(
            ws,
            reason=REASON_SERVER_AT_CAPACITY,
            close_code=WS_CLOSE_BUSY_CODE,
            extra={"capacity": capacity_info},
        )
        return False

    await ws.accept()
    return True


async def _cleanup_connection(member: Member, runtime_deps: RuntimeDeps) -> None:
    session_id = await runtime_deps.registry.disconnect(member.connection_id)
    await runtime_deps.connections.disconnect(member.connection_id)
    get_metrics().active_connections.add(-1)
    logger.info(
        "WebSocket connection closed (session=%s). Active: %s",
        session_id or "-",
        runtime_deps.connections.get_connection_count(),
    )


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    """Handle a WebSocket connection from admission to teardown.

    1. Admits the connection (or rejects it at capacity)
    2. Registers the member and starts the idle watchdog
    3. Runs the message loop until the peer disconnects or goes idle
    4. Removes the member from its session and releases its slot

    Args:
        ws: The incoming WebSocket connection from FastAPI.
        runtime_deps: Process-wide services built at startup.
    """
    connection_id = uuid.uuid4().hex
    with log_context(client_id=connection_id[:8]):
        if not await _prepare_connection(ws, connection_id, runtime_deps):
            return

        member = Member(connection_id=connection_id, websocket=ws, remote=_remote_label(ws))
        await runtime_deps.registry.attach(member)
        get_metrics().active_connections.add(1)

        limiter = SlidingWindowRateLimiter(
            limit=runtime_deps.message_limit,
            window_seconds=runtime_deps.message_window_s,
        )
        lifecycle = WebSocketLifecycle(
            ws,
            idle_timeout_s=runtime_deps.idle_timeout_s,
            watchdog_tick_s=runtime_deps.watchdog_tick_s,
        )
        lifecycle.start()

        logger.info(
            "WebSocket connection accepted from %s. Active: %s",
            member.remote,
            runtime_deps.connections.get_connection_count(),
        )

        try:
            await run_message_loop(member, lifecycle, limiter, runtime_deps)
        except Exception as exc:  # noqa: BLE001
            if is_expected_disconnect(exc):
                logger.info("WebSocket disconnected: %s", type(exc).__name__)
            else:
                logger.exception("WebSocket error")
                with contextlib.suppress(Exception):
                    await safe_send_json(
                        ws,
                        build_response(RESPONSE_ERROR, **{KEY_REASON: REASON_INTERNAL_ERROR}),
                    )
        finally:
            # teardown must complete even when the server task is being cancelled
            with anyio.CancelScope(shield=True):
                await lifecycle.stop()
                if lifecycle.idle_timed_out():
                    logger.info("WebSocket closed for inactivity")
                await _cleanup_connection(member, runtime_deps)


__all__ = ["handle_websocket_connection"]

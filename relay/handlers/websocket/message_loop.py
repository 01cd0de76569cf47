"""WebSocket message loop and command dispatch.

One loop runs per admitted connection and handles its frames strictly in
arrival order, so responses on a connection are written in the order the
commands were received. Every frame yields exactly one response (success
or failure); relayed frames produced by the loop go to other members only.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

from .helpers import send_envelope
from ...logging import member_log_context
from .limits import consume_limiter
from .lifecycle import WebSocketLifecycle
from ..limits import SlidingWindowRateLimiter
from ...telemetry import get_metrics
from ...errors import ProtocolError, classify_error
from ...messages import COMMAND_HANDLERS
from ...state.session import Member
from ...runtime.dependencies import RuntimeDeps
from ...protocol.codec import extract_request_id, parse_command_frame
from ...protocol.envelopes import build_response, failure_response
from ...config.protocol import KEY_TYPE, KEY_REASON, KEY_REQUEST_ID, RESPONSE_ERROR, REASON_INTERNAL_ERROR

logger = logging.getLogger(__name__)

_DISCONNECT = "websocket.disconnect"


async def _recv_frame_with_watchdog(
    ws: WebSocket,
    lifecycle: WebSocketLifecycle,
) -> tuple[str | bytes | None, bool]:
    """Return ``(frame, should_close)``; frame is None on timeout or close."""
    try:
        message = await asyncio.wait_for(ws.receive(), timeout=lifecycle.watchdog_tick_s * 2)
    except asyncio.TimeoutError:
        return None, lifecycle.should_close()
    if message.get("type") == _DISCONNECT:
        logger.info("WS recv: disconnect code=%s", message.get("code"))
        return None, True
    text = message.get("text")
    if text is not None:
        return text, False
    data = message.get("bytes")
    if data is not None:
        return data, False
    return None, False


async def _dispatch_command(
    member: Member,
    msg: dict[str, Any],
    *,
    runtime_deps: RuntimeDeps,
) -> dict[str, Any]:
    msg_type = msg[KEY_TYPE]
    handler = COMMAND_HANDLERS[msg_type]
    logger.info("WS recv: %s", msg_type)
    return await handler(member, msg, registry=runtime_deps.registry)


async def handle_frame(
    member: Member,
    raw: str | bytes,
    limiter: SlidingWindowRateLimiter,
    *,
    runtime_deps: RuntimeDeps,
) -> None:
    """Parse, rate-limit, apply and answer one inbound frame."""
    request_id: Any = None
    try:
        msg = parse_command_frame(raw)
        request_id = extract_request_id(msg)
        with member_log_context(member, request_id=request_id):
            if not await consume_limiter(member, limiter, msg_type=msg[KEY_TYPE], request_id=request_id):
                return
            response = await _dispatch_command(member, msg, runtime_deps=runtime_deps)
            if request_id is not None:
                response[KEY_REQUEST_ID] = request_id
    except ProtocolError as exc:
        if exc.request_id is not None:
            request_id = exc.request_id
        get_metrics().command_errors_total.add(1, {"category": classify_error(exc)})
        logger.info("WS command rejected: %s (%s)", exc.response, exc.reason)
        response = failure_response(exc, request_id=request_id)
    except Exception:
        get_metrics().command_errors_total.add(1, {"category": "internal"})
        logger.exception("WebSocket command failed")
        response = build_response(
            RESPONSE_ERROR,
            request_id=request_id,
            **{KEY_REASON: REASON_INTERNAL_ERROR},
        )
    await send_envelope(member, response)


async def run_message_loop(
    member: Member,
    lifecycle: WebSocketLifecycle,
    limiter: SlidingWindowRateLimiter,
    runtime_deps: RuntimeDeps,
) -> None:
    """Receive, validate, and dispatch frames until the connection ends."""
    ws = member.websocket

    while True:
        raw, should_close = await _recv_frame_with_watchdog(ws, lifecycle)
        if raw is None:
            if should_close:
                break
            continue

        lifecycle.touch()
        await handle_frame(member, raw, limiter, runtime_deps=runtime_deps)


__all__ = ["handle_frame", "run_message_loop"]

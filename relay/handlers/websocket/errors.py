"""Shared response helpers for WebSocket error handling.

All failures are reported with the same envelope shape as any other
command response:

    {
        "response": "bad_request",         # success | error | bad_request | bad_message
        "reason": "session not found",     # Human-readable description
        "request_id": 7,                   # Echoed when the command carried one
        ...extra fields
    }

Common reasons used by the gateway (beyond the registry's own):
    - server at capacity: Connection limit reached
    - rate limit: ...: Too many commands per window
    - internal error: Unexpected server error
"""

from __future__ import annotations

from typing import Any

from fastapi import WebSocket

from .helpers import safe_send_json
from ...protocol.envelopes import build_response
from ...config.protocol import KEY_REASON, RESPONSE_ERROR


async def send_error(
    ws: WebSocket,
    *,
    reason: str,
    response: str = RESPONSE_ERROR,
    request_id: Any = None,
    extra: dict[str, Any] | None = None,
) -> bool:
    """Send a structured failure response to the client.

    Args:
        ws: The WebSocket connection.
        reason: Human-readable error description.
        response: Wire response kind.
        request_id: Request id to echo, if the command carried one.
        extra: Additional fields to include in the response.
    """
    fields: dict[str, Any] = {KEY_REASON: reason}
    if extra:
        fields.update(extra)
    return await safe_send_json(ws, build_response(response, request_id=request_id, **fields))


async def reject_connection(
    ws: WebSocket,
    *,
    reason: str,
    close_code: int,
    extra: dict[str, Any] | None = None,
) -> None:
    """Accept connection briefly to send an error, then close immediately.

    The client receives a meaningful response instead of a bare close code.

    Args:
        ws: The WebSocket connection to reject.
        reason: Human-readable rejection reason.
        close_code: WebSocket close code (e.g. 1013 try again later).
        extra: Additional fields for the error response.
    """
    await ws.accept()
    await send_error(ws, reason=reason, extra=extra)
    await ws.close(code=close_code)


__all__ = ["send_error", "reject_connection"]

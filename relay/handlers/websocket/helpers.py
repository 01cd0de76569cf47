"""Safe outbound helpers for gateway sockets.

Every frame written to a member goes through ``send_to_member`` so that the
member's send lock serializes it against concurrent writers (its own
responses and relayed frames fanned out by other connections' loops).
Disconnects during a send are reported as ``False`` rather than raised, so
one vanished peer never aborts a fan-out or a message loop.
"""

from __future__ import annotations

import logging
from typing import Any

from ...protocol.codec import encode_frame
from ...state.session import Member
from .disconnects import is_expected_disconnect

logger = logging.getLogger(__name__)


async def safe_send_text(ws: Any, text: str) -> bool:
    """Send text to the client, returning False if the socket is gone.

    Args:
        ws: The WebSocket connection.
        text: Raw text to send.

    Returns:
        True if sent successfully, False if the client disconnected.
    """
    try:
        await ws.send_text(text)
    except Exception as exc:
        if not is_expected_disconnect(exc):
            raise
        logger.info("WebSocket disconnected while sending %s chars", len(text))
        return False
    return True


async def safe_send_json(ws: Any, payload: dict[str, Any]) -> bool:
    """Send a control envelope, swallowing client disconnects."""
    return await safe_send_text(ws, encode_frame(payload))


async def send_to_member(member: Member, text: str) -> bool:
    """Send one frame to ``member`` under its send lock."""
    async with member.send_lock:
        return await safe_send_text(member.websocket, text)


async def send_envelope(member: Member, payload: dict[str, Any]) -> bool:
    """Send a control envelope to ``member`` under its send lock."""
    return await send_to_member(member, encode_frame(payload))


__all__ = [
    "safe_send_text",
    "safe_send_json",
    "send_to_member",
    "send_envelope",
]

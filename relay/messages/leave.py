"""Handler for the 'leave' command."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..config.protocol import KEY_ID
from ..protocol.envelopes import MISSING, success_response

if TYPE_CHECKING:
    from ..state.session import Member
    from ..handlers.registry import SessionRegistry


async def handle_leave_message(
    member: Member,
    msg: dict[str, Any],
    *,
    registry: SessionRegistry,
) -> dict[str, Any]:
    session_id = await registry.leave(member.connection_id, msg.get(KEY_ID, MISSING))
    return success_response(**{KEY_ID: session_id})

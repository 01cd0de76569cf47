"""Handler for the 'join' command.

Joining while already in another session moves the connection: the old
session is left first (and destroyed if that empties it).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..config.protocol import KEY_ID
from ..protocol.envelopes import MISSING, success_response

if TYPE_CHECKING:
    from ..state.session import Member
    from ..handlers.registry import SessionRegistry


async def handle_join_message(
    member: Member,
    msg: dict[str, Any],
    *,
    registry: SessionRegistry,
) -> dict[str, Any]:
    session_id = await registry.join(member.connection_id, msg.get(KEY_ID, MISSING))
    return success_response(**{KEY_ID: session_id})

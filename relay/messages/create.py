"""Handler for the 'create' command."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..config.protocol import KEY_ID
from ..protocol.envelopes import success_response

if TYPE_CHECKING:
    from ..state.session import Member
    from ..handlers.registry import SessionRegistry


async def handle_create_message(
    member: Member,
    msg: dict[str, Any],
    *,
    registry: SessionRegistry,
) -> dict[str, Any]:
    """Allocate a new session with the sender as its first member."""
    session_id = await registry.create(member.connection_id)
    return success_response(**{KEY_ID: session_id})

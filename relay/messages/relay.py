"""Handler for the 'message' command.

The payload is fanned out verbatim to every other member of the session
before the sender's ``sent`` acknowledgement is written, so a sender that
waits for the acknowledgement knows its peers' sockets already have the
frame queued.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..config.protocol import KEY_ID, KEY_STATUS, KEY_PAYLOAD, STATUS_SENT
from ..protocol.envelopes import MISSING, success_response

if TYPE_CHECKING:
    from ..state.session import Member
    from ..handlers.registry import SessionRegistry


async def handle_relay_message(
    member: Member,
    msg: dict[str, Any],
    *,
    registry: SessionRegistry,
) -> dict[str, Any]:
    await registry.message(
        member.connection_id,
        msg.get(KEY_ID, MISSING),
        msg.get(KEY_PAYLOAD, MISSING),
    )
    return success_response(**{KEY_STATUS: STATUS_SENT})

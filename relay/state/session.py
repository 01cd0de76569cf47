"""Registry-scoped dataclasses for sessions and their member connections.

Session:
    A named group of connections that relay payloads to one another. Member
    identities are kept in insertion order, which is also the fan-out order.

Member:
    One admitted WebSocket connection. Holds the server-assigned identity, the
    socket, the at-most-one current session reference, and the lock that
    serializes every outbound frame on that socket.
"""

from __future__ import annotations

import time
import asyncio
from typing import Any
from dataclasses import field, dataclass


@dataclass
class Session:
    """Membership state for one live session.

    Attributes:
        session_id: Opaque server-generated identifier.
        created_at: Timestamp of creation on the owning registry's clock.
        members: Connection ids of the current members, insertion ordered.
    """

    session_id: str
    created_at: float
    members: dict[str, None] = field(default_factory=dict)

    def contains(self, connection_id: str) -> bool:
        return connection_id in self.members

    def add_member(self, connection_id: str) -> bool:
        """Add a member; return False if it already belongs to the session."""
        if connection_id in self.members:
            return False
        self.members[connection_id] = None
        return True

    def remove_member(self, connection_id: str) -> bool:
        """Remove a member; return False if it was not a member."""
        if connection_id not in self.members:
            return False
        del self.members[connection_id]
        return True

    def peers_of(self, connection_id: str) -> list[str]:
        """Every member except ``connection_id``, in fan-out order."""
        return [cid for cid in self.members if cid != connection_id]

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def empty(self) -> bool:
        return not self.members


@dataclass
class Member:
    """One admitted connection as seen by the registry.

    Attributes:
        connection_id: Server-assigned identity (uuid hex).
        websocket: The socket frames are written to; owned by the gateway.
        remote: Printable peer address for logging.
        session_id: The session this connection currently belongs to.
        connected_at: Monotonic timestamp of admission.
        send_lock: Serializes outbound frames so responses and relayed
            frames never interleave on the socket.
    """

    connection_id: str
    websocket: Any
    remote: str = "-"
    session_id: str | None = None
    connected_at: float = field(default_factory=time.monotonic)
    send_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)


__all__ = ["Session", "Member"]

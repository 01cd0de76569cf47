"""Session registry: the single owner of live sessions and their members.

SessionRegistry is responsible for:

1. Session Lifecycle:
   - Allocating unique, unguessable session identifiers
   - Making the creating connection the first member of its session
   - Destroying sessions the moment their member set becomes empty

2. Membership:
   - Join / leave with the fixed validation order
     structural (missing or mistyped keys) -> referential (unknown session)
     -> state (already in / not in session)
   - At most one current session per connection; creating or joining
     another session leaves the previous one first
   - Implicit leave when a connection disconnects

3. Relay:
   - Broadcasting a payload verbatim to every member except the sender

All membership state is guarded by one ``asyncio.Lock``. A relay validates
and snapshots its recipients under the lock and delivers outside it, so the
relay is ordered against joins and leaves at the snapshot and slow peers
never block membership changes.
"""

from __future__ import annotations

import time
import asyncio
import logging
import secrets
from typing import Any
from collections.abc import Callable

from ..state.session import Member, Session
from ..protocol.envelopes import MISSING
from ..telemetry import get_metrics
from ..errors.protocol import BadRequestError, StateConflictError
from ..config.session import SESSION_ID_ALPHABET, SESSION_ID_LENGTH
from ..config.protocol import (
    KEY_ID,
    KEY_PAYLOAD,
    REASON_SESSION_NOT_FOUND,
    REASON_ALREADY_IN_SESSION,
    missing_key_reason,
    wrong_type_reason,
    not_in_session_reason,
)
from .websocket.helpers import send_to_member

logger = logging.getLogger(__name__)


TimeFn = Callable[[], float]


def generate_session_id(length: int = SESSION_ID_LENGTH, alphabet: str = SESSION_ID_ALPHABET) -> str:
    """Return a random session identifier drawn from ``alphabet``."""
    return "".join(secrets.choice(alphabet) for _ in range(length))


def _require_string(value: Any, key: str) -> str:
    if value is MISSING:
        raise BadRequestError(missing_key_reason(key))
    if not isinstance(value, str):
        raise BadRequestError(wrong_type_reason(key))
    return value


class SessionRegistry:
    """Owns every live session and the connections that belong to them.

    Constructed once at server start and injected into the gateway through
    ``RuntimeDeps``. Connections are attached when admitted and detached
    through ``disconnect`` when their socket closes.
    """

    def __init__(
        self,
        *,
        id_factory: Callable[[], str] | None = None,
        now_fn: TimeFn | None = None,
    ) -> None:
        self._sessions: dict[str, Session] = {}  # session_id -> session
        self._members: dict[str, Member] = {}  # connection_id -> member
        self._lock = asyncio.Lock()
        self._id_factory = id_factory or generate_session_id
        self._now = now_fn or time.monotonic

    # ============================================================================
    # Connection lifecycle
    # ============================================================================
    async def attach(self, member: Member) -> None:
        """Register an admitted connection so it can join sessions."""
        async with self._lock:
            self._members[member.connection_id] = member

    async def disconnect(self, connection_id: str) -> str | None:
        """Forget a connection, leaving its session if it had one.

        Returns:
            The id of the session the connection was removed from, if any.
        """
        async with self._lock:
            member = self._members.pop(connection_id, None)
            if member is None or member.session_id is None:
                return None
            session_id = member.session_id
            self._remove_from_session_locked(member, session_id)
        logger.info("connection %s left session %s on disconnect", connection_id, session_id)
        return session_id

    # ============================================================================
    # Commands
    # ============================================================================
    async def create(self, connection_id: str) -> str:
        """Create a session with ``connection_id`` as its first member.

        A creator already in another session leaves it first.

        Returns:
            The new session id.
        """
        async with self._lock:
            member = self._require_member_locked(connection_id)
            session_id = self._id_factory()
            while session_id in self._sessions:
                session_id = self._id_factory()

            previous = member.session_id
            if previous is not None:
                self._remove_from_session_locked(member, previous)
                logger.info("connection %s moved from session %s", connection_id, previous)

            session = Session(session_id=session_id, created_at=self._now())
            session.add_member(connection_id)
            self._sessions[session_id] = session
            member.session_id = session_id
        metrics = get_metrics()
        metrics.sessions_created_total.add(1)
        metrics.active_sessions.add(1)
        logger.info("connection %s created session %s", connection_id, session_id)
        return session_id

    async def join(self, connection_id: str, session_id: Any = MISSING) -> str:
        """Add ``connection_id`` to a session.

        Raises:
            BadRequestError: Missing/mistyped id or unknown session.
            StateConflictError: The connection already belongs to the session.
        """
        async with self._lock:
            member = self._require_member_locked(connection_id)
            session_id = _require_string(session_id, KEY_ID)
            session = self._sessions.get(session_id)
            if session is None:
                raise BadRequestError(REASON_SESSION_NOT_FOUND)
            if session.contains(connection_id):
                raise StateConflictError(REASON_ALREADY_IN_SESSION)

            previous = member.session_id
            if previous is not None and previous != session_id:
                self._remove_from_session_locked(member, previous)
                logger.info("connection %s moved from session %s", connection_id, previous)

            session.add_member(connection_id)
            member.session_id = session_id
            count = session.member_count
        logger.info("connection %s joined session %s (%s members)", connection_id, session_id, count)
        return session_id

    async def leave(self, connection_id: str, session_id: Any = MISSING) -> str:
        """Remove ``connection_id`` from a session, destroying it when emptied.

        Raises:
            BadRequestError: Missing/mistyped id, unknown session, or the
                connection is not a member of it.
        """
        async with self._lock:
            member = self._require_member_locked(connection_id)
            session_id = _require_string(session_id, KEY_ID)
            session = self._sessions.get(session_id)
            if session is None:
                raise BadRequestError(REASON_SESSION_NOT_FOUND)
            if not session.contains(connection_id):
                raise BadRequestError(not_in_session_reason(session_id))
            self._remove_from_session_locked(member, session_id)
        logger.info("connection %s left session %s", connection_id, session_id)
        return session_id

    async def message(
        self,
        connection_id: str,
        session_id: Any = MISSING,
        payload: Any = MISSING,
    ) -> int:
        """Relay ``payload`` verbatim to every other member of the session.

        Returns:
            The number of peers the frame was delivered to.

        Raises:
            BadRequestError: Missing/mistyped keys, unknown session, or the
                sender is not a member of the session.
        """
        async with self._lock:
            self._require_member_locked(connection_id)
            if session_id is MISSING:
                raise BadRequestError(missing_key_reason(KEY_ID))
            if payload is MISSING:
                raise BadRequestError(missing_key_reason(KEY_PAYLOAD))
            session_id = _require_string(session_id, KEY_ID)
            payload = _require_string(payload, KEY_PAYLOAD)
            session = self._sessions.get(session_id)
            if session is None:
                raise BadRequestError(REASON_SESSION_NOT_FOUND)
            if not session.contains(connection_id):
                raise BadRequestError(not_in_session_reason(session_id))
            recipients = [
                self._members[peer_id]
                for peer_id in session.peers_of(connection_id)
                if peer_id in self._members
            ]

        delivered = await self._deliver(recipients, payload)
        get_metrics().frames_relayed_total.add(delivered)
        logger.debug(
            "relayed %s chars from %s to %s/%s peers in session %s",
            len(payload),
            connection_id,
            delivered,
            len(recipients),
            session_id,
        )
        return delivered

    # ============================================================================
    # Queries
    # ============================================================================
    def has_session(self, session_id: str) -> bool:
        return session_id in self._sessions

    def members(self, session_id: str) -> list[str]:
        """Connection ids of a session's members (empty if unknown)."""
        session = self._sessions.get(session_id)
        if session is None:
            return []
        return list(session.members)

    def session_of(self, connection_id: str) -> str | None:
        member = self._members.get(connection_id)
        return member.session_id if member else None

    def get_member(self, connection_id: str) -> Member | None:
        return self._members.get(connection_id)

    def get_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    @property
    def connection_count(self) -> int:
        return len(self._members)

    # ============================================================================
    # Internals (caller holds the lock)
    # ============================================================================
    def _require_member_locked(self, connection_id: str) -> Member:
        member = self._members.get(connection_id)
        if member is None:
            raise StateConflictError("connection not registered")
        return member

    def _remove_from_session_locked(self, member: Member, session_id: str) -> None:
        member.session_id = None
        session = self._sessions.get(session_id)
        if session is None:
            return
        session.remove_member(member.connection_id)
        if session.empty:
            self._destroy_locked(session_id)

    def _destroy_locked(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return
        metrics = get_metrics()
        metrics.sessions_destroyed_total.add(1)
        metrics.active_sessions.add(-1)
        logger.info("destroyed session %s after %.1fs", session_id, max(0.0, self._now() - session.created_at))

    async def _deliver(self, recipients: list[Member], payload: str) -> int:
        if not recipients:
            return 0
        results = await asyncio.gather(
            *(send_to_member(peer, payload) for peer in recipients),
            return_exceptions=True,
        )
        delivered = 0
        for peer, result in zip(recipients, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "relay to %s failed: %s",
                    peer.connection_id,
                    result,
                    exc_info=result,
                )
            elif result:
                delivered += 1
        return delivered


__all__ = ["SessionRegistry", "generate_session_id"]

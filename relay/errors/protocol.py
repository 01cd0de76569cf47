"""Server-side protocol exceptions mapped onto wire response kinds.

Each exception carries the ``response`` kind it is reported as and a
human-readable ``reason``. The WebSocket gateway converts them into a
structured response on the originating connection; they never close the
connection.

Taxonomy:
    BadMessageError    -> "bad_message"  (unparseable or schema-violating frame)
    BadRequestError    -> "bad_request"  (missing/invalid key, unknown session)
    StateConflictError -> "error"        (conflicts with current membership)
"""

from __future__ import annotations

from typing import Any

from ..config.protocol import (
    RESPONSE_ERROR,
    RESPONSE_BAD_REQUEST,
    RESPONSE_BAD_MESSAGE,
)


class ProtocolError(Exception):
    """Structured command failure reported back to the issuing connection.

    Attributes:
        response: Wire response kind for this failure.
        reason: Human-readable description sent as the ``reason`` key.
        request_id: Request id recovered from the offending frame, when the
            failure was raised before the gateway could read it.
    """

    response = RESPONSE_ERROR

    def __init__(self, reason: str, *, request_id: Any = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.request_id = request_id


class BadMessageError(ProtocolError):
    """Frame is not valid JSON or does not name a known command type."""

    response = RESPONSE_BAD_MESSAGE


class BadRequestError(ProtocolError):
    """A required key is missing or invalid, or the target session is unknown."""

    response = RESPONSE_BAD_REQUEST


class StateConflictError(ProtocolError):
    """The command conflicts with the connection's current membership."""

    response = RESPONSE_ERROR


__all__ = [
    "ProtocolError",
    "BadMessageError",
    "BadRequestError",
    "StateConflictError",
]

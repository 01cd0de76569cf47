"""Control envelope builders shared by the server and the client.

Command envelope (client -> server):

    {"type": "join", "id": "k3x9qa", "request_id": 7}

Response envelope (server -> client):

    {"response": "success", "id": "k3x9qa", "request_id": 7}
    {"response": "bad_request", "reason": "session not found", "request_id": 7}

``request_id`` is optional on the wire; when a command carries one the
response echoes it unchanged.
"""

from __future__ import annotations

from typing import Any

from ..errors.protocol import ProtocolError
from ..config.protocol import (
    KEY_TYPE,
    KEY_REASON,
    KEY_RESPONSE,
    KEY_REQUEST_ID,
    RESPONSE_SUCCESS,
)


# Marks a command key that was absent from the envelope
MISSING: Any = object()


def build_command(msg_type: str, request_id: int | str | None = None, **fields: Any) -> dict[str, Any]:
    """Build a command envelope, omitting fields whose value is None."""
    envelope: dict[str, Any] = {KEY_TYPE: msg_type}
    for key, value in fields.items():
        if value is not None:
            envelope[key] = value
    if request_id is not None:
        envelope[KEY_REQUEST_ID] = request_id
    return envelope


def build_response(
    kind: str,
    *,
    request_id: Any = None,
    **fields: Any,
) -> dict[str, Any]:
    """Build a response envelope of the given kind."""
    envelope: dict[str, Any] = {KEY_RESPONSE: kind}
    envelope.update(fields)
    if request_id is not None:
        envelope[KEY_REQUEST_ID] = request_id
    return envelope


def success_response(*, request_id: Any = None, **fields: Any) -> dict[str, Any]:
    return build_response(RESPONSE_SUCCESS, request_id=request_id, **fields)


def failure_response(
    exc: ProtocolError,
    *,
    request_id: Any = None,
    **fields: Any,
) -> dict[str, Any]:
    """Render a protocol exception as its wire response."""
    return build_response(exc.response, request_id=request_id, **{KEY_REASON: exc.reason}, **fields)


def is_success(response: dict[str, Any]) -> bool:
    return response.get(KEY_RESPONSE) == RESPONSE_SUCCESS


__all__ = [
    "MISSING",
    "build_command",
    "build_response",
    "success_response",
    "failure_response",
    "is_success",
]

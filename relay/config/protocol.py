"""Wire protocol vocabulary shared by the server and the client.

Commands (client -> server):
    create   - allocate a new, empty session
    join     - become a member of a session (requires 'id')
    leave    - stop being a member of a session (requires 'id')
    message  - relay 'payload' to every other member of session 'id'

Response kinds (server -> client, carried in the 'response' key):
    success      - command applied
    bad_message  - frame is not valid JSON or has no usable 'type'
    bad_request  - a required key is missing/invalid or the session is unknown
    error        - command conflicts with current membership state
"""

from __future__ import annotations

# ============================================================================
# Envelope Keys
# ============================================================================

KEY_TYPE = "type"
KEY_ID = "id"
KEY_PAYLOAD = "payload"
KEY_REQUEST_ID = "request_id"
KEY_RESPONSE = "response"
KEY_REASON = "reason"
KEY_STATUS = "status"

# ============================================================================
# Command Types
# ============================================================================

CMD_CREATE = "create"
CMD_JOIN = "join"
CMD_LEAVE = "leave"
CMD_MESSAGE = "message"

COMMAND_TYPES = (CMD_CREATE, CMD_JOIN, CMD_LEAVE, CMD_MESSAGE)

# ============================================================================
# Response Kinds
# ============================================================================

RESPONSE_SUCCESS = "success"
RESPONSE_ERROR = "error"
RESPONSE_BAD_REQUEST = "bad_request"
RESPONSE_BAD_MESSAGE = "bad_message"

RESPONSE_KINDS = (
    RESPONSE_SUCCESS,
    RESPONSE_ERROR,
    RESPONSE_BAD_REQUEST,
    RESPONSE_BAD_MESSAGE,
)

STATUS_SENT = "sent"

# ============================================================================
# Reasons
# ============================================================================

REASON_SESSION_NOT_FOUND = "session not found"
REASON_ALREADY_IN_SESSION = "user already in session"
REASON_SERVER_AT_CAPACITY = "server at capacity"
REASON_INTERNAL_ERROR = "internal error"


def missing_key_reason(key: str) -> str:
    return f"missing key '{key}'"


def wrong_type_reason(key: str) -> str:
    return f"key '{key}' must be a string"


def unknown_type_reason(msg_type: object) -> str:
    return f"unknown key {msg_type}"


def not_in_session_reason(session_id: str) -> str:
    return f"user not in session {session_id}"


__all__ = [
    "KEY_TYPE",
    "KEY_ID",
    "KEY_PAYLOAD",
    "KEY_REQUEST_ID",
    "KEY_RESPONSE",
    "KEY_REASON",
    "KEY_STATUS",
    "CMD_CREATE",
    "CMD_JOIN",
    "CMD_LEAVE",
    "CMD_MESSAGE",
    "COMMAND_TYPES",
    "RESPONSE_SUCCESS",
    "RESPONSE_ERROR",
    "RESPONSE_BAD_REQUEST",
    "RESPONSE_BAD_MESSAGE",
    "RESPONSE_KINDS",
    "STATUS_SENT",
    "REASON_SESSION_NOT_FOUND",
    "REASON_ALREADY_IN_SESSION",
    "REASON_SERVER_AT_CAPACITY",
    "REASON_INTERNAL_ERROR",
    "missing_key_reason",
    "wrong_type_reason",
    "unknown_type_reason",
    "not_in_session_reason",
]

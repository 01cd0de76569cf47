"""Frame encoding and classification for the relay wire protocol.

Every frame on a connection is a single text message. Two shapes share the
channel:

- Control envelopes: JSON objects (commands upstream, responses downstream).
- Relayed frames: the verbatim payload of another member's ``message``
  command, with no envelope at all.

Server side, every inbound frame must be a command; anything else is a
``bad_message``. Client side, a frame can only be a control response when
it is a JSON object carrying both a string ``response`` and a
``request_id``, and the correlation engine additionally requires that id to
belong to a command it sent. Every other frame is a relayed frame.
"""

from __future__ import annotations

import json
from typing import Any

from ..errors.protocol import BadMessageError
from ..config.protocol import (
    KEY_TYPE,
    KEY_RESPONSE,
    KEY_REQUEST_ID,
    COMMAND_TYPES,
    missing_key_reason,
    unknown_type_reason,
)


def encode_frame(envelope: dict[str, Any]) -> str:
    """Serialize a control envelope to a compact JSON text frame."""
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def frame_to_text(raw: str | bytes) -> str:
    """Normalize a transport frame to text, decoding binary frames as UTF-8."""
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BadMessageError(f"parse error: frame is not valid UTF-8 ({exc.reason})") from exc
    return raw


def parse_command_frame(raw: str | bytes) -> dict[str, Any]:
    """Parse and validate the framing of an inbound command.

    Only frame-level structure is checked here: valid JSON, a ``type`` key,
    and a known command type. Per-command keys are validated by the
    registry so the structural-referential-state ordering stays in one place.

    Raises:
        BadMessageError: If the frame cannot be parsed, lacks ``type``, or
            names an unknown command.
    """
    text = frame_to_text(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise BadMessageError(f"parse error: {exc}") from exc

    request_id = extract_request_id(data)
    if not isinstance(data, dict) or KEY_TYPE not in data:
        raise BadMessageError(missing_key_reason(KEY_TYPE), request_id=request_id)

    msg_type = data[KEY_TYPE]
    if not isinstance(msg_type, str) or msg_type not in COMMAND_TYPES:
        label = msg_type if isinstance(msg_type, str) else json.dumps(msg_type)
        raise BadMessageError(unknown_type_reason(label), request_id=request_id)
    return data


def extract_request_id(data: Any) -> Any:
    """Return the request id carried by a decoded envelope, if any."""
    if isinstance(data, dict):
        return data.get(KEY_REQUEST_ID)
    return None


def decode_control_response(raw: str | bytes) -> dict[str, Any] | None:
    """Return the decoded frame if it has the shape of a control response, else None."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, dict):
        return None
    if not isinstance(data.get(KEY_RESPONSE), str) or KEY_REQUEST_ID not in data:
        return None
    return data


__all__ = [
    "encode_frame",
    "frame_to_text",
    "parse_command_frame",
    "extract_request_id",
    "decode_control_response",
]

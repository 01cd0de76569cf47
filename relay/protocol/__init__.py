"""Shared wire contract: envelope builders and frame codec."""

from .codec import (
    encode_frame,
    frame_to_text,
    parse_command_frame,
    extract_request_id,
    decode_control_response,
)
from .envelopes import (
    MISSING,
    build_command,
    build_response,
    success_response,
    failure_response,
    is_success,
)

__all__ = [
    "encode_frame",
    "frame_to_text",
    "parse_command_frame",
    "extract_request_id",
    "decode_control_response",
    "MISSING",
    "build_command",
    "build_response",
    "success_response",
    "failure_response",
    "is_success",
]

"""Unit tests for inbound command parsing and response classification."""

from __future__ import annotations

import pytest

from relay.errors import BadMessageError
from relay.protocol.codec import (
    encode_frame,
    extract_request_id,
    parse_command_frame,
    decode_control_response,
)


def test_parse_command_frame_accepts_known_types() -> None:
    msg = parse_command_frame('{"type":"join","id":"abc123","request_id":4}')
    assert msg == {"type": "join", "id": "abc123", "request_id": 4}
    assert extract_request_id(msg) == 4


def test_parse_command_frame_decodes_binary_frames() -> None:
    assert parse_command_frame(b'{"type":"create"}') == {"type": "create"}


def test_invalid_json_is_bad_message_with_parse_description() -> None:
    with pytest.raises(BadMessageError) as exc_info:
        parse_command_frame("{not json")
    assert exc_info.value.response == "bad_message"
    assert exc_info.value.reason.startswith("parse error:")


def test_invalid_utf8_is_bad_message() -> None:
    with pytest.raises(BadMessageError, match="parse error"):
        parse_command_frame(b"\xff\xfe")


@pytest.mark.parametrize("raw", ['{"id":"abc123"}', "[1,2,3]", '"create"', "42", "null"])
def test_missing_type_is_reported_for_any_json(raw: str) -> None:
    with pytest.raises(BadMessageError) as exc_info:
        parse_command_frame(raw)
    assert exc_info.value.reason == "missing key 'type'"


def test_unknown_type_names_the_type() -> None:
    with pytest.raises(BadMessageError) as exc_info:
        parse_command_frame('{"type":"dance","request_id":9}')
    assert exc_info.value.reason == "unknown key dance"
    assert exc_info.value.request_id == 9


def test_non_string_type_is_unknown() -> None:
    with pytest.raises(BadMessageError) as exc_info:
        parse_command_frame('{"type":5}')
    assert exc_info.value.reason == "unknown key 5"


def test_encode_frame_is_compact_and_keeps_unicode() -> None:
    assert encode_frame({"response": "success", "id": "é"}) == '{"response":"success","id":"é"}'


def test_control_response_requires_response_and_request_id() -> None:
    assert decode_control_response('{"response":"success","request_id":1}') == {
        "response": "success",
        "request_id": 1,
    }
    assert decode_control_response('{"response":"success"}') is None
    assert decode_control_response('{"request_id":1}') is None
    assert decode_control_response('{"response":7,"request_id":1}') is None


@pytest.mark.parametrize("raw", ["hello", "", "[1]", '"response"', "{broken"])
def test_non_control_frames_are_relayed(raw: str) -> None:
    assert decode_control_response(raw) is None

"""Gateway tests: command responses over a real WebSocket route."""

from __future__ import annotations

import pytest
from fastapi import WebSocketDisconnect

from tests.helpers.gateway import command, relay_client, create_session


def test_health_reports_sessions_and_connections() -> None:
    with relay_client() as (client, _deps):
        assert client.get("/healthz").json() == {"status": "ok", "sessions": 0, "connections": 0}
        with client.websocket_connect("/ws") as ws:
            create_session(ws)
            assert client.get("/").json() == {"status": "ok", "sessions": 1, "connections": 1}


def test_create_join_leave_lifecycle_with_request_ids() -> None:
    with relay_client() as (client, deps):
        with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b:
            session_id = create_session(a)
            assert len(deps.registry.members(session_id)) == 1
            assert command(a, "join", id=session_id) == {
                "response": "error",
                "reason": "user already in session",
            }
            assert command(b, "join", id=session_id, request_id=7) == {
                "response": "success",
                "id": session_id,
                "request_id": 7,
            }
            assert command(a, "leave", id=session_id) == {"response": "success", "id": session_id}
            assert command(b, "leave", id=session_id) == {"response": "success", "id": session_id}
            assert not deps.registry.has_session(session_id)
            assert command(a, "join", id=session_id) == {
                "response": "bad_request",
                "reason": "session not found",
            }


@pytest.mark.parametrize(
    "frame,expected",
    [
        ('{"id":"abc123"}', {"response": "bad_message", "reason": "missing key 'type'"}),
        ('{"type":"fly"}', {"response": "bad_message", "reason": "unknown key fly"}),
        ('{"type":"join"}', {"response": "bad_request", "reason": "missing key 'id'"}),
        ('{"type":"join","id":"nope00"}', {"response": "bad_request", "reason": "session not found"}),
        ('{"type":"leave","id":"nope00"}', {"response": "bad_request", "reason": "session not found"}),
        ('{"type":"message","payload":"x"}', {"response": "bad_request", "reason": "missing key 'id'"}),
        ('{"type":"message","id":"nope00"}', {"response": "bad_request", "reason": "missing key 'payload'"}),
        ('{"type":"message","id":"nope00","payload":"x"}', {"response": "bad_request", "reason": "session not found"}),
    ],
)
def test_rejected_commands(frame: str, expected: dict) -> None:
    with relay_client() as (client, _deps):
        with client.websocket_connect("/ws") as ws:
            ws.send_text(frame)
            assert ws.receive_json() == expected
            # the connection survives every rejection
            create_session(ws)


def test_invalid_json_is_bad_message() -> None:
    with relay_client() as (client, _deps):
        with client.websocket_connect("/ws") as ws:
            ws.send_text("not json at all")
            response = ws.receive_json()
            assert response["response"] == "bad_message"
            assert response["reason"].startswith("parse error")


def test_message_to_session_not_joined() -> None:
    with relay_client() as (client, _deps):
        with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b:
            session_id = create_session(a)
            assert command(b, "message", id=session_id, payload="x") == {
                "response": "bad_request",
                "reason": f"user not in session {session_id}",
            }


def test_creator_can_message_right_after_create() -> None:
    with relay_client() as (client, _deps):
        with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b:
            session_id = create_session(a)
            command(b, "join", id=session_id)
            assert command(a, "message", id=session_id, payload="first") == {
                "response": "success",
                "status": "sent",
            }
            assert b.receive_text() == "first"


def test_rate_limit_rejects_excess_commands() -> None:
    with relay_client(message_limit=2, message_window_s=60) as (client, deps):
        with client.websocket_connect("/ws") as ws:
            create_session(ws)
            create_session(ws)
            limited = command(ws, "create", request_id=3)
            assert limited["response"] == "error"
            assert limited["reason"].startswith("rate limit:")
            assert limited["request_id"] == 3
            assert deps.registry.session_count == 1


def test_connections_over_capacity_are_rejected() -> None:
    with relay_client(max_connections=1) as (client, _deps):
        with client.websocket_connect("/ws") as first:
            create_session(first)
            with client.websocket_connect("/ws") as second:
                rejected = second.receive_json()
                assert rejected["response"] == "error"
                assert rejected["reason"] == "server at capacity"
                with pytest.raises(WebSocketDisconnect) as exc_info:
                    second.receive_text()
                assert exc_info.value.code == 1013


def test_idle_connection_is_closed_and_leaves_session() -> None:
    with relay_client(idle_timeout_s=0.2, watchdog_tick_s=0.05) as (client, deps):
        with client.websocket_connect("/ws") as ws:
            session_id = create_session(ws)
            with pytest.raises(WebSocketDisconnect) as exc_info:
                ws.receive_text()
            assert exc_info.value.code == 4000
        assert not deps.registry.has_session(session_id)
        assert deps.registry.connection_count == 0

"""Gateway tests: relaying payloads between session members."""

from __future__ import annotations

import json
from contextlib import ExitStack

from tests.helpers.gateway import command, relay_client, create_session


def test_message_reaches_peer_and_not_sender() -> None:
    with relay_client() as (client, deps):
        with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b:
            session_id = create_session(a)
            command(b, "join", id=session_id)
            assert len(deps.registry.members(session_id)) == 2

            assert command(a, "message", id=session_id, payload="hello") == {
                "response": "success",
                "status": "sent",
            }
            assert b.receive_text() == "hello"
            # a's next frame is the response to its next command, not its own payload
            assert command(a, "create")["response"] == "success"


def test_json_lookalike_payload_is_delivered_verbatim() -> None:
    payload = json.dumps({"response": "success", "request_id": 1, "id": "zzzzzz"}, indent=2)
    with relay_client() as (client, _deps):
        with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b:
            session_id = create_session(a)
            command(b, "join", id=session_id)
            command(a, "message", id=session_id, payload=payload)
            assert b.receive_text() == payload


def test_scenario_create_join_relay_and_late_joiner() -> None:
    with relay_client() as (client, deps):
        with ExitStack() as stack:
            a, b, c = (stack.enter_context(client.websocket_connect("/ws")) for _ in range(3))
            s1 = create_session(a)
            command(b, "join", id=s1)
            command(b, "message", id=s1, payload="from-b")
            assert a.receive_text() == "from-b"

            command(c, "join", id=s1)
            command(a, "message", id=s1, payload="from-a")
            assert b.receive_text() == "from-a"
            assert c.receive_text() == "from-a"

            command(b, "leave", id=s1)
            command(c, "message", id=s1, payload="from-c")
            assert a.receive_text() == "from-c"
            assert command(b, "join", id="nope00")["reason"] == "session not found"
            assert len(deps.registry.members(s1)) == 2


def test_ten_members_each_receive_nine_frames() -> None:
    with relay_client() as (client, _deps):
        with ExitStack() as stack:
            sockets = [stack.enter_context(client.websocket_connect("/ws")) for _ in range(10)]
            session_id = create_session(sockets[0])
            for ws in sockets[1:]:
                command(ws, "join", id=session_id)

            for index, ws in enumerate(sockets):
                ws.send_text(json.dumps({"type": "message", "id": session_id, "payload": f"p{index}"}))

            for index, ws in enumerate(sockets):
                frames = [ws.receive_text() for _ in range(10)]
                relayed = [frame for frame in frames if not frame.startswith("{")]
                responses = [json.loads(frame) for frame in frames if frame.startswith("{")]
                assert responses == [{"response": "success", "status": "sent"}]
                assert sorted(relayed) == sorted(f"p{i}" for i in range(10) if i != index)


def test_disconnected_member_is_removed() -> None:
    with relay_client() as (client, deps):
        with client.websocket_connect("/ws") as a:
            session_id = create_session(a)
            with client.websocket_connect("/ws") as b:
                command(b, "join", id=session_id)
                assert len(deps.registry.members(session_id)) == 2
            assert len(deps.registry.members(session_id)) == 1
            assert command(a, "message", id=session_id, payload="anyone?") == {
                "response": "success",
                "status": "sent",
            }
        assert deps.registry.session_count == 0

"""Unit tests for safe outbound socket helpers."""

from __future__ import annotations

import asyncio

import pytest

from relay.handlers.websocket.errors import send_error
from relay.handlers.websocket.helpers import send_envelope, send_to_member, safe_send_text
from tests.helpers.fakes import FakeWebSocket, make_member


def test_safe_send_text_reports_disconnect_as_false() -> None:
    async def _run() -> None:
        assert await safe_send_text(FakeWebSocket(), "hi")
        assert not await safe_send_text(FakeWebSocket(fail_with=BrokenPipeError()), "hi")

    asyncio.run(_run())


def test_safe_send_text_propagates_unexpected_errors() -> None:
    async def _run() -> None:
        with pytest.raises(ValueError):
            await safe_send_text(FakeWebSocket(fail_with=ValueError("boom")), "hi")

    asyncio.run(_run())


def test_send_envelope_encodes_compact_json() -> None:
    async def _run() -> None:
        member = make_member("A")
        await send_envelope(member, {"response": "success", "status": "sent"})
        assert member.websocket.sent == ['{"response":"success","status":"sent"}']

    asyncio.run(_run())


def test_concurrent_sends_to_one_member_all_arrive() -> None:
    async def _run() -> None:
        member = make_member("A")
        frames = [f"frame-{i}" for i in range(20)]
        await asyncio.gather(*(send_to_member(member, frame) for frame in frames))
        assert sorted(member.websocket.sent) == sorted(frames)

    asyncio.run(_run())


def test_send_error_builds_failure_response() -> None:
    async def _run() -> None:
        ws = FakeWebSocket()
        await send_error(ws, reason="server at capacity", extra={"retry_in": 1})
        await send_error(ws, reason="session not found", response="bad_request", request_id=3)
        assert ws.sent_json() == [
            {"response": "error", "reason": "server at capacity", "retry_in": 1},
            {"response": "bad_request", "reason": "session not found", "request_id": 3},
        ]

    asyncio.run(_run())

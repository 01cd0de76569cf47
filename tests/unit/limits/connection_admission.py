"""Unit tests for connection admission control."""

from __future__ import annotations

import asyncio

import pytest

from relay.handlers.connections import ConnectionHandler


def test_admits_until_capacity_then_rejects() -> None:
    async def _run() -> None:
        handler = ConnectionHandler(max_connections=2, acquire_timeout=0.01)
        assert await handler.connect("a")
        assert await handler.connect("b")
        assert not await handler.connect("c")
        info = handler.get_capacity_info()
        assert info == {"active": 2, "max": 2, "available": 0, "at_capacity": True}

    asyncio.run(_run())


def test_disconnect_releases_slot_once() -> None:
    async def _run() -> None:
        handler = ConnectionHandler(max_connections=1, acquire_timeout=0.01)
        assert await handler.connect("a")
        await handler.disconnect("a")
        await handler.disconnect("a")
        assert handler.get_connection_count() == 0
        assert await handler.connect("b")
        assert not await handler.connect("c")

    asyncio.run(_run())


def test_rejects_non_positive_capacity() -> None:
    with pytest.raises(ValueError):
        ConnectionHandler(max_connections=0)

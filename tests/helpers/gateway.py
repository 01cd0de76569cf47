"""Helpers for driving the FastAPI app through Starlette's TestClient."""

from __future__ import annotations

import json
from typing import Any
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi.testclient import TestClient

from relay.server import create_app
from relay.runtime import RuntimeDeps, build_runtime_deps


@contextmanager
def relay_client(**deps_overrides: Any) -> Iterator[tuple[TestClient, RuntimeDeps]]:
    """Run an isolated app; every websocket shares the client's event loop."""
    deps = build_runtime_deps(**deps_overrides)
    with TestClient(create_app(deps)) as client:
        yield client, deps


def command(ws, msg_type: str, **fields: Any) -> dict[str, Any]:
    """Send one command and return the decoded response."""
    ws.send_text(json.dumps({"type": msg_type, **fields}))
    return ws.receive_json()


def create_session(ws) -> str:
    response = command(ws, "create")
    assert response["response"] == "success"
    return response["id"]

"""Each server module must import cleanly as the first relay import of a process."""

from __future__ import annotations

import sys
import subprocess
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[3]


@pytest.mark.parametrize(
    "module",
    [
        "relay.handlers.registry",
        "relay.handlers.websocket.helpers",
        "relay.handlers.websocket.message_loop",
        "relay.handlers.websocket.manager",
        "relay.runtime",
        "relay.messages",
        "relay.server",
    ],
)
def test_module_imports_first_in_fresh_interpreter(module: str) -> None:
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=ROOT,
        capture_output=True,
        text=True,
        timeout=60,
    )
    assert result.returncode == 0, result.stderr

"""Pytest collection rules for non-prefixed local test modules."""

from __future__ import annotations

import pytest
from pathlib import Path

_COLLECTED_AREAS = {"unit", "integration"}


def _is_collectable_test_module(path: Path) -> bool:
    if path.suffix != ".py" or path.name == "__init__.py":
        return False
    return any(part in _COLLECTED_AREAS for part in path.parts)


def pytest_collect_file(file_path: Path, parent):
    """Collect non-prefixed test modules under tests/unit and tests/integration."""
    if not _is_collectable_test_module(file_path):
        return None
    return pytest.Module.from_parent(parent, path=file_path)

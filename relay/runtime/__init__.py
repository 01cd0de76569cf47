"""Runtime services assembled at startup."""

from .bootstrap import build_runtime_deps
from .dependencies import RuntimeDeps

__all__ = ["RuntimeDeps", "build_runtime_deps"]

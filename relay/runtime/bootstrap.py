"""Runtime dependency bootstrap.

Builds the registry and admission controller once at startup. Request
handlers consume these dependencies directly instead of reaching for
module-level state.
"""

from __future__ import annotations

import logging

from ..telemetry import initialize_metrics
from ..handlers.registry import SessionRegistry
from ..handlers.connections import ConnectionHandler
from ..config import (
    WS_IDLE_TIMEOUT_S,
    WS_WATCHDOG_TICK_S,
    MAX_CONCURRENT_CONNECTIONS,
    WS_MESSAGE_WINDOW_SECONDS,
    WS_MAX_MESSAGES_PER_WINDOW,
)

from .dependencies import RuntimeDeps

logger = logging.getLogger(__name__)


def build_runtime_deps(
    *,
    max_connections: int = MAX_CONCURRENT_CONNECTIONS,
    message_limit: int = WS_MAX_MESSAGES_PER_WINDOW,
    message_window_s: float = WS_MESSAGE_WINDOW_SECONDS,
    idle_timeout_s: float = WS_IDLE_TIMEOUT_S,
    watchdog_tick_s: float = WS_WATCHDOG_TICK_S,
) -> RuntimeDeps:
    """Assemble the runtime services from configuration (overridable per call)."""
    initialize_metrics()
    deps = RuntimeDeps(
        registry=SessionRegistry(),
        connections=ConnectionHandler(max_connections=max_connections),
        message_limit=message_limit,
        message_window_s=message_window_s,
        idle_timeout_s=idle_timeout_s,
        watchdog_tick_s=watchdog_tick_s,
    )
    logger.info(
        "runtime ready: max_connections=%s rate_limit=%s/%ss idle_timeout=%ss",
        max_connections,
        message_limit,
        message_window_s,
        idle_timeout_s,
    )
    return deps


__all__ = ["build_runtime_deps"]

"""Runtime dependency container.

All long-lived runtime services are assembled at startup and passed explicitly
through request handlers. This avoids module-level singletons and lets tests
build an isolated server per case.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from dataclasses import dataclass

from ..config import (
    WS_IDLE_TIMEOUT_S,
    WS_WATCHDOG_TICK_S,
    WS_MESSAGE_WINDOW_SECONDS,
    WS_MAX_MESSAGES_PER_WINDOW,
)

if TYPE_CHECKING:
    from ..handlers.registry import SessionRegistry
    from ..handlers.connections import ConnectionHandler


@dataclass(slots=True)
class RuntimeDeps:
    """Process-wide runtime services initialized during startup.

    Attributes:
        registry: The session registry shared by every connection.
        connections: Admission control for concurrent connections.
        message_limit: Commands allowed per connection per window (0 disables).
        message_window_s: Rate limit window length in seconds.
        idle_timeout_s: Close connections idle for this many seconds.
        watchdog_tick_s: Idle watchdog polling interval.
    """

    registry: SessionRegistry
    connections: ConnectionHandler
    message_limit: int = WS_MAX_MESSAGES_PER_WINDOW
    message_window_s: float = WS_MESSAGE_WINDOW_SECONDS
    idle_timeout_s: float = WS_IDLE_TIMEOUT_S
    watchdog_tick_s: float = WS_WATCHDOG_TICK_S

    def health(self) -> dict[str, object]:
        return {
            "status": "ok",
            "sessions": self.registry.session_count,
            "connections": self.registry.connection_count,
        }

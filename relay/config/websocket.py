"""WebSocket-specific runtime configuration values.

Timeouts:
    WS_IDLE_TIMEOUT_S: Close connections after this many seconds without an
        inbound frame. Closing triggers the implicit session leave.

    WS_WATCHDOG_TICK_S: How often the idle watchdog checks activity.

    WS_HANDSHAKE_ACQUIRE_TIMEOUT_S: Max time to wait for a connection slot
        before the connection is rejected as over capacity.

Close Codes (RFC 6455):
    1000: Normal closure
    1013: Try again later (server at capacity)
    4000+: Application-defined (idle timeout)
"""

from __future__ import annotations

import os

# ============================================================================
# Endpoint
# ============================================================================

WS_PATH = os.getenv("WS_PATH", "/ws")

# ============================================================================
# Timeout Configuration
# ============================================================================

WS_IDLE_TIMEOUT_S = float(os.getenv("WS_IDLE_TIMEOUT_S", "300"))  # 5 minutes
WS_WATCHDOG_TICK_S = float(os.getenv("WS_WATCHDOG_TICK_S", "5"))
WS_HANDSHAKE_ACQUIRE_TIMEOUT_S = float(os.getenv("WS_HANDSHAKE_ACQUIRE_TIMEOUT_S", "0.5"))

# ============================================================================
# WebSocket Close Codes
# ============================================================================

WS_CLOSE_BUSY_CODE = int(os.getenv("WS_CLOSE_BUSY_CODE", "1013"))
WS_CLOSE_IDLE_CODE = int(os.getenv("WS_CLOSE_IDLE_CODE", "4000"))
WS_CLOSE_IDLE_REASON = os.getenv("WS_CLOSE_IDLE_REASON", "idle_timeout")
WS_CLOSE_NORMAL_CODE = int(os.getenv("WS_CLOSE_NORMAL_CODE", "1000"))

__all__ = [
    "WS_PATH",
    "WS_IDLE_TIMEOUT_S",
    "WS_WATCHDOG_TICK_S",
    "WS_HANDSHAKE_ACQUIRE_TIMEOUT_S",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_IDLE_REASON",
    "WS_CLOSE_NORMAL_CODE",
]

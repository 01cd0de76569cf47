"""Aggregator of configuration modules.

This module re-exports the config API from smaller modules:
- websocket: endpoint path, idle enforcement, close codes
- limits: connection admission and rate limits
- session: session id generation and retention
- client: client defaults (server URL, command timeout)
- logging: log level and format

Wire vocabulary lives in ``relay.config.protocol`` and metric specs in
``relay.config.telemetry``; import those modules directly.
"""

from .websocket import (
    WS_PATH,
    WS_IDLE_TIMEOUT_S,
    WS_WATCHDOG_TICK_S,
    WS_HANDSHAKE_ACQUIRE_TIMEOUT_S,
    WS_CLOSE_BUSY_CODE,
    WS_CLOSE_IDLE_CODE,
    WS_CLOSE_IDLE_REASON,
    WS_CLOSE_NORMAL_CODE,
)
from .limits import (
    MAX_CONCURRENT_CONNECTIONS,
    WS_MESSAGE_WINDOW_SECONDS,
    WS_MAX_MESSAGES_PER_WINDOW,
)
from .session import (
    SESSION_ID_ALPHABET,
    SESSION_ID_LENGTH,
)
from .client import (
    DEFAULT_SERVER_URL,
    COMMAND_TIMEOUT_S,
    CONNECT_TIMEOUT_S,
)
from .logging import (
    APP_LOG_LEVEL,
    APP_LOG_FORMAT,
    APP_LOG_DATEFMT,
)

__all__ = [
    # websocket
    "WS_PATH",
    "WS_IDLE_TIMEOUT_S",
    "WS_WATCHDOG_TICK_S",
    "WS_HANDSHAKE_ACQUIRE_TIMEOUT_S",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_IDLE_REASON",
    "WS_CLOSE_NORMAL_CODE",
    # limits
    "MAX_CONCURRENT_CONNECTIONS",
    "WS_MESSAGE_WINDOW_SECONDS",
    "WS_MAX_MESSAGES_PER_WINDOW",
    # session
    "SESSION_ID_ALPHABET",
    "SESSION_ID_LENGTH",
    # client
    "DEFAULT_SERVER_URL",
    "COMMAND_TIMEOUT_S",
    "CONNECT_TIMEOUT_S",
    # logging
    "APP_LOG_LEVEL",
    "APP_LOG_FORMAT",
    "APP_LOG_DATEFMT",
]

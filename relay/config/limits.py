"""Connection and message-rate limits configuration."""

import os


# Admission control (semaphore-bounded connection slots)
MAX_CONCURRENT_CONNECTIONS = int(os.getenv("MAX_CONCURRENT_CONNECTIONS", "1000"))

# Per-connection command rate limit (rolling window); 0 disables
WS_MESSAGE_WINDOW_SECONDS = float(os.getenv("WS_MESSAGE_WINDOW_SECONDS", "60"))
WS_MAX_MESSAGES_PER_WINDOW = int(os.getenv("WS_MAX_MESSAGES_PER_WINDOW", "1200"))


__all__ = [
    "MAX_CONCURRENT_CONNECTIONS",
    "WS_MESSAGE_WINDOW_SECONDS",
    "WS_MAX_MESSAGES_PER_WINDOW",
]

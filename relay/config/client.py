"""Client-side defaults for the session facade and correlation engine."""

import os


DEFAULT_SERVER_URL = os.getenv("RELAY_SERVER_URL", "ws://localhost:8080/ws")

# Seconds a command waits for its response before failing
COMMAND_TIMEOUT_S = float(os.getenv("RELAY_COMMAND_TIMEOUT_S", "5.0"))

# Seconds allowed for the opening handshake
CONNECT_TIMEOUT_S = float(os.getenv("RELAY_CONNECT_TIMEOUT_S", "10.0"))

# Request ids start at a random offset below 2**53 so they stay exact in
# every JSON implementation and peers cannot predict them
REQUEST_ID_RANDOM_BITS = 52

# Timed-out request ids remembered so their late responses are dropped
TIMED_OUT_REQUEST_MEMORY = int(os.getenv("RELAY_TIMED_OUT_REQUEST_MEMORY", "256"))


__all__ = [
    "DEFAULT_SERVER_URL",
    "COMMAND_TIMEOUT_S",
    "CONNECT_TIMEOUT_S",
    "REQUEST_ID_RANDOM_BITS",
    "TIMED_OUT_REQUEST_MEMORY",
]

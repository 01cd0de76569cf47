"""Centralized exception classes for the session relay.

Organization:
    - protocol.py: server-side command failures mapped to wire responses
    - limits.py: rate limiting errors with retry info
    - client.py: client-side local and remote failures
    - classify.py: exception-to-telemetry label mapping
"""

from .limits import RateLimitError
from .classify import classify_error
from .protocol import ProtocolError, BadMessageError, BadRequestError, StateConflictError
from .client import (
    RelayClientError,
    NotConnectedError,
    AlreadyConnectedError,
    ConnectionFailedError,
    NotInSessionError,
    CommandTimeoutError,
    CommandSendError,
    ConnectionClosedError,
    CommandFailedError,
)

__all__ = [
    # Protocol errors
    "ProtocolError",
    "BadMessageError",
    "BadRequestError",
    "StateConflictError",
    # Rate limiting
    "RateLimitError",
    # Client errors
    "RelayClientError",
    "NotConnectedError",
    "AlreadyConnectedError",
    "ConnectionFailedError",
    "NotInSessionError",
    "CommandTimeoutError",
    "CommandSendError",
    "ConnectionClosedError",
    "CommandFailedError",
    # Classification
    "classify_error",
]

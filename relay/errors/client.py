"""Client-side error types.

Local failures (not connected, not in a session, timeouts, send failures)
are raised before or instead of any wire I/O. Server refusals surface as
``CommandFailedError`` carrying the response kind and reason.
"""

from __future__ import annotations

from typing import Any


class RelayClientError(Exception):
    """Base class for all session relay client errors."""


class NotConnectedError(RelayClientError):
    """Raised when an operation needs an open connection and there is none."""

    def __init__(self, message: str = "Not connected") -> None:
        super().__init__(message)


class AlreadyConnectedError(RelayClientError):
    """Raised when connect() is called on a connected client."""

    def __init__(self, message: str = "Already connected") -> None:
        super().__init__(message)


class ConnectionFailedError(RelayClientError):
    """Raised when the connection cannot be opened."""


class NotInSessionError(RelayClientError):
    """Raised when a session-scoped operation runs without a current session."""

    def __init__(self, message: str = "Not in a session") -> None:
        super().__init__(message)


class CommandTimeoutError(RelayClientError):
    """Raised when a command receives no response within its timeout."""

    def __init__(self, command: str, timeout_s: float) -> None:
        self.command = command
        self.timeout_s = timeout_s
        super().__init__(f"Command timeout: '{command}' got no response within {timeout_s:g}s")


class CommandSendError(RelayClientError):
    """Raised when the transport fails to send a command."""


class ConnectionClosedError(RelayClientError):
    """Raised for pending commands when the connection closes underneath them."""

    def __init__(
        self,
        message: str = "Connection closed",
        *,
        close_code: int | None = None,
        close_reason: str | None = None,
    ) -> None:
        self.close_code = close_code
        self.close_reason = close_reason
        parts = [message]
        if close_code is not None:
            parts.append(f"code={close_code}")
        if close_reason:
            parts.append(f"reason={close_reason}")
        super().__init__(" ".join(parts))


class CommandFailedError(RelayClientError):
    """Raised when the server answers a command with a non-success response.

    Attributes:
        operation: Human-readable operation label (e.g. "join session").
        response: The response kind ("error", "bad_request", ...).
        reason: The server-provided reason, if any.
        payload: The full decoded response.
    """

    def __init__(self, operation: str, payload: dict[str, Any]) -> None:
        self.operation = operation
        self.payload = payload
        self.response = payload.get("response")
        self.reason = payload.get("reason")
        super().__init__(f"Failed to {operation}: {self.reason or 'Unknown error'}")


__all__ = [
    "RelayClientError",
    "NotConnectedError",
    "AlreadyConnectedError",
    "ConnectionFailedError",
    "NotInSessionError",
    "CommandTimeoutError",
    "CommandSendError",
    "ConnectionClosedError",
    "CommandFailedError",
]

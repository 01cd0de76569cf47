"""Asyncio client for the session relay."""

from .session import SessionClient
from .transport import Transport, WebSocketTransport
from .correlation import CorrelationEngine

__all__ = [
    "SessionClient",
    "CorrelationEngine",
    "Transport",
    "WebSocketTransport",
]

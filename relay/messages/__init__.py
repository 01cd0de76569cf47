"""Command handlers, one per wire command type.

Each handler takes the issuing member, the decoded command and the
registry, applies the command and returns the success response to send.
Failures are raised as ``ProtocolError`` and rendered by the gateway.
"""

from __future__ import annotations

from typing import Any
from collections.abc import Callable, Awaitable

from .join import handle_join_message
from .leave import handle_leave_message
from .relay import handle_relay_message
from .create import handle_create_message
from ..config.protocol import CMD_JOIN, CMD_LEAVE, CMD_CREATE, CMD_MESSAGE

CommandHandlerFn = Callable[..., Awaitable[dict[str, Any]]]

COMMAND_HANDLERS: dict[str, CommandHandlerFn] = {
    CMD_CREATE: handle_create_message,
    CMD_JOIN: handle_join_message,
    CMD_LEAVE: handle_leave_message,
    CMD_MESSAGE: handle_relay_message,
}

__all__ = [
    "COMMAND_HANDLERS",
    "CommandHandlerFn",
    "handle_create_message",
    "handle_join_message",
    "handle_leave_message",
    "handle_relay_message",
]

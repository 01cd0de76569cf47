"""Process-wide logging setup with per-connection context fields.

Gateway code binds the connection it is serving with ``member_log_context``
(or ``log_context`` before a member exists). The bound fields live in one
context variable, so they follow the connection's task and anything it
awaits, including fan-out to peers. ``LogContextFilter`` copies them onto
each record reaching the configured handlers, where the format string can
reference ``%(client_id)s``, ``%(session_id)s`` and ``%(request_id)s``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar

if TYPE_CHECKING:
    from .state.session import Member

LOG_FIELDS = ("client_id", "session_id", "request_id")
_UNSET = "-"

_FIELDS: ContextVar[Mapping[str, str]] = ContextVar("relay_log_fields", default={})

# Level applied by the first configure_logging call; later calls keep it
_configured_level: str | None = None


def current_log_fields() -> dict[str, str]:
    """Every context field, with ``-`` for the ones not bound."""
    bound = _FIELDS.get()
    return {name: bound.get(name, _UNSET) for name in LOG_FIELDS}


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Bind context fields for the duration of the block.

    None values leave the outer binding in place; anything else is
    stringified. Unknown field names raise ``TypeError``.
    """
    unknown = set(fields) - set(LOG_FIELDS)
    if unknown:
        raise TypeError(f"unknown log field(s): {', '.join(sorted(unknown))}")
    merged = dict(_FIELDS.get())
    merged.update({name: str(value) for name, value in fields.items() if value is not None})
    token = _FIELDS.set(merged)
    try:
        yield
    finally:
        _FIELDS.reset(token)


def member_log_context(member: Member, *, request_id: Any = None):
    """Bind the fields describing ``member`` and, optionally, a command."""
    return log_context(
        client_id=member.connection_id[:8],
        session_id=member.session_id,
        request_id=request_id,
    )


class LogContextFilter(logging.Filter):
    """Stamps the bound context fields onto every record it sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in current_log_fields().items():
            if not hasattr(record, name):
                setattr(record, name, value)
        return True


def _install_on(handler: logging.Handler, level: str, fmt: str, datefmt: str) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    if not any(isinstance(f, LogContextFilter) for f in handler.filters):
        handler.addFilter(LogContextFilter())


def configure_logging(level: str | None = None, *, force: bool = False) -> str:
    """Configure root logging once per process and return the active level.

    The first call wins: importing the server after the CLI configured an
    explicit level keeps that level. Pass ``force=True`` to reconfigure.
    """
    global _configured_level
    from relay.config.logging import APP_LOG_LEVEL, APP_LOG_FORMAT, APP_LOG_DATEFMT  # noqa: PLC0415

    if _configured_level is not None and not force:
        return _configured_level

    resolved_level = (level or APP_LOG_LEVEL).upper()
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        root_logger.addHandler(logging.StreamHandler())
    root_logger.setLevel(resolved_level)
    for handler in root_logger.handlers:
        _install_on(handler, resolved_level, APP_LOG_FORMAT, APP_LOG_DATEFMT)

    logging.getLogger("relay").setLevel(resolved_level)
    _configured_level = resolved_level
    return resolved_level


__all__ = [
    "LOG_FIELDS",
    "LogContextFilter",
    "configure_logging",
    "current_log_fields",
    "log_context",
    "member_log_context",
]

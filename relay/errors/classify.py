"""Exception classification helpers for metrics and log labels."""

from __future__ import annotations

from .limits import RateLimitError
from .protocol import BadMessageError, BadRequestError, StateConflictError

ERROR_CATEGORIES: tuple[tuple[type[BaseException], str], ...] = (
    (BadMessageError, "bad_message"),
    (BadRequestError, "bad_request"),
    (StateConflictError, "state_conflict"),
    (RateLimitError, "rate_limit"),
    (TimeoutError, "timeout"),
    (ConnectionError, "connection"),
)


def classify_error(exc: BaseException) -> str:
    """Map an exception to a metric-friendly category label."""

    for cls, label in ERROR_CATEGORIES:
        if isinstance(exc, cls):
            return label
    return "unknown"


__all__ = ["ERROR_CATEGORIES", "classify_error"]

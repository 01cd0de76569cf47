"""Rate limiting for inbound commands.

Every command type shares one per-connection bucket. A limited command is
answered with an ``error`` response that carries ``retry_in`` and is not
applied.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from .helpers import send_envelope
from ...telemetry import get_metrics
from ...errors import RateLimitError
from ...protocol.envelopes import build_response
from ...config.protocol import KEY_REASON, RESPONSE_ERROR
from ..limits import SlidingWindowRateLimiter

if TYPE_CHECKING:
    from ...state.session import Member


def rate_limit_reason(limiter: SlidingWindowRateLimiter, retry_in: int) -> str:
    return (
        f"rate limit: at most {limiter.limit} commands per {int(limiter.window_seconds)} seconds; "
        f"retry in {retry_in} seconds"
    )


async def consume_limiter(
    member: Member,
    limiter: SlidingWindowRateLimiter,
    *,
    msg_type: str,
    request_id: Any = None,
) -> bool:
    """Attempt to consume a limiter token, sending an error on failure.

    Returns:
        True if consumption succeeded, False if rate limited.
    """
    try:
        limiter.consume()
    except RateLimitError as err:
        retry_in = int(max(1, math.ceil(err.retry_in))) if err.retry_in > 0 else 1
        get_metrics().rate_limit_violations_total.add(1, {"type": msg_type})
        await send_envelope(
            member,
            build_response(
                RESPONSE_ERROR,
                request_id=request_id,
                **{KEY_REASON: rate_limit_reason(limiter, retry_in)},
                retry_in=retry_in,
            ),
        )
        return False
    return True


__all__ = ["consume_limiter", "rate_limit_reason"]

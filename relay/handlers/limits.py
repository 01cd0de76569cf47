"""Sliding-window rate limiter for per-connection command throttling.

Sliding Window Algorithm:
    The limiter tracks timestamps of recent events in a deque. When a new
    event arrives:
    1. Remove timestamps older than (now - window_seconds)
    2. If remaining events >= limit, reject with retry_in time
    3. Otherwise, record the new timestamp and allow

Example:
    limiter = SlidingWindowRateLimiter(limit=10, window_seconds=60)

    try:
        limiter.consume()
    except RateLimitError as e:
        print(f"Rate limited, retry in {e.retry_in:.1f}s")
"""

from __future__ import annotations

import time
import collections
from collections.abc import Callable

from relay.errors import RateLimitError

# Injectable clock (used in testing)
TimeFn = Callable[[], float]


class SlidingWindowRateLimiter:
    """Track events over a rolling window.

    The limiter can be disabled by setting limit=0 or window_seconds=0,
    in which case consume() always succeeds.

    Attributes:
        limit: Maximum events allowed per window.
        window_seconds: Duration of the sliding window.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))
        self._now = now_fn or time.monotonic
        self._events: collections.deque[float] = collections.deque()
        self._enabled = self.limit > 0 and self.window_seconds > 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    def consume(self) -> None:
        """Record an event or raise RateLimitError if the window is saturated.

        Not safe for concurrent use from multiple threads; each connection
        owns its own limiter on the event loop.

        Raises:
            RateLimitError: If the rate limit has been exceeded.
        """
        if not self._enabled:
            return

        now = self._now()
        cutoff = now - self.window_seconds

        events = self._events
        while events and events[0] <= cutoff:
            events.popleft()

        if len(events) >= self.limit:
            # Oldest event leaving the window frees the next slot
            retry_in = (events[0] + self.window_seconds) - now
            raise RateLimitError(
                retry_in=max(0.0, retry_in),
                limit=self.limit,
                window_seconds=self.window_seconds,
            )

        events.append(now)


__all__ = ["RateLimitError", "SlidingWindowRateLimiter"]

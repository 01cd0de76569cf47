"""Unit tests for sliding window rate limiter."""

from __future__ import annotations

import pytest

from relay.errors import RateLimitError
from relay.handlers.limits import SlidingWindowRateLimiter
from tests.helpers.fakes import ManualClock


def test_consume_at_limit_raises_with_metadata() -> None:
    clock = ManualClock()
    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=10.0, now_fn=clock)
    limiter.consume()
    clock.advance(1.0)
    limiter.consume()
    with pytest.raises(RateLimitError) as exc_info:
        limiter.consume()
    err = exc_info.value
    assert err.limit == 2
    assert err.window_seconds == 10.0
    assert err.retry_in == pytest.approx(9.0, abs=0.01)


def test_consume_after_window_expires() -> None:
    clock = ManualClock()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=5.0, now_fn=clock)
    limiter.consume()
    clock.advance(6.0)
    limiter.consume()


def test_disabled_limiter_never_raises() -> None:
    for limiter in (
        SlidingWindowRateLimiter(limit=0, window_seconds=10.0),
        SlidingWindowRateLimiter(limit=10, window_seconds=0.0),
    ):
        assert not limiter.enabled
        for _ in range(100):
            limiter.consume()

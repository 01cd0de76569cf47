"""Per-connection WebSocket lifecycle helpers (idle enforcement).

Each admitted connection gets a WebSocketLifecycle instance that:

1. Tracks last activity timestamp (updated via touch())
2. Runs a background watchdog task that checks for idleness
3. Closes the connection when the idle timeout is reached

Closing an idle connection runs the normal disconnect path, so the member
is removed from its session exactly as if the peer had gone away.

Usage:
    lifecycle = WebSocketLifecycle(websocket)
    lifecycle.start()  # Start watchdog

    # In message loop:
    lifecycle.touch()  # Reset idle timer

    # On cleanup:
    await lifecycle.stop()
"""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from typing import Any

from ...telemetry import get_metrics
from ...config.websocket import (
    WS_IDLE_TIMEOUT_S,
    WS_WATCHDOG_TICK_S,
    WS_CLOSE_IDLE_CODE,
    WS_CLOSE_IDLE_REASON,
)

logger = logging.getLogger(__name__)


class WebSocketLifecycle:
    """Tracks activity timestamps and enforces idle timeouts.

    Attributes:
        _ws: The WebSocket connection being managed.
        _idle_timeout_s: Seconds of inactivity before closing.
        _watchdog_tick_s: How often to check for idleness.
        _last_activity: Monotonic timestamp of last activity.
    """

    def __init__(
        self,
        websocket: Any,
        idle_timeout_s: float | None = None,
        watchdog_tick_s: float | None = None,
        idle_close_code: int | None = None,
    ):
        self._ws = websocket
        self._idle_timeout_s = float(idle_timeout_s or WS_IDLE_TIMEOUT_S)
        self._watchdog_tick_s = float(watchdog_tick_s or WS_WATCHDOG_TICK_S)
        self._idle_close_code = idle_close_code if idle_close_code is not None else WS_CLOSE_IDLE_CODE
        self._idle_close_reason = WS_CLOSE_IDLE_REASON
        self._last_activity = time.monotonic()
        self._stop_event = asyncio.Event()  # Signals watchdog to stop
        self._idle_fired = False
        self._task: asyncio.Task | None = None

    @property
    def watchdog_tick_s(self) -> float:
        return self._watchdog_tick_s

    def touch(self) -> None:
        """Record recent activity (resets idle countdown)."""
        self._last_activity = time.monotonic()

    def should_close(self) -> bool:
        """Check if the connection should be closed (watchdog stopped)."""
        return self._stop_event.is_set()

    def idle_timed_out(self) -> bool:
        """True once the watchdog has closed the socket for inactivity."""
        return self._idle_fired

    def start(self) -> asyncio.Task:
        """Start the watchdog task (idempotent)."""
        if self._task is None:
            self._task = asyncio.create_task(self._watchdog_loop())
        return self._task

    async def stop(self) -> None:
        """Stop the watchdog task and wait for it to finish."""
        self._stop_event.set()
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _watchdog_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(self._watchdog_tick_s)
                if self._stop_event.is_set():
                    break
                if (time.monotonic() - self._last_activity) >= self._idle_timeout_s:
                    logger.info("WebSocket idle timeout reached; closing connection")
                    self._idle_fired = True
                    self._stop_event.set()
                    get_metrics().idle_disconnects_total.add(1)
                    await self._close_ws()
                    break
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.debug("Idle watchdog exiting due to unexpected error", exc_info=True)

    async def _close_ws(self) -> None:
        """Close the WebSocket with idle timeout code/reason."""
        try:
            await self._ws.close(code=self._idle_close_code, reason=self._idle_close_reason)
        except Exception:  # noqa: BLE001
            logger.debug("idle close failed; socket already gone", exc_info=True)


__all__ = ["WebSocketLifecycle"]

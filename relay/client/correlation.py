"""Request/response correlation over a shared frame stream.

Every command is stamped with a fresh ``request_id`` and parked as a future
until the response echoing that id arrives. Ids count up from a random
per-engine offset, so a peer in the same session cannot predict them. A
single reader task consumes the transport in order and routes each inbound
frame:

- a JSON object with a string ``response`` whose ``request_id`` belongs to a
  pending command is that command's response;
- one whose ``request_id`` belongs to a recently timed-out command is a late
  response and is logged and dropped;
- anything else, including peer payloads shaped like a response, is a
  relayed frame and goes to the relayed-frame callback untouched.

When the stream ends, every pending command fails with
``ConnectionClosedError``.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import itertools
import contextlib
from typing import Any
from collections import deque
from collections.abc import Callable

from .transport import Transport
from ..config.client import COMMAND_TIMEOUT_S, REQUEST_ID_RANDOM_BITS, TIMED_OUT_REQUEST_MEMORY
from ..config.protocol import KEY_TYPE, KEY_REQUEST_ID
from ..protocol.codec import encode_frame, decode_control_response
from ..errors.client import (
    NotConnectedError,
    CommandSendError,
    CommandTimeoutError,
    ConnectionClosedError,
)

logger = logging.getLogger(__name__)

RelayedFn = Callable[[str], None]
ClosedFn = Callable[[ConnectionClosedError], None]


class CorrelationEngine:
    """Pairs commands with their responses on one transport.

    Attributes:
        timeout_s: Default per-command response timeout.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        on_relayed: RelayedFn | None = None,
        on_closed: ClosedFn | None = None,
        timeout_s: float = COMMAND_TIMEOUT_S,
        first_request_id: int | None = None,
        timed_out_memory: int = TIMED_OUT_REQUEST_MEMORY,
    ) -> None:
        self.timeout_s = float(timeout_s)
        self._transport = transport
        self._on_relayed = on_relayed
        self._on_closed = on_closed
        if first_request_id is None:
            first_request_id = secrets.randbits(REQUEST_ID_RANDOM_BITS) + 1
        self._ids = itertools.count(first_request_id)
        self._pending: dict[int, asyncio.Future[dict[str, Any]]] = {}
        self._timed_out: deque[int] = deque(maxlen=max(0, timed_out_memory))
        self._reader: asyncio.Task | None = None
        self._closed = False

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def is_open(self) -> bool:
        return not self._closed and self._transport.is_open

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def start(self) -> asyncio.Task:
        """Start the reader task (idempotent)."""
        if self._reader is None:
            self._reader = asyncio.create_task(self._read_loop())
        return self._reader

    async def send_command(
        self,
        envelope: dict[str, Any],
        timeout_s: float | None = None,
    ) -> dict[str, Any]:
        """Send a command and wait for the response that echoes its request id.

        Raises:
            NotConnectedError: The transport is not open; nothing was sent.
            CommandSendError: The transport failed to send the frame.
            CommandTimeoutError: No response arrived within the timeout.
            ConnectionClosedError: The connection closed while waiting.
        """
        if not self.is_open:
            raise NotConnectedError()

        command = str(envelope.get(KEY_TYPE, "?"))
        timeout = self.timeout_s if timeout_s is None else float(timeout_s)
        request_id = next(self._ids)
        future: asyncio.Future[dict[str, Any]] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future

        try:
            try:
                await self._transport.send(encode_frame({**envelope, KEY_REQUEST_ID: request_id}))
            except Exception as exc:
                raise CommandSendError(f"Failed to send '{command}' command: {exc}") from exc
            try:
                return await asyncio.wait_for(future, timeout=timeout)
            except asyncio.TimeoutError:
                logger.warning("command %s request_id=%s timed out after %ss", command, request_id, timeout)
                self._timed_out.append(request_id)
                raise CommandTimeoutError(command, timeout) from None
        finally:
            self._pending.pop(request_id, None)

    async def close(self) -> None:
        """Close the transport, stop the reader and fail pending commands."""
        self._closed = True
        reader = self._reader
        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reader
        try:
            await self._transport.close()
        except Exception:  # noqa: BLE001
            logger.debug("transport close failed", exc_info=True)
        self._fail_pending(ConnectionClosedError("Connection closed"))

    async def _read_loop(self) -> None:
        try:
            async for frame in self._transport:
                self._dispatch(frame)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.warning("reader stopped: %s", exc)
        finally:
            self._closed = True
            closed = ConnectionClosedError(
                "Connection closed",
                close_code=self._transport.close_code,
                close_reason=self._transport.close_reason,
            )
            self._fail_pending(closed)
            if self._on_closed is not None:
                self._on_closed(closed)

    def _dispatch(self, frame: str) -> None:
        response = decode_control_response(frame)
        request_id = None if response is None else response[KEY_REQUEST_ID]
        if not isinstance(request_id, int) or isinstance(request_id, bool):
            self._deliver_relayed(frame)
            return

        future = self._pending.get(request_id)
        if future is not None and not future.done():
            future.set_result(response)
        elif request_id in self._timed_out:
            logger.warning("dropping late response request_id=%s: %s", request_id, frame)
        else:
            self._deliver_relayed(frame)

    def _deliver_relayed(self, frame: str) -> None:
        if self._on_relayed is None:
            return
        try:
            self._on_relayed(frame)
        except Exception:  # noqa: BLE001
            logger.exception("relayed frame callback failed")

    def _fail_pending(self, exc: ConnectionClosedError) -> None:
        pending = list(self._pending.values())
        self._pending.clear()
        for future in pending:
            if not future.done():
                future.set_exception(exc)


__all__ = ["CorrelationEngine"]

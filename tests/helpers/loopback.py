"""In-memory relay that serves client transports through the gateway's frame handler."""

from __future__ import annotations

import json
import itertools
from typing import Any

from relay.state.session import Member
from relay.handlers.limits import SlidingWindowRateLimiter
from relay.handlers.websocket.message_loop import handle_frame
from relay.runtime import RuntimeDeps, build_runtime_deps
from tests.helpers.fakes import FakeTransport


class LoopbackSocket:
    """Server-side socket whose frames land in a client transport's inbox."""

    def __init__(self, transport: FakeTransport) -> None:
        self._transport = transport

    async def send_text(self, text: str) -> None:
        self._transport.feed(text)

    async def close(self, *, code: int = 1000, reason: str | None = None) -> None:
        self._transport.end(code, reason or "")


class LoopbackTransport(FakeTransport):
    """Client transport wired straight into a ``LoopbackRelay``."""

    def __init__(self, relay: LoopbackRelay, member: Member) -> None:
        super().__init__()
        self.relay = relay
        self.member = member
        self.limiter = SlidingWindowRateLimiter(
            limit=relay.deps.message_limit,
            window_seconds=relay.deps.message_window_s,
        )

    async def send(self, frame: str) -> None:
        if self.fail_sends is not None:
            raise self.fail_sends
        self.sent.append(json.loads(frame))
        await handle_frame(self.member, frame, self.limiter, runtime_deps=self.relay.deps)

    async def close(self) -> None:
        await super().close()
        await self.relay.deps.registry.disconnect(self.member.connection_id)


class LoopbackRelay:
    """Relay server without sockets: usable as a SessionClient transport factory."""

    def __init__(self, **deps_overrides: Any) -> None:
        self.deps: RuntimeDeps = build_runtime_deps(**deps_overrides)
        self._ids = itertools.count(1)

    async def connect(self, url: str) -> LoopbackTransport:
        member = Member(connection_id=f"loop{next(self._ids):04d}", websocket=None)
        transport = LoopbackTransport(self, member)
        member.websocket = LoopbackSocket(transport)
        await self.deps.registry.attach(member)
        return transport

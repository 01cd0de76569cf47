"""Main FastAPI server for the session relay.

Provides:

- REST endpoints for health checks (/healthz, /)
- WebSocket endpoint for session commands and relayed frames (/ws)
- Runtime dependencies (registry, admission control) built at startup

Server Lifecycle:
    1. On startup: build RuntimeDeps and store them on ``app.state``
    2. Accept WebSocket connections on WS_PATH
    3. Route commands through the registry (create, join, leave, message)
    4. On shutdown: log the sessions still open

Example:
    Run directly with uvicorn:
        $ uvicorn relay.server:app --host 0.0.0.0 --port 8080

    Or through the CLI:
        $ session-relay --port 8080
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import ORJSONResponse

from .logging import configure_logging
from .config.websocket import WS_PATH
from .runtime import RuntimeDeps, build_runtime_deps
from .handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)


def create_app(runtime_deps: RuntimeDeps | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        runtime_deps: Prebuilt services to serve with. When omitted they are
            built from configuration at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        deps = runtime_deps if runtime_deps is not None else build_runtime_deps()
        app.state.runtime_deps = deps
        logger.info("session relay listening on %s", WS_PATH)
        try:
            yield
        finally:
            logger.info(
                "session relay stopping: %s sessions, %s connections",
                deps.registry.session_count,
                deps.registry.connection_count,
            )

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=lifespan)

    @app.get("/")
    async def root(request: Request):
        """Root endpoint for load balancer health checks."""
        return request.app.state.runtime_deps.health()

    @app.get("/healthz")
    async def healthz(request: Request):
        """Health check endpoint."""
        return request.app.state.runtime_deps.health()

    @app.get("/favicon.ico", status_code=204)
    async def favicon():
        """Suppress favicon requests from browsers/probes."""
        return None

    @app.websocket(WS_PATH)
    async def websocket_endpoint(websocket: WebSocket):
        """Session relay WebSocket endpoint."""
        await handle_websocket_connection(websocket, websocket.app.state.runtime_deps)

    return app


configure_logging()
app = create_app()

__all__ = ["app", "create_app"]

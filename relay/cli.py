"""Command-line entry point: run the relay server under uvicorn."""

from __future__ import annotations

import os
from argparse import ArgumentParser, Namespace
from collections.abc import Sequence

import uvicorn

from .logging import configure_logging
from .config.logging import APP_LOG_LEVEL

DEFAULT_HOST = os.getenv("RELAY_HOST", "0.0.0.0")
DEFAULT_PORT = int(os.getenv("RELAY_PORT", "8080"))


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="session-relay", description="WebSocket session relay server")
    parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Interface to bind (default env RELAY_HOST or {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port to listen on (default env RELAY_PORT or {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=APP_LOG_LEVEL,
        help=f"Log level (default env APP_LOG_LEVEL or {APP_LOG_LEVEL})",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> Namespace:
    return build_parser().parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)
    uvicorn.run(
        "relay.server:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )


__all__ = ["build_parser", "parse_args", "main"]

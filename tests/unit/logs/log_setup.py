"""Unit tests for logging setup and per-connection log fields."""

from __future__ import annotations

import logging

import pytest

import relay.logging as relay_logging
from relay.logging import (
    LogContextFilter,
    log_context,
    configure_logging,
    current_log_fields,
    member_log_context,
)
from tests.helpers.fakes import make_member


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def unconfigured_logging(monkeypatch):
    """Run with logging reported as not yet configured, restoring levels afterwards."""
    root = logging.getLogger()
    relay_logger = logging.getLogger("relay")
    saved_levels = (root.level, relay_logger.level)
    saved_handlers = [(h, h.level, h.formatter, list(h.filters)) for h in root.handlers]
    monkeypatch.setattr(relay_logging, "_configured_level", None)
    yield
    root.setLevel(saved_levels[0])
    relay_logger.setLevel(saved_levels[1])
    known = [saved[0] for saved in saved_handlers]
    for handler in list(root.handlers):
        if handler not in known:
            root.removeHandler(handler)
    for handler, level, formatter, filters in saved_handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.filters[:] = filters


def test_first_configured_level_survives_later_calls(unconfigured_logging) -> None:
    assert configure_logging("debug") == "DEBUG"
    # importing the server calls configure_logging() with no level
    assert configure_logging() == "DEBUG"
    assert logging.getLogger("relay").level == logging.DEBUG


def test_force_reconfigures_level(unconfigured_logging) -> None:
    configure_logging("DEBUG")
    assert configure_logging("WARNING", force=True) == "WARNING"
    assert logging.getLogger("relay").level == logging.WARNING


def test_member_context_stamps_records() -> None:
    handler = _ListHandler()
    handler.addFilter(LogContextFilter())
    logger = logging.getLogger("relay.tests.log_setup")
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    try:
        member = make_member("0123456789abcdef")
        member.session_id = "abc123"
        with member_log_context(member, request_id=7):
            logger.info("inside")
        logger.info("outside")
    finally:
        logger.removeHandler(handler)
        logger.propagate = True

    inside, outside = handler.records
    assert (inside.client_id, inside.session_id, inside.request_id) == ("01234567", "abc123", "7")
    assert (outside.client_id, outside.session_id, outside.request_id) == ("-", "-", "-")


def test_nested_context_keeps_outer_fields() -> None:
    with log_context(client_id="conn0001"):
        with log_context(session_id="abc123", request_id=None):
            assert current_log_fields() == {
                "client_id": "conn0001",
                "session_id": "abc123",
                "request_id": "-",
            }
        assert current_log_fields()["session_id"] == "-"


def test_unknown_log_field_is_rejected() -> None:
    with pytest.raises(TypeError, match="unknown log field"):
        with log_context(user="x"):
            pass


def test_cli_log_level_reaches_relay_loggers(unconfigured_logging, monkeypatch) -> None:
    from relay import cli

    calls = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    cli.main(["--log-level", "debug", "--port", "9001"])
    configure_logging()

    assert logging.getLogger("relay").level == logging.DEBUG
    assert calls == [("relay.server:app", {"host": cli.DEFAULT_HOST, "port": 9001, "log_level": "debug"})]

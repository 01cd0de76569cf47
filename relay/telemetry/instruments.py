"""MetricInstruments registry: typed accessors for the relay's OTel instruments."""

from __future__ import annotations

import logging
from opentelemetry import metrics
from ..config.telemetry import (
    OTEL_SERVICE_NAME,
    METRIC_ACTIVE_SESSIONS,
    METRIC_ACTIVE_CONNECTIONS,
    METRIC_COMMAND_ERRORS_TOTAL,
    METRIC_FRAMES_RELAYED_TOTAL,
    METRIC_IDLE_DISCONNECTS_TOTAL,
    METRIC_SESSIONS_CREATED_TOTAL,
    METRIC_SESSIONS_DESTROYED_TOTAL,
    METRIC_CONNECTIONS_REJECTED_TOTAL,
    METRIC_RATE_LIMIT_VIOLATIONS_TOTAL,
)

logger = logging.getLogger(__name__)


def _counter(meter: metrics.Meter, spec: tuple[str, str, str]) -> metrics.Counter:
    name, unit, desc = spec
    return meter.create_counter(name, unit=unit, description=desc)


def _updown(meter: metrics.Meter, spec: tuple[str, str, str]) -> metrics.UpDownCounter:
    name, unit, desc = spec
    return meter.create_up_down_counter(name, unit=unit, description=desc)


class MetricInstruments:
    """Holds all OTel metric instruments created from config specs."""

    __slots__ = (
        "sessions_created_total",
        "sessions_destroyed_total",
        "frames_relayed_total",
        "command_errors_total",
        "connections_rejected_total",
        "rate_limit_violations_total",
        "idle_disconnects_total",
        "active_connections",
        "active_sessions",
    )

    def __init__(self, meter: metrics.Meter) -> None:
        # Counters
        self.sessions_created_total = _counter(meter, METRIC_SESSIONS_CREATED_TOTAL)
        self.sessions_destroyed_total = _counter(meter, METRIC_SESSIONS_DESTROYED_TOTAL)
        self.frames_relayed_total = _counter(meter, METRIC_FRAMES_RELAYED_TOTAL)
        self.command_errors_total = _counter(meter, METRIC_COMMAND_ERRORS_TOTAL)
        self.connections_rejected_total = _counter(meter, METRIC_CONNECTIONS_REJECTED_TOTAL)
        self.rate_limit_violations_total = _counter(meter, METRIC_RATE_LIMIT_VIOLATIONS_TOTAL)
        self.idle_disconnects_total = _counter(meter, METRIC_IDLE_DISCONNECTS_TOTAL)
        # UpDown counters
        self.active_connections = _updown(meter, METRIC_ACTIVE_CONNECTIONS)
        self.active_sessions = _updown(meter, METRIC_ACTIVE_SESSIONS)


_metrics: MetricInstruments | None = None


def get_metrics() -> MetricInstruments:
    """Return the global MetricInstruments (no-op meter if no SDK is installed)."""
    global _metrics  # noqa: PLW0603
    if _metrics is None:
        meter = metrics.get_meter(OTEL_SERVICE_NAME)
        _metrics = MetricInstruments(meter)
    return _metrics


def initialize_metrics() -> None:
    """Create MetricInstruments from the current global meter provider."""
    global _metrics  # noqa: PLW0603
    meter = metrics.get_meter(OTEL_SERVICE_NAME)
    _metrics = MetricInstruments(meter)
    logger.info("Telemetry metrics initialized")


__all__ = ["MetricInstruments", "get_metrics", "initialize_metrics"]

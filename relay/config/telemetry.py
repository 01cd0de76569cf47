"""Telemetry configuration: service name and metric specs.

Metric spec tuples are ``(name, unit, description)``.
"""

import os

OTEL_SERVICE_NAME: str = os.getenv("OTEL_SERVICE_NAME", "session-relay")

# Counters
METRIC_SESSIONS_CREATED_TOTAL = ("relay.sessions_created_total", "{session}", "Sessions created")
METRIC_SESSIONS_DESTROYED_TOTAL = ("relay.sessions_destroyed_total", "{session}", "Sessions destroyed")
METRIC_FRAMES_RELAYED_TOTAL = ("relay.frames_relayed_total", "{frame}", "Relayed frames delivered to peers")
METRIC_COMMAND_ERRORS_TOTAL = ("relay.command_errors_total", "{error}", "Commands answered with a failure")
METRIC_CONNECTIONS_REJECTED_TOTAL = (
    "relay.connections_rejected_total",
    "{connection}",
    "Rejected at capacity",
)
METRIC_RATE_LIMIT_VIOLATIONS_TOTAL = (
    "relay.rate_limit_violations_total",
    "{violation}",
    "Rate limit hits",
)
METRIC_IDLE_DISCONNECTS_TOTAL = (
    "relay.idle_disconnects_total",
    "{connection}",
    "Idle timeout disconnects",
)

# UpDown counters
METRIC_ACTIVE_CONNECTIONS = ("relay.active_connections", "{connection}", "Current WebSocket connections")
METRIC_ACTIVE_SESSIONS = ("relay.active_sessions", "{session}", "Current live sessions")


__all__ = [
    "OTEL_SERVICE_NAME",
    "METRIC_SESSIONS_CREATED_TOTAL",
    "METRIC_SESSIONS_DESTROYED_TOTAL",
    "METRIC_FRAMES_RELAYED_TOTAL",
    "METRIC_COMMAND_ERRORS_TOTAL",
    "METRIC_CONNECTIONS_REJECTED_TOTAL",
    "METRIC_RATE_LIMIT_VIOLATIONS_TOTAL",
    "METRIC_IDLE_DISCONNECTS_TOTAL",
    "METRIC_ACTIVE_CONNECTIONS",
    "METRIC_ACTIVE_SESSIONS",
]

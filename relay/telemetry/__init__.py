"""Public telemetry API: metric instrument accessors."""

from .instruments import get_metrics, initialize_metrics

__all__ = [
    "get_metrics",
    "initialize_metrics",
]

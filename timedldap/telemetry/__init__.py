"""Telemetry subpackage (lightweight).

Exposes phase timers, the scope-local metrics registry and the logger factory.
"""

from .metrics import (
    DEFAULT_REGISTRY,
    MetricsRegistry,
    Phase,
    Timer,
    current_scope_key,
    get_metrics,
    reset_metrics,
)
from .logging import get_logger

__all__ = [
    "DEFAULT_REGISTRY",
    "MetricsRegistry",
    "Phase",
    "Timer",
    "current_scope_key",
    "get_logger",
    "get_metrics",
    "reset_metrics",
]

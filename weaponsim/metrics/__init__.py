"""Pluggable per-combat metrics.

Importing this package registers the built-in trackers with
:data:`metrics_registry`.
"""

from . import trackers
from .engine import CombatContext, CombatMetricsEngine, MetricsTracker
from .registry import MetricsRegistry, metrics_registry

__all__ = [
    "CombatContext",
    "CombatMetricsEngine",
    "MetricsRegistry",
    "MetricsTracker",
    "metrics_registry",
    "trackers",
]

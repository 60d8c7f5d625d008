from __future__ import annotations

from typing import Literal

# =============================================================================
# RANDOMNESS
# =============================================================================

# Master seed for the random stream registry. ``None`` means system entropy.
RandomSeed = int | str | None

# =============================================================================
# METRICS
# =============================================================================

MetricValue = int | float | str | bool | None

# Flat mapping returned by a single tracker at the end of a combat.
TrackerMetrics = dict[str, MetricValue]

# Tracker categories used as top-level keys in finalized metrics.
TrackerCategory = Literal["classSpecific", "reportSpecific"]

"""Distribution statistics over a batch of completed combats.

Everything here is a pure function of the combat results passed in: the
analyzer holds no state, and analyzing the same results twice gives identical
output.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from weaponsim.constants.combat import StatisticsConstants
from weaponsim.errors import EmptyInputError
from weaponsim.game.combat import CombatResult
from weaponsim.game.enums import ConsistencyRating


@dataclass(frozen=True)
class DamageStatistics:
    mean: float
    median: float
    standard_deviation: float
    variance: float
    min: float
    max: float
    range: float
    # Keyed by percentile, e.g. ``percentiles[90]``.
    percentiles: dict[int, float]
    coefficient_of_variation: float
    interquartile_range: float


@dataclass(frozen=True)
class ConsistencyMetrics:
    coefficient_of_variation: float
    relative_standard_deviation: float
    rating: ConsistencyRating
    outlier_count: int
    outlier_percentage: float
    # 1 / (1 + CV): 1.0 for perfectly steady damage, falling towards 0.
    stability_index: float


@dataclass(frozen=True)
class HemorrhageStatistics:
    trigger_frequency: float
    trigger_rate: float
    average_turns_to_trigger: float
    average_damage_per_trigger: float
    total_hemorrhage_damage: int
    max_triggers_in_single_combat: int
    # Triggers per combat -> number of combats with that many.
    trigger_distribution: dict[int, int]


@dataclass(frozen=True)
class StatisticalAnalysis:
    damage_stats: DamageStatistics
    consistency: ConsistencyMetrics
    hemorrhage_stats: HemorrhageStatistics | None
    sample_size: int


def classify_consistency(cv: float) -> ConsistencyRating:
    ratings = list(ConsistencyRating)
    for bound, rating in zip(StatisticsConstants.CONSISTENCY_CV_BOUNDS, ratings, strict=False):
        if cv < bound:
            return rating
    return ConsistencyRating.VERY_INCONSISTENT


class StatisticalAnalyzer:
    """Turns a list of :class:`CombatResult` into a :class:`StatisticalAnalysis`."""

    def analyze(self, results: Sequence[CombatResult]) -> StatisticalAnalysis:
        if not results:
            raise EmptyInputError("Cannot analyze an empty list of combat results")

        damages = [result.total_damage for result in results]
        return StatisticalAnalysis(
            damage_stats=self.damage_statistics(damages),
            consistency=self.consistency_metrics(damages),
            hemorrhage_stats=self.hemorrhage_statistics(results),
            sample_size=len(results),
        )

    def damage_statistics(self, damages: Sequence[float]) -> DamageStatistics:
        if not damages:
            raise EmptyInputError("Cannot compute statistics over no damage values")

        values = np.asarray(damages, dtype=float)
        mean = float(values.mean())
        # Population variance, dividing by N.
        variance = float(values.var())
        stddev = math.sqrt(variance)
        percentiles = {
            p: float(v)
            for p, v in zip(
                StatisticsConstants.PERCENTILES,
                np.percentile(values, StatisticsConstants.PERCENTILES),
                strict=True,
            )
        }
        low, high = float(values.min()), float(values.max())

        return DamageStatistics(
            mean=mean,
            median=percentiles[50],
            standard_deviation=stddev,
            variance=variance,
            min=low,
            max=high,
            range=high - low,
            percentiles=percentiles,
            coefficient_of_variation=stddev / mean if mean > 0 else 0.0,
            interquartile_range=percentiles[75] - percentiles[25],
        )

    def consistency_metrics(self, damages: Sequence[float]) -> ConsistencyMetrics:
        if not damages:
            raise EmptyInputError("Cannot compute consistency over no damage values")

        values = np.asarray(damages, dtype=float)
        mean = float(values.mean())
        stddev = float(values.std())
        cv = stddev / mean if mean > 0 else 0.0

        outlier_count = int(
            np.count_nonzero(np.abs(values - mean) > StatisticsConstants.OUTLIER_STDDEVS * stddev)
        )

        return ConsistencyMetrics(
            coefficient_of_variation=cv,
            relative_standard_deviation=cv * 100,
            rating=classify_consistency(cv),
            outlier_count=outlier_count,
            outlier_percentage=outlier_count / len(values) * 100,
            stability_index=min(1.0, 1 / (1 + cv)),
        )

    def hemorrhage_statistics(
        self, results: Sequence[CombatResult]
    ) -> HemorrhageStatistics | None:
        """Trigger statistics, or ``None`` if no combat triggered at all."""
        trigger_counts = [result.hemorrhage_triggers for result in results]
        total_triggers = sum(trigger_counts)
        if total_triggers == 0:
            return None

        first_triggers = [
            turn
            for turn in (result.first_hemorrhage_attack for result in results)
            if turn is not None
        ]
        total_damage = sum(result.hemorrhage_damage for result in results)
        combats = len(results)

        return HemorrhageStatistics(
            trigger_frequency=total_triggers / combats,
            trigger_rate=sum(1 for count in trigger_counts if count > 0) / combats,
            average_turns_to_trigger=(
                sum(first_triggers) / len(first_triggers) if first_triggers else 0.0
            ),
            average_damage_per_trigger=total_damage / total_triggers,
            total_hemorrhage_damage=total_damage,
            max_triggers_in_single_combat=max(trigger_counts),
            trigger_distribution=dict(sorted(Counter(trigger_counts).items())),
        )

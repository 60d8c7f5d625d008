"""Compare a test weapon's analysis against a baseline weapon's analysis.

All comparisons are test-minus-baseline, so positive differences favour the
test weapon (except CV, where lower is steadier).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from weaponsim.constants.combat import StatisticsConstants as Stats
from weaponsim.errors import ConfigurationError
from weaponsim.simulation.statistics import StatisticalAnalysis


class ConsistencyVerdict(Enum):
    MORE_CONSISTENT = "more-consistent"
    SIMILAR = "similar"
    LESS_CONSISTENT = "less-consistent"


class BalanceRating(Enum):
    UNDERPOWERED = "underpowered"
    BALANCED = "balanced"
    OVERPOWERED = "overpowered"
    SIGNIFICANTLY_OVERPOWERED = "significantly-overpowered"


class RiskLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class OverallAssessment(Enum):
    SIGNIFICANTLY_BETTER = "significantly-better"
    BETTER = "better"
    SIMILAR = "similar"
    WORSE = "worse"
    SIGNIFICANTLY_WORSE = "significantly-worse"


@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float

    def __contains__(self, value: float) -> bool:
        return self.lower <= value <= self.upper


@dataclass(frozen=True)
class HemorrhageAdvantage:
    frequency: float
    # Expected hemorrhage damage per combat: frequency x average proc damage.
    damage_contribution: float
    # ``damage_contribution`` as a percentage of the baseline mean.
    advantage_percentage: float


@dataclass(frozen=True)
class BalanceAssessment:
    rating: BalanceRating
    recommendation: str
    risk_level: RiskLevel
    total_advantage_percentage: float


@dataclass(frozen=True)
class WeaponComparison:
    mean_difference: float
    mean_percentage_difference: float
    confidence_interval: ConfidenceInterval
    cv_difference: float
    stability_difference: float
    consistency: ConsistencyVerdict
    hemorrhage_advantage: HemorrhageAdvantage | None
    balance: BalanceAssessment
    overall: OverallAssessment
    weapon_name: str = ""
    baseline_name: str = ""


def compare_analyses(
    test: StatisticalAnalysis,
    baseline: StatisticalAnalysis,
    iterations: int | None = None,
    *,
    weapon_name: str = "",
    baseline_name: str = "",
) -> WeaponComparison:
    """Compare two analyses.

    ``iterations`` is the per-weapon combat count used for the standard error
    of the mean difference; it defaults to the test sample size.
    """
    n = iterations if iterations is not None else test.sample_size
    if n < 1:
        raise ConfigurationError("iterations must be >= 1")

    test_damage = test.damage_stats
    base_damage = baseline.damage_stats

    mean_difference = test_damage.mean - base_damage.mean
    mean_pct = mean_difference / base_damage.mean * 100 if base_damage.mean > 0 else 0.0

    pooled_variance = (test_damage.variance + base_damage.variance) / 2
    margin = Stats.CONFIDENCE_Z * math.sqrt(pooled_variance * 2 / n)

    cv_difference = (
        test.consistency.coefficient_of_variation
        - baseline.consistency.coefficient_of_variation
    )
    hemorrhage = _hemorrhage_advantage(test, base_damage.mean)

    return WeaponComparison(
        mean_difference=mean_difference,
        mean_percentage_difference=mean_pct,
        confidence_interval=ConfidenceInterval(
            mean_difference - margin, mean_difference + margin
        ),
        cv_difference=cv_difference,
        stability_difference=(
            test.consistency.stability_index - baseline.consistency.stability_index
        ),
        consistency=_consistency_verdict(cv_difference),
        hemorrhage_advantage=hemorrhage,
        balance=assess_balance(
            mean_pct + (hemorrhage.advantage_percentage if hemorrhage else 0.0)
        ),
        overall=overall_assessment(mean_pct),
        weapon_name=weapon_name,
        baseline_name=baseline_name,
    )


def _consistency_verdict(cv_difference: float) -> ConsistencyVerdict:
    if abs(cv_difference) < Stats.CONSISTENCY_SIMILAR_DELTA:
        return ConsistencyVerdict.SIMILAR
    if cv_difference < 0:
        return ConsistencyVerdict.MORE_CONSISTENT
    return ConsistencyVerdict.LESS_CONSISTENT


def _hemorrhage_advantage(
    test: StatisticalAnalysis, baseline_mean: float
) -> HemorrhageAdvantage | None:
    stats = test.hemorrhage_stats
    if stats is None:
        return None
    contribution = stats.trigger_frequency * stats.average_damage_per_trigger
    return HemorrhageAdvantage(
        frequency=stats.trigger_frequency,
        damage_contribution=contribution,
        advantage_percentage=contribution / baseline_mean * 100 if baseline_mean > 0 else 0.0,
    )


def assess_balance(total_advantage: float) -> BalanceAssessment:
    """Rate a weapon from its total % advantage over the baseline."""
    if total_advantage < Stats.BALANCE_UNDERPOWERED_MAJOR_PCT:
        rating, risk = BalanceRating.UNDERPOWERED, RiskLevel.MEDIUM
        recommendation = "Consider increasing base damage or improving special mechanics"
    elif total_advantage < Stats.BALANCE_UNDERPOWERED_PCT:
        rating, risk = BalanceRating.UNDERPOWERED, RiskLevel.LOW
        recommendation = "Minor improvements needed to reach baseline performance"
    elif total_advantage <= Stats.BALANCE_BALANCED_PCT:
        rating, risk = BalanceRating.BALANCED, RiskLevel.LOW
        recommendation = "Weapon performance is within acceptable range"
    elif total_advantage <= Stats.BALANCE_OVERPOWERED_PCT:
        rating, risk = BalanceRating.OVERPOWERED, RiskLevel.MEDIUM
        recommendation = "Consider reducing damage or special mechanic frequency"
    else:
        rating, risk = BalanceRating.SIGNIFICANTLY_OVERPOWERED, RiskLevel.HIGH
        recommendation = "Significant rebalancing required"
    return BalanceAssessment(rating, recommendation, risk, total_advantage)


def overall_assessment(mean_percentage_difference: float) -> OverallAssessment:
    magnitude = abs(mean_percentage_difference)
    if magnitude < Stats.ASSESSMENT_SIMILAR_PCT:
        return OverallAssessment.SIMILAR
    better = mean_percentage_difference > 0
    if magnitude < Stats.ASSESSMENT_SIGNIFICANT_PCT:
        return OverallAssessment.BETTER if better else OverallAssessment.WORSE
    if better:
        return OverallAssessment.SIGNIFICANTLY_BETTER
    return OverallAssessment.SIGNIFICANTLY_WORSE

"""Constants for combat calculations and mechanics."""

from types import MappingProxyType


class CombatConstants:
    """Constants for combat calculations and mechanics."""

    # --- d20 Resolution ---
    D20_SIDES = 20
    # Natural roll that is always a hit and a critical
    NATURAL_CRIT = 20

    # --- Dice ---
    # Die sizes accepted by the dice parser
    VALID_DIE_SIDES = (4, 6, 8, 10, 12, 20)

    # --- Bleed counter buildup ---
    BLEED_DIE_SIDES = 4
    BLEED_ADVANTAGE_DIE_SIDES = 8
    BLEED_DIE_COUNT = 1

    # Counter needed before hemorrhage fires, keyed by target size
    BLEED_THRESHOLDS = MappingProxyType(
        {
            "tiny": 12,  # Same as small
            "small": 12,
            "medium": 12,
            "large": 16,
            "huge": 20,
            "gargantuan": 24,
        }
    )

    # Creature-type words in the target size string that grant bleed immunity
    BLEED_IMMUNE_MARKERS = ("construct", "undead", "elemental")

    # --- Hemorrhage proc ---
    # Damage is (HEMORRHAGE_BASE_DICE + proficiency bonus) d6
    HEMORRHAGE_BASE_DICE = 3
    HEMORRHAGE_DIE_SIDES = 6

    # --- Target switching ---
    # With target switching enabled, a new target is engaged every N rounds
    TARGET_SWITCH_INTERVAL = 5


class EffectNames:
    """Names written into ``SpecialEffect.name`` and read back by trackers."""

    BLEED_COUNTER = "Bleed Counter"
    BLEED_IMMUNITY = "Bleed Immunity"
    HEMORRHAGE = "Hemorrhage"
    SNEAK_ATTACK = "Sneak Attack"


class StatisticsConstants:
    """Cut-offs used by the statistical analyzer and comparison layer."""

    PERCENTILES = (25, 50, 75, 90, 95, 99)

    # Upper CV bounds for each consistency rating, best first
    CONSISTENCY_CV_BOUNDS = (0.1, 0.2, 0.4, 0.6)

    # Values further than this many standard deviations from the mean
    OUTLIER_STDDEVS = 2.0

    # 95% confidence interval
    CONFIDENCE_Z = 1.96

    # |CV difference| below this counts as equally consistent
    CONSISTENCY_SIMILAR_DELTA = 0.05

    # Mean % difference cut-offs for the overall verdict
    ASSESSMENT_SIMILAR_PCT = 5.0
    ASSESSMENT_SIGNIFICANT_PCT = 15.0

    # Total % advantage cut-offs for the balance rating
    BALANCE_UNDERPOWERED_MAJOR_PCT = -15.0
    BALANCE_UNDERPOWERED_PCT = -5.0
    BALANCE_BALANCED_PCT = 15.0
    BALANCE_OVERPOWERED_PCT = 30.0

from enum import Enum


class EffectCategory(Enum):
    """Kind of entry recorded in ``AttackResult.special_effects``."""

    # Bleed counter buildup; magnitude is counter added, not damage.
    COUNTER = "counter"
    # Target shrugged off a status effect; magnitude is always 0.
    IMMUNITY = "immunity"
    # Damage from a status effect proc. Never doubled on a critical.
    STATUS_EFFECT = "status_effect"
    # Damage added by a character damage modifier.
    HIT_MODIFIER = "hit_modifier"
    # Damage or temp HP from a triggered class feature.
    CLASS_FEATURE = "class_feature"


class Trigger(Enum):
    """Events that fire damage modifiers and class features."""

    ALWAYS = "always"
    HIT = "hit"
    CRIT = "crit"
    HEMORRHAGE = "hemorrhage"


class FeatureEffectType(Enum):
    """What a triggered class feature does when it fires."""

    DAMAGE = "damage"
    TEMP_HP = "temp_hp"
    # Applied at roll time through the character, not after the hit.
    HIT_BONUS = "hit_bonus"
    CRIT_RANGE = "crit_range"


class ConsistencyRating(Enum):
    """Damage consistency buckets, best first, by coefficient of variation."""

    VERY_CONSISTENT = "very-consistent"
    CONSISTENT = "consistent"
    MODERATE = "moderate"
    INCONSISTENT = "inconsistent"
    VERY_INCONSISTENT = "very-inconsistent"

"""Attacking characters and the class features they bring to an attack."""

from __future__ import annotations

import logging
import math
from collections.abc import Collection
from dataclasses import dataclass, field

from weaponsim.constants.combat import CombatConstants, EffectNames
from weaponsim.errors import ConfigurationError
from weaponsim.game.enums import FeatureEffectType, Trigger
from weaponsim.util.dice import Dice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Eligibility:
    """Conditions an attack must satisfy before a feature applies.

    All set conditions are required together. ``weapon_properties`` is
    satisfied by any one of the listed properties, so Sneak Attack's rule
    reads as ``Eligibility(requires_advantage=True,
    weapon_properties=("finesse", "ranged", "thrown"))``: advantage AND a
    finesse-or-ranged weapon.
    """

    requires_advantage: bool = False
    weapon_properties: tuple[str, ...] = ()

    def is_met(self, has_advantage: bool, weapon_properties: Collection[str]) -> bool:
        if self.requires_advantage and not has_advantage:
            return False
        if self.weapon_properties and not any(
            prop in weapon_properties for prop in self.weapon_properties
        ):
            return False
        return True


@dataclass
class ClassFeature:
    """A class feature that fires on a trigger.

    ``dice_expression`` is rolled through the critical rule, so its dice
    double on a critical hit. ``value`` is a flat amount added on top (or the
    whole amount for features without dice).
    """

    name: str
    trigger: Trigger
    effect_type: FeatureEffectType = FeatureEffectType.DAMAGE
    dice_expression: str | None = None
    value: int = 0
    eligibility: Eligibility | None = None
    dice: Dice | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.trigger = _coerce_trigger(self.trigger)
        if not isinstance(self.effect_type, FeatureEffectType):
            try:
                self.effect_type = FeatureEffectType(self.effect_type)
            except ValueError:
                logger.warning(
                    f"Feature '{self.name}': unknown effect type "
                    f"{self.effect_type!r}, it will never apply"
                )
        # Parse up front so a bad expression fails before any combat runs.
        self.dice = Dice(self.dice_expression) if self.dice_expression else None

    def is_eligible(self, has_advantage: bool, weapon_properties: Collection[str]) -> bool:
        if self.eligibility is None:
            return True
        return self.eligibility.is_met(has_advantage, weapon_properties)


@dataclass
class DamageModifier:
    """Extra damage a character adds on a trigger, e.g. a ring of fire damage.

    Unlike class features, modifier dice are not doubled on a critical.
    """

    name: str
    trigger: Trigger
    damage_bonus: int = 0
    dice_expression: str | None = None
    damage_type: str = ""
    dice: Dice | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.trigger = _coerce_trigger(self.trigger)
        self.dice = Dice(self.dice_expression) if self.dice_expression else None


@dataclass
class Character:
    """The attacker in a simulated combat.

    Attributes
    ----------
    attack_bonus:
        Total to-hit bonus before weapon magic and ``HIT_BONUS`` features.
    flat_damage_bonus:
        Added once to every hit, never doubled on a critical.
    crit_range:
        Lowest natural d20 that counts as a critical (20 normally, 19 for
        Improved Critical).
    """

    name: str
    character_class: str
    level: int
    proficiency_bonus: int
    attack_bonus: int
    flat_damage_bonus: int = 0
    subclass: str = ""
    crit_range: int = CombatConstants.NATURAL_CRIT
    class_features: list[ClassFeature] = field(default_factory=list)
    damage_modifiers: list[DamageModifier] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 20:
            raise ConfigurationError(f"level must be within 1-20, got {self.level}")
        if self.proficiency_bonus < 0:
            raise ConfigurationError("proficiency_bonus must be >= 0")
        if not 2 <= self.crit_range <= CombatConstants.NATURAL_CRIT:
            raise ConfigurationError(f"crit_range must be within 2-20, got {self.crit_range}")

    @property
    def to_hit_bonus(self) -> int:
        """Attack bonus including passive ``HIT_BONUS`` features."""
        return self.attack_bonus + sum(
            feature.value
            for feature in self.class_features
            if feature.effect_type is FeatureEffectType.HIT_BONUS
        )

    @property
    def effective_crit_range(self) -> int:
        """Crit range after any ``CRIT_RANGE`` features widen it."""
        widened = [
            feature.value
            for feature in self.class_features
            if feature.effect_type is FeatureEffectType.CRIT_RANGE and feature.value
        ]
        return min([self.crit_range, *widened])

    @property
    def total_flat_damage_bonus(self) -> int:
        """Flat damage plus flat ``ALWAYS`` damage modifiers."""
        return self.flat_damage_bonus + sum(
            modifier.damage_bonus
            for modifier in self.damage_modifiers
            if modifier.trigger is Trigger.ALWAYS and modifier.dice is None
        )

    def get_triggered_features(self, trigger: Trigger) -> list[ClassFeature]:
        """Return features fired by ``trigger``, in declaration order."""
        return [
            feature
            for feature in self.class_features
            if feature.trigger is trigger
            and feature.effect_type
            not in (FeatureEffectType.HIT_BONUS, FeatureEffectType.CRIT_RANGE)
        ]

    def get_damage_modifiers(self, trigger: Trigger) -> list[DamageModifier]:
        return [m for m in self.damage_modifiers if m.trigger is trigger]


# -----------------------------------------------------------------------------
# Level-based helpers
# -----------------------------------------------------------------------------


def proficiency_bonus_for_level(level: int) -> int:
    if not 1 <= level <= 20:
        raise ConfigurationError(f"level must be within 1-20, got {level}")
    return math.ceil(level / 4) + 1


def sneak_attack_dice(level: int) -> str:
    """Rogue Sneak Attack dice: 1d6 at level 1, one more d6 every odd level."""
    if not 1 <= level <= 20:
        raise ConfigurationError(f"level must be within 1-20, got {level}")
    return f"{math.ceil(level / 2)}d6"


def sneak_attack_feature(level: int) -> ClassFeature:
    return ClassFeature(
        name=EffectNames.SNEAK_ATTACK,
        trigger=Trigger.HIT,
        effect_type=FeatureEffectType.DAMAGE,
        dice_expression=sneak_attack_dice(level),
        eligibility=Eligibility(
            requires_advantage=True,
            weapon_properties=("finesse", "ranged", "thrown"),
        ),
    )


def _coerce_trigger(trigger: Trigger | str) -> Trigger:
    if isinstance(trigger, Trigger):
        return trigger
    try:
        return Trigger(trigger)
    except ValueError:
        raise ConfigurationError(f"Unknown trigger {trigger!r}") from None

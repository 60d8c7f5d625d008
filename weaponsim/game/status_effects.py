"""Status effects that a weapon builds up on its target.

A weapon owns its status effects, and each effect owns its own mutable state.
Nothing here is global: parallel workers must each build their own weapon.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from weaponsim.constants.combat import CombatConstants, EffectNames
from weaponsim.errors import UnknownSizeClassError
from weaponsim.game.enums import EffectCategory
from weaponsim.game.resolution.outcomes import SpecialEffect
from weaponsim.util.dice import Dice, critical_adjust

if TYPE_CHECKING:
    from weaponsim.game.resolution.outcomes import AttackContext, AttackResult
    from weaponsim.util.rng import RNG


class WeaponStatusEffect(abc.ABC):
    """Base class for a mechanic a weapon applies to every attack it makes.

    Attributes
    ----------
    name:
        Human readable name of the effect.
    mechanic_type:
        Key used to pick the matching metrics tracker (e.g. ``"bleed"``).
    """

    name: str
    mechanic_type: str

    @abc.abstractmethod
    def apply_to_attack(
        self, context: AttackContext, result: AttackResult, rand: RNG | None = None
    ) -> None:
        """Update internal state from a resolved attack and append to ``result``."""

    @abc.abstractmethod
    def reset(self) -> None:
        """Return to the state of a freshly built weapon."""

    def switch_target(self) -> None:
        """Called when the simulated target changes."""
        self.reset()


def bleed_threshold(
    target_size: str,
    thresholds: Mapping[str, int] = CombatConstants.BLEED_THRESHOLDS,
) -> int:
    """Return the hemorrhage threshold for a target size string.

    Extra words are allowed (``"Large beast"``), but one of them must be a
    known size class. There is no fallback size.
    """
    for token in target_size.lower().split():
        if token in thresholds:
            return thresholds[token]
    raise UnknownSizeClassError(f"Unknown target size: {target_size!r}")


@dataclass
class BleedState:
    """Accumulated bleed on the current target.

    ``counter`` never goes below zero and only grows between resets.
    """

    counter: int = 0
    thresholds: Mapping[str, int] = field(
        default_factory=lambda: CombatConstants.BLEED_THRESHOLDS
    )

    def add(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("Bleed counter can only increase")
        self.counter += amount

    def threshold_for(self, target_size: str) -> int:
        return bleed_threshold(target_size, self.thresholds)

    def reset(self) -> None:
        self.counter = 0


class BleedEffect(WeaponStatusEffect):
    """Bleed buildup that bursts into a Hemorrhage at a size-based threshold.

    On every hit against a target that can bleed:

    * 1d4 is added to the counter (1d8 with advantage). A critical doubles the
      number of dice, so a critical with advantage adds 2d8.
    * If the counter has reached the target's threshold, Hemorrhage deals
      ``(hemorrhage_base_dice + proficiency bonus) d6`` and the counter drops
      back to zero.

    Constructs, undead, elementals and explicitly immune targets are skipped
    without touching the counter.
    """

    name = EffectNames.HEMORRHAGE
    mechanic_type = "bleed"

    def __init__(
        self,
        hemorrhage_base_dice: int = CombatConstants.HEMORRHAGE_BASE_DICE,
        thresholds: Mapping[str, int] | None = None,
    ) -> None:
        self.hemorrhage_base_dice = hemorrhage_base_dice
        self.state = BleedState(
            thresholds=thresholds
            if thresholds is not None
            else CombatConstants.BLEED_THRESHOLDS
        )

    @classmethod
    def from_parameters(cls, parameters: Mapping[str, Any]) -> BleedEffect:
        thresholds = parameters.get("thresholds")
        return cls(
            hemorrhage_base_dice=int(
                parameters.get("hemorrhage_base_dice", CombatConstants.HEMORRHAGE_BASE_DICE)
            ),
            thresholds=dict(thresholds) if thresholds is not None else None,
        )

    @property
    def counter(self) -> int:
        return self.state.counter

    def is_immune(self, context: AttackContext) -> bool:
        if context.bleed_immune:
            return True
        target = context.target_size.lower()
        return any(marker in target for marker in CombatConstants.BLEED_IMMUNE_MARKERS)

    @staticmethod
    def counter_dice(has_advantage: bool, is_critical: bool) -> Dice:
        sides = (
            CombatConstants.BLEED_ADVANTAGE_DIE_SIDES
            if has_advantage
            else CombatConstants.BLEED_DIE_SIDES
        )
        return critical_adjust(
            Dice.from_parts(CombatConstants.BLEED_DIE_COUNT, sides), is_critical
        )

    def hemorrhage_dice(self, proficiency_bonus: int) -> Dice:
        return Dice.from_parts(
            self.hemorrhage_base_dice + proficiency_bonus,
            CombatConstants.HEMORRHAGE_DIE_SIDES,
        )

    def apply_to_attack(
        self, context: AttackContext, result: AttackResult, rand: RNG | None = None
    ) -> None:
        if not result.hit:
            return

        if self.is_immune(context):
            result.add_effect(
                SpecialEffect(EffectNames.BLEED_IMMUNITY, 0, EffectCategory.IMMUNITY)
            )
            return

        # Raises for an unknown size before the counter is touched.
        threshold = self.state.threshold_for(context.target_size)
        added = self.counter_dice(result.has_advantage, result.critical).roll(rand)
        self.state.add(added)
        result.add_effect(
            SpecialEffect(EffectNames.BLEED_COUNTER, added, EffectCategory.COUNTER)
        )

        if self.state.counter >= threshold:
            # Proc damage is a status effect, so a critical does not double it.
            damage = self.hemorrhage_dice(context.attacker.proficiency_bonus).roll(rand)
            result.add_effect(
                SpecialEffect(EffectNames.HEMORRHAGE, damage, EffectCategory.STATUS_EFFECT)
            )
            result.hemorrhage_triggered = True
            result.hemorrhage_damage += damage
            result.total_damage += damage
            self.state.reset()

    def reset(self) -> None:
        self.state.reset()

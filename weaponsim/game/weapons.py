from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from weaponsim.errors import ConfigurationError
from weaponsim.game.status_effects import BleedEffect, WeaponStatusEffect
from weaponsim.util import rng
from weaponsim.util.dice import Dice, critical_adjust

logger = logging.getLogger(__name__)

VALID_RARITIES = ("common", "uncommon", "rare", "very-rare", "legendary")


@dataclass(frozen=True)
class MechanicDefinition:
    """A named special mechanic on a weapon, keyed by ``type`` (e.g. ``"bleed"``)."""

    name: str
    type: str
    # Plain dict: definitions are pickled to worker processes.
    parameters: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WeaponDefinition:
    """Static description of a weapon. Cheap to copy between worker processes."""

    name: str
    base_damage: str
    damage_type: str = "slashing"
    properties: tuple[str, ...] = ()
    magic_bonus: int = 0
    rarity: str = "common"
    mechanics: tuple[MechanicDefinition, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("Weapon definition must have a name")
        if self.rarity not in VALID_RARITIES:
            raise ConfigurationError(
                f"Invalid rarity {self.rarity!r}. Valid rarities: {', '.join(VALID_RARITIES)}"
            )
        # Validates the expression.
        Dice(self.base_damage)

    @property
    def display_name(self) -> str:
        """Name with the magic bonus appended, e.g. ``Baseline Rapier +2``."""
        if self.magic_bonus > 0:
            return f"{self.name} +{self.magic_bonus}"
        return self.name


class BaseDamageRoll(NamedTuple):
    total: int
    # Portion of ``total`` rolled on the extra critical dice.
    crit_extra: int


# Mechanic type -> status effect builder. Types without an entry still select
# metrics trackers but add no behaviour to attacks.
STATUS_EFFECT_FACTORIES: dict[str, Callable[[Mapping[str, Any]], WeaponStatusEffect]] = {
    "bleed": BleedEffect.from_parameters,
}


class Weapon:
    """A weapon instance, including the live state of its status effects.

    Each instance owns its effects' counters. Reuse one across sequential
    combats, but never share one between concurrently running combats.
    """

    def __init__(self, definition: WeaponDefinition) -> None:
        self.definition = definition
        self.base_dice = Dice(definition.base_damage)
        self.status_effects: list[WeaponStatusEffect] = []
        for mechanic in definition.mechanics:
            factory = STATUS_EFFECT_FACTORIES.get(mechanic.type)
            if factory is None:
                logger.warning(
                    f"Weapon '{definition.name}': no status effect for mechanic "
                    f"type '{mechanic.type}', only its metrics tracker will run"
                )
                continue
            self.status_effects.append(factory(mechanic.parameters))

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def magic_bonus(self) -> int:
        return self.definition.magic_bonus

    @property
    def properties(self) -> tuple[str, ...]:
        return self.definition.properties

    @property
    def mechanic_types(self) -> list[str]:
        return [mechanic.type for mechanic in self.definition.mechanics]

    @property
    def display_name(self) -> str:
        return self.definition.display_name

    def roll_base_damage(
        self, is_critical: bool = False, rand: rng.RNG | None = None
    ) -> BaseDamageRoll:
        """Roll the weapon's damage dice, doubling the dice count on a critical."""
        rolls = critical_adjust(self.base_dice, is_critical).roll_each(rand)
        crit_extra = sum(rolls[self.base_dice.num_dice :]) if is_critical else 0
        return BaseDamageRoll(sum(rolls) + self.base_dice.modifier, crit_extra)

    def resolve_base_damage(
        self, is_critical: bool = False, rand: rng.RNG | None = None
    ) -> int:
        return self.roll_base_damage(is_critical, rand).total

    def switch_target(self) -> None:
        for effect in self.status_effects:
            effect.switch_target()

    def reset(self) -> None:
        for effect in self.status_effects:
            effect.reset()

    def get_status_effect(self, mechanic_type: str) -> WeaponStatusEffect | None:
        for effect in self.status_effects:
            if effect.mechanic_type == mechanic_type:
                return effect
        return None

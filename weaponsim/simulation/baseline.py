"""Standard mechanic-free weapons that test weapons are measured against.

A weapon is judged against the baselines a character of its level would
normally carry: a plain rapier at levels 1-4, then +1, +2 and +3 versions as
magic items become expected.
"""

from __future__ import annotations

from dataclasses import dataclass

from weaponsim.errors import ConfigurationError
from weaponsim.game.weapons import WeaponDefinition


@dataclass(frozen=True)
class BaselineWeapon:
    definition: WeaponDefinition
    min_level: int
    max_level: int

    def covers(self, level: int) -> bool:
        return self.min_level <= level <= self.max_level


def _baseline(
    name: str,
    magic_bonus: int,
    rarity: str,
    levels: tuple[int, int],
    base_damage: str = "1d8",
    damage_type: str = "piercing",
    properties: tuple[str, ...] = ("finesse",),
) -> BaselineWeapon:
    return BaselineWeapon(
        WeaponDefinition(
            name=name,
            base_damage=base_damage,
            damage_type=damage_type,
            properties=properties,
            magic_bonus=magic_bonus,
            rarity=rarity,
        ),
        *levels,
    )


BASELINE_WEAPONS: tuple[BaselineWeapon, ...] = (
    _baseline("Baseline Rapier", 0, "common", (1, 4)),
    _baseline("Baseline Rapier", 1, "uncommon", (5, 7)),
    _baseline("Baseline Rapier", 2, "rare", (8, 10)),
    _baseline("Baseline Rapier", 3, "very-rare", (11, 20)),
    _baseline(
        "Baseline Longsword", 1, "uncommon", (5, 7),
        damage_type="slashing", properties=("versatile",),
    ),
    _baseline(
        "Baseline Longsword", 2, "rare", (8, 10),
        damage_type="slashing", properties=("versatile",),
    ),
    _baseline(
        "Baseline Scimitar", 1, "uncommon", (5, 7),
        base_damage="1d6", damage_type="slashing", properties=("finesse", "light"),
    ),
    _baseline(
        "Baseline Scimitar", 2, "rare", (8, 10),
        base_damage="1d6", damage_type="slashing", properties=("finesse", "light"),
    ),
)  # fmt: skip


def baselines_for_level(level: int) -> list[WeaponDefinition]:
    """Return every baseline weapon appropriate for a character of ``level``."""
    if not 1 <= level <= 20:
        raise ConfigurationError(f"level must be within 1-20, got {level}")
    return [baseline.definition for baseline in BASELINE_WEAPONS if baseline.covers(level)]


def primary_baseline(level: int) -> WeaponDefinition:
    """The rapier baseline for ``level``, the default comparison target."""
    return baselines_for_level(level)[0]

from __future__ import annotations

from collections.abc import Sequence

from weaponsim.game.advantage import compute_strategy
from weaponsim.game.characters import Character, ClassFeature, DamageModifier
from weaponsim.game.combat import CombatResult, RoundResult
from weaponsim.game.resolution import AttackResult
from weaponsim.game.scenario import Scenario
from weaponsim.game.weapons import MechanicDefinition, Weapon, WeaponDefinition


class FixedRandom:
    """Random source that returns scripted values from ``randint``.

    Raises ``IndexError`` if code rolls more dice than the test scripted.
    """

    def __init__(self, values: Sequence[int]) -> None:
        self.values = list(values)
        self.index = 0
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        val = self.values[self.index]
        self.index += 1
        return val

    def random(self) -> float:
        return 0.0

    @property
    def exhausted(self) -> bool:
        return self.index == len(self.values)


def make_character(
    *,
    name: str = "Vex",
    character_class: str = "Fighter",
    level: int = 5,
    proficiency_bonus: int = 3,
    attack_bonus: int = 7,
    flat_damage_bonus: int = 4,
    crit_range: int = 20,
    class_features: list[ClassFeature] | None = None,
    damage_modifiers: list[DamageModifier] | None = None,
) -> Character:
    return Character(
        name=name,
        character_class=character_class,
        level=level,
        proficiency_bonus=proficiency_bonus,
        attack_bonus=attack_bonus,
        flat_damage_bonus=flat_damage_bonus,
        crit_range=crit_range,
        class_features=class_features or [],
        damage_modifiers=damage_modifiers or [],
    )


def make_weapon_definition(
    *,
    name: str = "Longsword",
    base_damage: str = "1d8",
    magic_bonus: int = 0,
    properties: tuple[str, ...] = (),
    bleed: bool = False,
) -> WeaponDefinition:
    mechanics = (MechanicDefinition("Sanguine Edge", "bleed"),) if bleed else ()
    return WeaponDefinition(
        name=name,
        base_damage=base_damage,
        properties=properties,
        magic_bonus=magic_bonus,
        rarity="rare" if magic_bonus else "common",
        mechanics=mechanics,
    )


def make_weapon(**kwargs) -> Weapon:
    return Weapon(make_weapon_definition(**kwargs))


def make_bleed_weapon(**kwargs) -> Weapon:
    kwargs.setdefault("name", "Sanguine Dagger")
    kwargs.setdefault("base_damage", "1d4")
    kwargs.setdefault("properties", ("finesse", "light"))
    return make_weapon(bleed=True, **kwargs)


def make_scenario(**kwargs) -> Scenario:
    kwargs.setdefault("round_count", 10)
    kwargs.setdefault("target_armor_class", 15)
    return Scenario(**kwargs)


def make_combat_result(
    total_damage: int,
    *,
    hemorrhage_attacks: Sequence[int] = (),
    hemorrhage_damage_each: int = 0,
    round_count: int = 4,
) -> CombatResult:
    """Build a one-attack-per-round combat result for analyzer tests.

    ``hemorrhage_attacks`` lists the 1-based attacks that procced.
    """
    scenario = make_scenario(round_count=round_count)
    rounds = []
    for round_number in range(1, round_count + 1):
        procced = round_number in hemorrhage_attacks
        attack = AttackResult(
            hit=True,
            critical=False,
            total_damage=total_damage if round_number == 1 else 0,
            hemorrhage_triggered=procced,
            hemorrhage_damage=hemorrhage_damage_each if procced else 0,
            round_number=round_number,
        )
        rounds.append(
            RoundResult(
                round_number=round_number,
                attacks=(attack,),
                total_damage=attack.total_damage,
                temp_hp_gained=0,
                hemorrhage_triggered=procced,
                target_switched=False,
            )
        )
    return CombatResult(
        character_name="Vex",
        weapon_name="Test Blade",
        scenario=scenario,
        rounds=tuple(rounds),
        total_damage=total_damage,
        average_damage_per_round=total_damage / round_count,
        hit_rate=1.0,
        critical_rate=0.0,
        hemorrhage_triggers=len(hemorrhage_attacks),
        hemorrhage_damage=hemorrhage_damage_each * len(hemorrhage_attacks),
        total_temp_hp=0,
        total_wasted_damage=0,
        miss_streaks=(),
        target_switches=0,
        advantage_strategy=compute_strategy(round_count, 0.0),
        metrics={},
    )

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from weaponsim.game.enums import EffectCategory

if TYPE_CHECKING:
    from weaponsim.game.characters import Character
    from weaponsim.game.scenario import Scenario
    from weaponsim.game.weapons import Weapon


@dataclass(frozen=True)
class AttackContext:
    """Everything needed to resolve one attack. Built fresh for each attack.

    ``has_advantage`` of ``None`` means "use the scenario's advantage
    schedule for this round"; ``True``/``False`` override it.
    """

    attacker: Character
    weapon: Weapon
    target_armor_class: int
    target_size: str
    round_number: int = 1
    attack_index: int = 1
    has_advantage: bool | None = None
    has_disadvantage: bool = False
    scenario: Scenario | None = None
    bleed_immune: bool = False


@dataclass(frozen=True)
class SpecialEffect:
    """One named entry in an attack's effect log.

    ``magnitude`` is damage for damage categories and counter points for
    ``EffectCategory.COUNTER``.
    """

    name: str
    magnitude: int
    category: EffectCategory
    triggered: bool = True


@dataclass
class AttackResult:
    """Outcome of a single attack.

    Damage totals and ``special_effects`` only ever grow after the base
    damage roll; post-processing appends, it never rewrites.
    """

    hit: bool
    critical: bool
    base_damage: int = 0
    bonus_damage: int = 0
    total_damage: int = 0
    # Extra damage from the doubled weapon dice on a critical.
    crit_damage: int = 0
    special_effects: list[SpecialEffect] = field(default_factory=list)
    hemorrhage_triggered: bool = False
    hemorrhage_damage: int = 0
    wasted_damage: int = 0
    temp_hp_gained: int = 0
    target_switched: bool = False
    has_advantage: bool = False
    round_number: int = 1
    attack_index: int = 1
    d20_rolls: list[int] = field(default_factory=list)
    d20_result: int = 0
    attack_total: int = 0

    def add_effect(self, effect: SpecialEffect) -> None:
        self.special_effects.append(effect)

    def add_bonus_damage(self, effect: SpecialEffect) -> None:
        """Append a damage effect and add its magnitude to the totals."""
        self.special_effects.append(effect)
        self.bonus_damage += effect.magnitude
        self.total_damage += effect.magnitude

    def effects_named(self, name: str) -> list[SpecialEffect]:
        return [effect for effect in self.special_effects if effect.name == name]

"""Runs whole combats: rounds of attacks against a stream of fresh targets.

The orchestrator owns everything that spans more than one attack:

- the advantage schedule, computed once per combat;
- target hit points, and the damage wasted by overkill on killing blows
  (every target after a kill has the default 100 HP);
- consecutive-miss streaks;
- target switching, which wipes the weapon's status effects;
- the per-combat metrics engine and its trackers.

Single attacks are delegated to :class:`~weaponsim.game.resolution.AttackResolver`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from weaponsim import config
from weaponsim.constants.combat import CombatConstants
from weaponsim.game.advantage import AdvantageStrategy, compute_strategy, has_advantage
from weaponsim.game.resolution import AttackContext, AttackResolver, AttackResult
from weaponsim.metrics import CombatContext, CombatMetricsEngine, MetricsRegistry
from weaponsim.metrics import metrics_registry as default_registry

if TYPE_CHECKING:
    from weaponsim.game.characters import Character
    from weaponsim.game.scenario import Scenario
    from weaponsim.game.weapons import Weapon
    from weaponsim.util.rng import RNG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundResult:
    round_number: int
    attacks: tuple[AttackResult, ...]
    total_damage: int
    temp_hp_gained: int
    hemorrhage_triggered: bool
    target_switched: bool


@dataclass(frozen=True)
class CombatResult:
    """Everything recorded about one combat. Never modified after it is returned."""

    character_name: str
    weapon_name: str
    scenario: Scenario
    rounds: tuple[RoundResult, ...]
    total_damage: int
    average_damage_per_round: float
    hit_rate: float
    critical_rate: float
    hemorrhage_triggers: int
    hemorrhage_damage: int
    total_temp_hp: int
    total_wasted_damage: int
    miss_streaks: tuple[int, ...]
    target_switches: int
    advantage_strategy: AdvantageStrategy
    metrics: dict[str, Any]

    def iter_attacks(self) -> Iterator[AttackResult]:
        """Yield every attack in order, across all rounds."""
        for round_result in self.rounds:
            yield from round_result.attacks

    @property
    def first_hemorrhage_attack(self) -> int | None:
        """1-based ordinal of the first attack that procced hemorrhage."""
        for ordinal, attack in enumerate(self.iter_attacks(), start=1):
            if attack.hemorrhage_triggered:
                return ordinal
        return None


class CombatSimulator:
    """Simulates combats one at a time.

    A simulator keeps per-combat bookkeeping between attacks, so one instance
    must not run two combats at once. The weapon passed in is mutated (its
    status effects build up) and is reset at the start of each combat.
    """

    def __init__(
        self,
        rand: RNG | None = None,
        registry: MetricsRegistry | None = None,
    ) -> None:
        self.resolver = AttackResolver(rand)
        self.registry = registry if registry is not None else default_registry
        self._remaining_hp = 0
        self._consecutive_misses = 0
        self._miss_streaks: list[int] = []

    @property
    def remaining_hp(self) -> int:
        """Hit points left on the current target."""
        return self._remaining_hp

    def simulate_combat(
        self,
        character: Character,
        weapon: Weapon,
        scenario: Scenario,
        combat_id: str = "",
    ) -> CombatResult:
        strategy = compute_strategy(scenario.round_count, scenario.advantage_rate)

        weapon.reset()
        self._remaining_hp = scenario.target_hp
        self._consecutive_misses = 0
        self._miss_streaks = []

        engine = CombatMetricsEngine(
            self.registry.create_trackers(character.character_class, weapon.mechanic_types)
        )
        engine.start(
            combat_id,
            CombatContext(
                weapon=weapon.name,
                advantage=scenario.advantage_rate > 0,
                enemy_ac=scenario.target_armor_class,
                enemy_size=scenario.target_size,
                character_class=character.character_class,
                weapon_mechanics=tuple(weapon.mechanic_types),
            ),
        )

        rounds: list[RoundResult] = []
        total_wasted = 0
        target_switches = 0
        for round_number in range(1, scenario.round_count + 1):
            round_result = self.simulate_round(
                character, weapon, scenario, round_number, strategy
            )
            rounds.append(round_result)
            for attack in round_result.attacks:
                engine.record_attack(attack)
                total_wasted += attack.wasted_damage
            if round_result.target_switched:
                target_switches += 1

        attacks = [attack for r in rounds for attack in r.attacks]
        hits = sum(1 for a in attacks if a.hit)
        crits = sum(1 for a in attacks if a.critical)
        total_damage = sum(r.total_damage for r in rounds)

        return CombatResult(
            character_name=character.name,
            weapon_name=weapon.display_name,
            scenario=scenario,
            rounds=tuple(rounds),
            total_damage=total_damage,
            average_damage_per_round=total_damage / scenario.round_count,
            hit_rate=hits / len(attacks),
            critical_rate=crits / len(attacks),
            hemorrhage_triggers=sum(1 for a in attacks if a.hemorrhage_triggered),
            hemorrhage_damage=sum(a.hemorrhage_damage for a in attacks),
            total_temp_hp=sum(r.temp_hp_gained for r in rounds),
            total_wasted_damage=total_wasted,
            miss_streaks=tuple(self._miss_streaks),
            target_switches=target_switches,
            advantage_strategy=strategy,
            metrics=engine.finalize(),
        )

    def simulate_round(
        self,
        character: Character,
        weapon: Weapon,
        scenario: Scenario,
        round_number: int,
        strategy: AdvantageStrategy | None = None,
    ) -> RoundResult:
        if strategy is None:
            strategy = compute_strategy(scenario.round_count, scenario.advantage_rate)
        advantage = has_advantage(round_number, strategy)

        attacks: list[AttackResult] = []
        switched = False
        for attack_index in range(1, scenario.attacks_per_round + 1):
            target_switched = self._maybe_switch_target(
                weapon, scenario, round_number, attack_index
            )
            switched = switched or target_switched

            result = self.resolver.resolve_attack(
                AttackContext(
                    attacker=character,
                    weapon=weapon,
                    target_armor_class=scenario.target_armor_class,
                    target_size=scenario.target_size,
                    round_number=round_number,
                    attack_index=attack_index,
                    has_advantage=advantage,
                    scenario=scenario,
                    bleed_immune=scenario.bleed_immune,
                )
            )
            result.target_switched = target_switched
            self._track_miss_streak(result)
            self._apply_killing_blow(result)
            attacks.append(result)

        return RoundResult(
            round_number=round_number,
            attacks=tuple(attacks),
            total_damage=sum(a.total_damage for a in attacks),
            temp_hp_gained=sum(a.temp_hp_gained for a in attacks),
            hemorrhage_triggered=any(a.hemorrhage_triggered for a in attacks),
            target_switched=switched,
        )

    def _maybe_switch_target(
        self, weapon: Weapon, scenario: Scenario, round_number: int, attack_index: int
    ) -> bool:
        if not scenario.target_switching or attack_index != 1:
            return False
        if round_number % CombatConstants.TARGET_SWITCH_INTERVAL != 0:
            return False
        weapon.switch_target()
        self._remaining_hp = scenario.target_hp
        logger.debug(f"Round {round_number}: switched to a new target")
        return True

    def _track_miss_streak(self, result: AttackResult) -> None:
        if result.hit:
            if self._consecutive_misses > 0:
                self._miss_streaks.append(self._consecutive_misses)
                self._consecutive_misses = 0
        else:
            self._consecutive_misses += 1

    def _apply_killing_blow(self, result: AttackResult) -> None:
        # An exact kill leaves the target standing at 0 HP until the next hit.
        if result.total_damage > self._remaining_hp:
            result.wasted_damage = result.total_damage - self._remaining_hp
            self._remaining_hp = config.DEFAULT_TARGET_HP
        else:
            self._remaining_hp -= result.total_damage

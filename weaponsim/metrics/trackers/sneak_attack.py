from __future__ import annotations

from typing import TYPE_CHECKING

from weaponsim.constants.combat import EffectNames
from weaponsim.metrics.engine import CombatContext, MetricsTracker
from weaponsim.metrics.registry import metrics_registry
from weaponsim.types import TrackerMetrics

if TYPE_CHECKING:
    from weaponsim.game.resolution.outcomes import AttackResult


class SneakAttackMetrics(MetricsTracker):
    """Sneak Attack damage and how often it landed, for Rogues."""

    category = "classSpecific"
    name = "rogue"

    def __init__(self) -> None:
        self.sneak_attack_damage = 0
        self.sneak_attacks = 0

    def on_start(self, context: CombatContext) -> None:
        self.sneak_attack_damage = 0
        self.sneak_attacks = 0

    def on_attack(self, result: AttackResult) -> None:
        for effect in result.effects_named(EffectNames.SNEAK_ATTACK):
            self.sneak_attack_damage += effect.magnitude
            self.sneak_attacks += 1

    def on_end(self) -> TrackerMetrics:
        return {
            "sneak_attack_damage": self.sneak_attack_damage,
            "sneak_attacks": self.sneak_attacks,
        }


metrics_registry.register_class_tracker("Rogue", SneakAttackMetrics)

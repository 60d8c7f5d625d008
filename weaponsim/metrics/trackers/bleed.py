from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from weaponsim.constants.combat import EffectNames
from weaponsim.game.status_effects import bleed_threshold
from weaponsim.metrics.engine import CombatContext, MetricsTracker
from weaponsim.metrics.registry import metrics_registry
from weaponsim.types import TrackerMetrics

if TYPE_CHECKING:
    from weaponsim.game.resolution.outcomes import AttackResult

logger = logging.getLogger(__name__)


class HemorrhageMetrics(MetricsTracker):
    """Bleed buildup and hemorrhage procs for weapons with the bleed mechanic.

    ``bleed_overflow`` is how far past the threshold the counter was on each
    proc, summed over the combat. It follows the counter the same way the
    weapon does, so a target switch drops whatever had built up.
    """

    category = "reportSpecific"
    name = "bleed"

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.bleed_damage = 0
        self.bleed_counter_added = 0
        self.bleed_from_crits = 0
        self.bleed_from_non_crits = 0
        self.bleed_threshold = 0
        self.hemorrhages_triggered = 0
        self.bleed_overflow = 0
        self.first_hemorrhage_round: int | None = None
        self._running_counter = 0

    def on_start(self, context: CombatContext) -> None:
        self._reset()
        self.bleed_threshold = bleed_threshold(context.enemy_size)

    def on_attack(self, result: AttackResult) -> None:
        if result.target_switched:
            self._running_counter = 0

        for effect in result.special_effects:
            if effect.name == EffectNames.BLEED_COUNTER:
                self.bleed_counter_added += effect.magnitude
                self._running_counter += effect.magnitude
                if result.critical:
                    self.bleed_from_crits += effect.magnitude
                else:
                    self.bleed_from_non_crits += effect.magnitude
            elif effect.name == EffectNames.HEMORRHAGE:
                self.bleed_damage += effect.magnitude
                self.hemorrhages_triggered += 1
                self.bleed_overflow += max(0, self._running_counter - self.bleed_threshold)
                self._running_counter = 0
                if self.first_hemorrhage_round is None:
                    self.first_hemorrhage_round = result.round_number

    def on_end(self) -> TrackerMetrics:
        metrics: TrackerMetrics = {
            "bleed_damage": self.bleed_damage,
            "bleed_counter_added": self.bleed_counter_added,
            "bleed_from_crits": self.bleed_from_crits,
            "bleed_from_non_crits": self.bleed_from_non_crits,
            "bleed_threshold": self.bleed_threshold,
            "hemorrhages_triggered": self.hemorrhages_triggered,
            "bleed_overflow": self.bleed_overflow,
        }
        if self.first_hemorrhage_round is not None:
            metrics["rounds_to_first_hemorrhage"] = self.first_hemorrhage_round
        return metrics


metrics_registry.register_mechanic_tracker("bleed", HemorrhageMetrics)

"""Per-combat metrics collection.

The engine keeps a fixed set of universal counters and forwards every attack
to a list of pluggable trackers. It never knows which trackers exist; the
combat simulator picks them from :mod:`weaponsim.metrics.registry`.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from weaponsim.errors import MetricsLifecycleError
from weaponsim.types import TrackerCategory, TrackerMetrics

if TYPE_CHECKING:
    from weaponsim.game.resolution.outcomes import AttackResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CombatContext:
    """What trackers are told about a combat when it starts."""

    weapon: str
    advantage: bool
    enemy_ac: int
    enemy_size: str
    character_class: str | None = None
    weapon_mechanics: tuple[str, ...] = field(default_factory=tuple)


class MetricsTracker(abc.ABC):
    """A plugin that derives extra metrics from attack results.

    Subclasses set ``category`` and ``name``; their metrics are nested under
    ``metrics[category][name]``. Trackers read ``special_effects`` by name, so
    they depend only on the result format and not on the code that produced it.
    """

    category: ClassVar[TrackerCategory]
    name: ClassVar[str]

    @abc.abstractmethod
    def on_start(self, context: CombatContext) -> None:
        """Called when combat starts. Reset all per-combat state here."""

    @abc.abstractmethod
    def on_attack(self, result: AttackResult) -> None:
        """Called once for every attack, hit or miss."""

    @abc.abstractmethod
    def on_end(self) -> TrackerMetrics:
        """Called when combat ends; return this tracker's metrics."""


class CombatMetricsEngine:
    """Collects universal metrics plus tracker metrics for one combat at a time."""

    def __init__(self, trackers: list[MetricsTracker] | None = None) -> None:
        self.trackers: list[MetricsTracker] = list(trackers or [])
        self.combat_id = ""
        self.context: CombatContext | None = None
        self._reset_counters()

    def start(self, combat_id: str, context: CombatContext) -> None:
        self.combat_id = combat_id
        self.context = context
        self._reset_counters()
        for tracker in self.trackers:
            tracker.on_start(context)
        logger.debug(
            f"Combat {combat_id} started with trackers "
            f"{[f'{t.category}/{t.name}' for t in self.trackers]}"
        )

    def record_attack(self, result: AttackResult) -> None:
        if self.context is None:
            raise MetricsLifecycleError("Combat not started - call start() first")

        self.attacks_made += 1
        self.rounds_simulated = max(self.rounds_simulated, result.round_number)

        if result.hit:
            self.hits += 1
            self.total_damage += result.total_damage
            self.weapon_damage += result.base_damage
            if result.critical:
                self.crit_hits += 1
                self.crit_bonus_damage += result.crit_damage
                if self.first_crit_round is None:
                    self.first_crit_round = result.round_number
            else:
                self.non_crit_hits += 1
        else:
            self.misses += 1

        for tracker in self.trackers:
            tracker.on_attack(result)

    def finalize(self) -> dict[str, Any]:
        """Return ``{"universal": {...}}`` plus one mapping per tracker category."""
        if self.context is None:
            raise MetricsLifecycleError("Combat not started - call start() first")

        universal: TrackerMetrics = {
            "combat_id": self.combat_id,
            "weapon": self.context.weapon,
            "advantage": self.context.advantage,
            "enemy_ac": self.context.enemy_ac,
            "enemy_size": self.context.enemy_size,
            "rounds_simulated": self.rounds_simulated,
            "attacks_made": self.attacks_made,
            "hits": self.hits,
            "misses": self.misses,
            "crit_hits": self.crit_hits,
            "non_crit_hits": self.non_crit_hits,
            "total_damage": self.total_damage,
            "weapon_damage": self.weapon_damage,
            "crit_bonus_damage": self.crit_bonus_damage,
        }
        if self.first_crit_round is not None:
            universal["rounds_to_first_crit"] = self.first_crit_round

        metrics: dict[str, Any] = {"universal": universal}
        for tracker in self.trackers:
            metrics.setdefault(tracker.category, {})[tracker.name] = tracker.on_end()

        logger.debug(f"Combat {self.combat_id} finalized: {universal}")
        return metrics

    def _reset_counters(self) -> None:
        self.rounds_simulated = 0
        self.attacks_made = 0
        self.hits = 0
        self.misses = 0
        self.crit_hits = 0
        self.non_crit_hits = 0
        self.total_damage = 0
        self.weapon_damage = 0
        self.crit_bonus_damage = 0
        self.first_crit_round: int | None = None

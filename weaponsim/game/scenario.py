from __future__ import annotations

from dataclasses import dataclass

from weaponsim import config
from weaponsim.errors import ConfigurationError


@dataclass(frozen=True)
class Scenario:
    """The fixed conditions every combat in a batch is fought under.

    Attributes
    ----------
    round_count:
        Rounds per combat.
    target_armor_class:
        Armor class the to-hit total must meet.
    target_size:
        Size class of the target, optionally followed by creature-type words
        (``"medium construct"``). The size selects the bleed threshold and the
        creature type may grant bleed immunity.
    advantage_rate:
        Fraction of rounds, in ``[0, 1]``, that get advantage. Turned into an
        exact round schedule by :func:`weaponsim.game.advantage.compute_strategy`.
    attacks_per_round:
        Attacks made each round.
    target_hp:
        Hit points of the first target and of each target engaged by switching.
        A killed target is replaced by one with ``config.DEFAULT_TARGET_HP``.
    bleed_immune:
        Target ignores bleed buildup regardless of its creature type.
    target_switching:
        Engage a new target every few rounds, resetting weapon status effects.
    """

    round_count: int
    target_armor_class: int
    target_size: str = "medium"
    advantage_rate: float = 0.0
    attacks_per_round: int = 1
    target_hp: int = config.DEFAULT_TARGET_HP
    bleed_immune: bool = False
    target_switching: bool = False

    def __post_init__(self) -> None:
        if self.round_count < 1:
            raise ConfigurationError("round_count must be >= 1")
        if self.attacks_per_round < 1:
            raise ConfigurationError("attacks_per_round must be >= 1")
        if not 0.0 <= self.advantage_rate <= 1.0:
            raise ConfigurationError(
                f"advantage_rate must be within [0, 1], got {self.advantage_rate}"
            )
        if self.target_hp < 1:
            raise ConfigurationError("target_hp must be >= 1")
        if not self.target_size.strip():
            raise ConfigurationError("target_size must not be empty")

    def matches(self, other: Scenario) -> bool:
        """Return ``True`` if two scenarios are comparable for weapon-vs-weapon runs."""
        return (
            self.round_count == other.round_count
            and self.target_armor_class == other.target_armor_class
            and self.target_size == other.target_size
            and self.advantage_rate == other.advantage_rate
            and self.attacks_per_round == other.attacks_per_round
        )

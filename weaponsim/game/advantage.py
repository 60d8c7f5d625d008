"""Deterministic placement of advantage across combat rounds.

A scenario asks for advantage on some fraction of rounds. Rather than rolling
for it each attack, the fraction is converted once per combat into the exact
set of rounds that get advantage:

* The count is rounded up, so the requested rate is a floor guarantee.
* Rounds are spread evenly instead of clustered.
* The schedule depends only on (rounds, rate), never on the random stream.

Two weapons compared under the same scenario therefore see advantage on the
same rounds, which removes one source of noise from the comparison.

Examples:
    10 rounds at 0.25 -> rounds 3, 6, 9
    8 rounds at 0.25  -> rounds 4, 8
    4 rounds at 0.5   -> rounds 2, 4
"""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass


@dataclass(frozen=True)
class AdvantageStrategy:
    """Which rounds of a combat have advantage (1-indexed, ascending)."""

    total_rounds: int
    rate: float
    advantage_rounds: tuple[int, ...]
    advantage_count: int

    def __contains__(self, round_number: int) -> bool:
        return round_number in self._round_set

    @functools.cached_property
    def _round_set(self) -> frozenset[int]:
        return frozenset(self.advantage_rounds)


@functools.lru_cache(maxsize=256)
def compute_strategy(total_rounds: int, rate: float) -> AdvantageStrategy:
    """Return the advantage schedule for ``total_rounds`` at ``rate``."""
    if rate <= 0 or total_rounds <= 0:
        return AdvantageStrategy(total_rounds, rate, (), 0)

    if rate >= 1.0:
        return AdvantageStrategy(
            total_rounds, rate, tuple(range(1, total_rounds + 1)), total_rounds
        )

    advantage_count = math.ceil(total_rounds * rate)
    rounds = _distribute_rounds(total_rounds, advantage_count)
    return AdvantageStrategy(total_rounds, rate, rounds, advantage_count)


def _distribute_rounds(total_rounds: int, advantage_count: int) -> tuple[int, ...]:
    if advantage_count >= total_rounds:
        return tuple(range(1, total_rounds + 1))

    # Chosen over floor(interval * (i + 1)), which puts 10 rounds @ 3 on 3, 6, 10.
    # This form gives 3, 6, 9 and never exceeds total_rounds, at the cost of
    # bunching some early slots: 7 rounds @ 4 -> 1, 2, 4, 6 rather than 1, 3, 5, 7.
    interval = total_rounds / advantage_count
    first = math.floor(interval)
    return tuple(first + math.floor(interval * i) for i in range(advantage_count))


def has_advantage(round_number: int, strategy: AdvantageStrategy) -> bool:
    """Return ``True`` if ``round_number`` is scheduled for advantage."""
    return round_number in strategy


def describe_strategy(strategy: AdvantageStrategy) -> str:
    if strategy.advantage_count == 0:
        return "No advantage"
    if strategy.advantage_count == strategy.total_rounds:
        return "Advantage on all rounds"
    rounds_list = ", ".join(str(r) for r in strategy.advantage_rounds)
    return (
        f"Advantage on {strategy.advantage_count}/{strategy.total_rounds} rounds "
        f"(rounds: {rounds_list})"
    )

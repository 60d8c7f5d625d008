"""The d20 attack roll."""

from __future__ import annotations

from dataclasses import dataclass, field

from weaponsim.constants.combat import CombatConstants
from weaponsim.util import rng

_rng = rng.get("combat.d20")


@dataclass
class ToHitRoll:
    hit: bool
    critical: bool
    # Every d20 thrown; two with advantage or disadvantage.
    rolls: list[int] = field(default_factory=list)
    # The d20 that counted.
    natural: int = 0
    total: int = 0
    armor_class: int = 0
    has_advantage: bool = False
    has_disadvantage: bool = False


def roll_to_hit(
    to_hit_bonus: int,
    armor_class: int,
    *,
    has_advantage: bool = False,
    has_disadvantage: bool = False,
    crit_range: int = CombatConstants.NATURAL_CRIT,
    rand: rng.RNG | None = None,
) -> ToHitRoll:
    """Roll a d20 attack against ``armor_class``.

    Hits when the total meets or beats the armor class. A natural roll at or
    above ``crit_range`` is a critical, and a critical always hits. There is
    no automatic miss on a natural 1.
    """
    if has_advantage and has_disadvantage:
        has_advantage = has_disadvantage = False

    source = rand if rand is not None else _rng
    throws = 2 if has_advantage or has_disadvantage else 1
    rolls = [source.randint(1, CombatConstants.D20_SIDES) for _ in range(throws)]
    natural = min(rolls) if has_disadvantage else max(rolls)

    total = natural + to_hit_bonus
    critical = natural >= min(crit_range, CombatConstants.NATURAL_CRIT)
    return ToHitRoll(
        hit=critical or total >= armor_class,
        critical=critical,
        rolls=rolls,
        natural=natural,
        total=total,
        armor_class=armor_class,
        has_advantage=has_advantage,
        has_disadvantage=has_disadvantage,
    )

"""
Parses dice expressions and rolls them.

This module is the single place dice notation is understood:
1.  The `Dice` class parses strings such as "1d8", "d20", "2d6+3" or "5" into
    a die count, a die size and a flat modifier, and rolls them.
2.  `critical_adjust()` is the one critical-hit policy: a critical doubles the
    number of dice and never the flat modifier. Weapon damage, class feature
    dice and bleed counter dice all go through it.
3.  `roll_d()` rolls a single die.

Every roll takes an optional random source. Without one, the shared
"combat.dice" stream from `weaponsim.util.rng` is used.
"""

from __future__ import annotations

import re

from weaponsim.constants.combat import CombatConstants
from weaponsim.errors import DiceExpressionError
from weaponsim.util import rng

_rng = rng.get("combat.dice")

_DICE_PATTERN = re.compile(r"^(\d*)d(\d+)([+-]\d+)?$")
_FIXED_PATTERN = re.compile(r"^[+-]?\d+$")


class Dice:
    """A parsed dice term: ``num_dice`` dice of ``sides`` sides plus ``modifier``.

    Fixed values such as "5" parse to zero dice with the value as modifier.
    Only the die sizes in ``CombatConstants.VALID_DIE_SIDES`` are accepted.
    """

    def __init__(self, expression: str) -> None:
        """Raises DiceExpressionError for anything but NdM[+-K] or a plain integer."""
        self.dice_str = expression
        self.num_dice, self.sides, self.modifier = _parse(expression)

    @classmethod
    def from_parts(cls, num_dice: int, sides: int, modifier: int = 0) -> Dice:
        """Build dice from components, e.g. ``Dice.from_parts(2, 6, 1)`` is 2d6+1."""
        if num_dice <= 0:
            return cls(str(modifier))
        expr = f"{num_dice}d{sides}"
        if modifier > 0:
            expr += f"+{modifier}"
        elif modifier < 0:
            expr += f"{modifier}"
        return cls(expr)

    @property
    def is_fixed(self) -> bool:
        return self.num_dice == 0

    def roll_each(self, rand: rng.RNG | None = None) -> list[int]:
        """Roll every die and return the individual results (modifier excluded)."""
        source = rand if rand is not None else _rng
        return [source.randint(1, self.sides) for _ in range(self.num_dice)]

    def roll(self, rand: rng.RNG | None = None) -> int:
        """Roll the dice and return the total, modifier included."""
        return sum(self.roll_each(rand)) + self.modifier

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dice):
            return NotImplemented
        return (self.num_dice, self.sides, self.modifier) == (
            other.num_dice,
            other.sides,
            other.modifier,
        )

    def __hash__(self) -> int:
        return hash((self.num_dice, self.sides, self.modifier))

    def __repr__(self) -> str:
        return f"Dice({self.dice_str!r})"

    def __str__(self) -> str:
        return self.dice_str


def _parse(expression: str) -> tuple[int, int, int]:
    """Split an expression into (dice, sides, modifier); fixed values have no dice."""
    if not isinstance(expression, str):
        raise DiceExpressionError(f"Dice expression must be a string: {expression!r}")

    clean = expression.replace(" ", "").lower()
    if _FIXED_PATTERN.match(clean):
        return 0, 0, int(clean)

    match = _DICE_PATTERN.match(clean)
    if match is None:
        raise DiceExpressionError(f"Not a dice expression: {expression!r}")

    count, sides, modifier = match.groups()
    num_dice = int(count) if count else 1
    if num_dice < 1:
        raise DiceExpressionError(f"Need at least one die in {expression!r}")
    if int(sides) not in CombatConstants.VALID_DIE_SIDES:
        allowed = ", ".join(f"d{s}" for s in CombatConstants.VALID_DIE_SIDES)
        raise DiceExpressionError(f"No d{sides} in {expression!r}; allowed: {allowed}")
    return num_dice, int(sides), int(modifier or 0)


def critical_adjust(dice: Dice, is_critical: bool) -> Dice:
    """Apply the critical-hit rule to a dice term.

    On a critical the number of dice doubles. The flat modifier is untouched,
    and fixed values have no dice to double.
    """
    if not is_critical or dice.is_fixed:
        return dice
    return Dice.from_parts(dice.num_dice * 2, dice.sides, dice.modifier)


def roll_d(sides: int, rand: rng.RNG | None = None) -> int:
    """Roll one die. Any positive size is allowed here, unlike in `Dice`."""
    if not isinstance(sides, int) or sides < 1:
        raise ValueError(f"Die must have at least one side, got {sides!r}")

    source = rand if rand is not None else _rng
    return source.randint(1, sides)

"""Turning one attack into a structured outcome."""

from .attack_resolver import AttackResolver
from .d20_system import ToHitRoll, roll_to_hit
from .outcomes import AttackContext, AttackResult, SpecialEffect

__all__ = [
    "AttackContext",
    "AttackResolver",
    "AttackResult",
    "SpecialEffect",
    "ToHitRoll",
    "roll_to_hit",
]

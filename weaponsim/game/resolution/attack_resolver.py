"""Resolves a single attack from to-hit roll through every damage rider.

Order of operations on each attack:

1. Decide advantage. An explicit flag on the context wins; otherwise the
   scenario's advantage schedule for the current round is used.
2. Roll to hit (d20 + character bonus + weapon magic bonus).
3. On a hit, roll weapon damage (dice doubled on a critical) and add the
   flat character and magic bonuses.
4. Let each of the weapon's status effects react, e.g. bleed buildup.
5. Add character damage modifiers and triggered class features.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from weaponsim.game.advantage import compute_strategy, has_advantage
from weaponsim.game.enums import EffectCategory, FeatureEffectType, Trigger
from weaponsim.util import rng
from weaponsim.util.dice import critical_adjust

from .d20_system import roll_to_hit
from .outcomes import AttackContext, AttackResult, SpecialEffect

if TYPE_CHECKING:
    from weaponsim.game.characters import ClassFeature, DamageModifier

logger = logging.getLogger(__name__)


class AttackResolver:
    """Resolves attacks against a single random source.

    Args:
        rand: Random source for every roll this resolver makes. Defaults to
            the shared dice streams in :mod:`weaponsim.util.rng`.
    """

    def __init__(self, rand: rng.RNG | None = None) -> None:
        self.rand = rand

    def resolve_attack(self, context: AttackContext) -> AttackResult:
        character = context.attacker
        weapon = context.weapon

        to_hit = roll_to_hit(
            character.to_hit_bonus + weapon.magic_bonus,
            context.target_armor_class,
            has_advantage=self._effective_advantage(context),
            has_disadvantage=context.has_disadvantage,
            crit_range=character.effective_crit_range,
            rand=self.rand,
        )

        result = AttackResult(
            hit=to_hit.hit,
            critical=to_hit.critical,
            has_advantage=to_hit.has_advantage,
            round_number=context.round_number,
            attack_index=context.attack_index,
            d20_rolls=to_hit.rolls,
            d20_result=to_hit.natural,
            attack_total=to_hit.total,
        )
        if not result.hit:
            return result

        base = weapon.roll_base_damage(result.critical, self.rand)
        result.base_damage = base.total
        result.crit_damage = base.crit_extra
        result.bonus_damage = character.total_flat_damage_bonus + weapon.magic_bonus
        result.total_damage = result.base_damage + result.bonus_damage

        for effect in weapon.status_effects:
            effect.apply_to_attack(context, result, self.rand)

        self._apply_character_modifiers(context, result)
        return result

    def _effective_advantage(self, context: AttackContext) -> bool:
        if context.has_advantage is not None:
            return context.has_advantage
        if context.scenario is None:
            return False
        # compute_strategy is memoized on (rounds, rate).
        strategy = compute_strategy(
            context.scenario.round_count, context.scenario.advantage_rate
        )
        return has_advantage(context.round_number, strategy)

    def _apply_character_modifiers(
        self, context: AttackContext, result: AttackResult
    ) -> None:
        character = context.attacker
        fired = [Trigger.HIT]
        if result.critical:
            fired.append(Trigger.CRIT)
        if result.hemorrhage_triggered:
            fired.append(Trigger.HEMORRHAGE)

        for trigger in fired:
            for modifier in character.get_damage_modifiers(trigger):
                result.add_bonus_damage(
                    SpecialEffect(
                        _modifier_effect_name(modifier, trigger),
                        self._modifier_damage(modifier),
                        EffectCategory.HIT_MODIFIER,
                    )
                )

        for trigger in fired:
            for feature in character.get_triggered_features(trigger):
                if feature.is_eligible(result.has_advantage, context.weapon.properties):
                    self._apply_feature(feature, result)

    def _modifier_damage(self, modifier: DamageModifier) -> int:
        if modifier.dice is None:
            return modifier.damage_bonus
        return modifier.dice.roll(self.rand) + modifier.damage_bonus

    def _feature_amount(self, feature: ClassFeature, is_critical: bool) -> int:
        if feature.dice is None:
            return feature.value
        return critical_adjust(feature.dice, is_critical).roll(self.rand) + feature.value

    def _apply_feature(self, feature: ClassFeature, result: AttackResult) -> None:
        amount = self._feature_amount(feature, result.critical)
        effect = SpecialEffect(feature.name, amount, EffectCategory.CLASS_FEATURE)
        if feature.effect_type is FeatureEffectType.DAMAGE:
            result.add_bonus_damage(effect)
        elif feature.effect_type is FeatureEffectType.TEMP_HP:
            result.temp_hp_gained += amount
            result.add_effect(effect)
        else:
            logger.debug(
                f"Feature '{feature.name}' has effect type {feature.effect_type!r} "
                "that does not apply after a hit, ignoring it"
            )


def _modifier_effect_name(modifier: DamageModifier, trigger: Trigger) -> str:
    if trigger is Trigger.CRIT:
        return f"{modifier.name} (Critical)"
    if trigger is Trigger.HEMORRHAGE:
        return f"{modifier.name} (Hemorrhage)"
    return modifier.name

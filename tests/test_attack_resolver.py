from tests.helpers import (
    FixedRandom,
    make_bleed_weapon,
    make_character,
    make_scenario,
    make_weapon,
)
from weaponsim.constants.combat import EffectNames
from weaponsim.game.characters import (
    ClassFeature,
    DamageModifier,
    sneak_attack_feature,
)
from weaponsim.game.enums import EffectCategory, FeatureEffectType, Trigger
from weaponsim.game.resolution import AttackContext, AttackResolver


def _resolve(rolls, *, character=None, weapon=None, armor_class=15, **context_kwargs):
    fr = FixedRandom(rolls)
    context = AttackContext(
        attacker=character or make_character(),
        weapon=weapon or make_weapon(),
        target_armor_class=armor_class,
        target_size=context_kwargs.pop("target_size", "medium"),
        **context_kwargs,
    )
    result = AttackResolver(fr).resolve_attack(context)
    assert fr.exhausted, "resolver rolled fewer dice than scripted"
    return result


def test_miss_deals_no_damage() -> None:
    result = _resolve([2])
    assert not result.hit
    assert result.total_damage == 0
    assert result.special_effects == []


def test_hit_adds_flat_bonus() -> None:
    result = _resolve([10, 5])
    assert result.hit and not result.critical
    assert result.attack_total == 17
    assert result.base_damage == 5
    assert result.bonus_damage == 4
    assert result.total_damage == 9


def test_critical_doubles_weapon_dice_only() -> None:
    result = _resolve([20, 3, 6])
    assert result.critical
    assert result.base_damage == 9
    assert result.crit_damage == 6
    assert result.total_damage == 13


def test_magic_bonus_applies_to_hit_and_damage() -> None:
    result = _resolve([7, 2], weapon=make_weapon(magic_bonus=1))
    assert result.hit
    assert result.attack_total == 15
    assert result.total_damage == 7


def test_explicit_advantage_rolls_two_d20() -> None:
    result = _resolve([4, 15, 5], has_advantage=True)
    assert result.has_advantage
    assert result.d20_rolls == [4, 15]
    assert result.d20_result == 15
    assert result.total_damage == 9


def test_scheduled_advantage_used_when_not_explicit() -> None:
    scenario = make_scenario(round_count=4, advantage_rate=0.5)
    scheduled = _resolve([3, 12, 5], round_number=2, scenario=scenario)
    assert scheduled.has_advantage
    assert scheduled.d20_rolls == [3, 12]

    unscheduled = _resolve([12, 5], round_number=3, scenario=scenario)
    assert not unscheduled.has_advantage


def test_explicit_flag_overrides_schedule() -> None:
    scenario = make_scenario(round_count=4, advantage_rate=1.0)
    result = _resolve([12, 5], round_number=1, scenario=scenario, has_advantage=False)
    assert not result.has_advantage


def test_bleed_weapon_adds_counter_effect() -> None:
    weapon = make_bleed_weapon()
    result = _resolve([10, 3, 2], weapon=weapon)
    assert [(e.name, e.magnitude) for e in result.special_effects] == [
        (EffectNames.BLEED_COUNTER, 2)
    ]
    assert result.total_damage == 7
    assert weapon.get_status_effect("bleed").counter == 2


def test_sneak_attack_with_advantage_and_finesse() -> None:
    rogue = make_character(character_class="Rogue", class_features=[sneak_attack_feature(5)])
    rapier = make_weapon(name="Rapier", properties=("finesse",))
    result = _resolve(
        [15, 15, 4, 1, 2, 3], character=rogue, weapon=rapier, has_advantage=True
    )
    sneak = result.effects_named(EffectNames.SNEAK_ATTACK)
    assert [e.magnitude for e in sneak] == [6]
    assert sneak[0].category is EffectCategory.CLASS_FEATURE
    assert result.total_damage == 14


def test_sneak_attack_needs_advantage() -> None:
    rogue = make_character(character_class="Rogue", class_features=[sneak_attack_feature(5)])
    rapier = make_weapon(name="Rapier", properties=("finesse",))
    result = _resolve([15, 4], character=rogue, weapon=rapier)
    assert result.effects_named(EffectNames.SNEAK_ATTACK) == []
    assert result.total_damage == 8


def test_sneak_attack_needs_finesse_or_ranged_weapon() -> None:
    rogue = make_character(character_class="Rogue", class_features=[sneak_attack_feature(5)])
    club = make_weapon(name="Greatclub", properties=("two-handed",))
    result = _resolve([15, 15, 4], character=rogue, weapon=club, has_advantage=True)
    assert result.effects_named(EffectNames.SNEAK_ATTACK) == []


def test_sneak_attack_dice_double_on_critical() -> None:
    rogue = make_character(character_class="Rogue", class_features=[sneak_attack_feature(5)])
    rapier = make_weapon(name="Rapier", properties=("finesse",))
    result = _resolve(
        [20, 1, 4, 4] + [1] * 6, character=rogue, weapon=rapier, has_advantage=True
    )
    assert result.base_damage == 8
    assert result.crit_damage == 4
    assert result.effects_named(EffectNames.SNEAK_ATTACK)[0].magnitude == 6
    assert result.total_damage == 18


def test_crit_modifier_dice_are_not_doubled() -> None:
    flame = DamageModifier("Flame Tongue", Trigger.CRIT, dice_expression="2d6")
    character = make_character(damage_modifiers=[flame])
    result = _resolve([20, 3, 3, 2, 2], character=character)
    assert [(e.name, e.magnitude) for e in result.special_effects] == [
        ("Flame Tongue (Critical)", 4)
    ]
    assert result.special_effects[0].category is EffectCategory.HIT_MODIFIER
    assert result.total_damage == 14


def test_crit_modifier_skipped_on_normal_hit() -> None:
    flame = DamageModifier("Flame Tongue", Trigger.CRIT, dice_expression="2d6")
    character = make_character(damage_modifiers=[flame])
    result = _resolve([12, 3], character=character)
    assert result.special_effects == []


def test_hit_and_always_modifiers() -> None:
    character = make_character(
        damage_modifiers=[
            DamageModifier("Hex", Trigger.HIT, dice_expression="1d6"),
            DamageModifier("Dueling", Trigger.ALWAYS, damage_bonus=2),
        ]
    )
    result = _resolve([12, 3, 5], character=character)
    assert result.bonus_damage == 4 + 2 + 5
    assert result.total_damage == 14
    assert [e.name for e in result.special_effects] == ["Hex"]


def test_hemorrhage_modifier_fires_after_proc() -> None:
    character = make_character(
        damage_modifiers=[DamageModifier("Blood Price", Trigger.HEMORRHAGE, damage_bonus=3)]
    )
    weapon = make_bleed_weapon()
    weapon.get_status_effect("bleed").state.counter = 11
    result = _resolve([10, 2, 1] + [1] * 6, character=character, weapon=weapon)
    assert result.hemorrhage_triggered
    assert [e.name for e in result.special_effects] == [
        EffectNames.BLEED_COUNTER,
        EffectNames.HEMORRHAGE,
        "Blood Price (Hemorrhage)",
    ]
    assert result.total_damage == 2 + 4 + 6 + 3


def test_temp_hp_feature_does_not_add_damage() -> None:
    blessing = ClassFeature(
        "Dark One's Blessing", Trigger.HIT, FeatureEffectType.TEMP_HP, value=5
    )
    result = _resolve([12, 3], character=make_character(class_features=[blessing]))
    assert result.temp_hp_gained == 5
    assert result.total_damage == 7


def test_hit_bonus_feature_applies_at_roll_time() -> None:
    fighting_style = ClassFeature(
        "Archery", Trigger.ALWAYS, FeatureEffectType.HIT_BONUS, value=2
    )
    plain = _resolve([6])
    assert not plain.hit
    boosted = _resolve([6, 1], character=make_character(class_features=[fighting_style]))
    assert boosted.hit
    assert boosted.attack_total == 15


def test_crit_range_feature() -> None:
    improved = ClassFeature(
        "Improved Critical", Trigger.ALWAYS, FeatureEffectType.CRIT_RANGE, value=19
    )
    result = _resolve([19, 1, 1], character=make_character(class_features=[improved]))
    assert result.critical
    assert result.crit_damage == 1


def test_feature_triggers_accept_strings() -> None:
    feature = ClassFeature("Divine Smite", "crit", "damage", dice_expression="2d8")
    assert feature.trigger is Trigger.CRIT
    assert feature.effect_type is FeatureEffectType.DAMAGE

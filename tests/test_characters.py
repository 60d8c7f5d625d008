import pytest

from weaponsim.errors import ConfigurationError, DiceExpressionError
from weaponsim.game.characters import (
    ClassFeature,
    DamageModifier,
    Eligibility,
    proficiency_bonus_for_level,
    sneak_attack_dice,
    sneak_attack_feature,
)
from weaponsim.game.enums import FeatureEffectType, Trigger


@pytest.mark.parametrize(
    ("level", "expected"),
    [(1, 2), (4, 2), (5, 3), (8, 3), (9, 4), (13, 5), (17, 6), (20, 6)],
)
def test_proficiency_bonus_by_level(level: int, expected: int) -> None:
    assert proficiency_bonus_for_level(level) == expected


@pytest.mark.parametrize(("level", "dice"), [(1, "1d6"), (2, "1d6"), (3, "2d6"), (20, "10d6")])
def test_sneak_attack_dice_scale_every_odd_level(level: int, dice: str) -> None:
    assert sneak_attack_dice(level) == dice


@pytest.mark.parametrize("level", [0, 21])
def test_level_helpers_reject_out_of_range(level: int) -> None:
    with pytest.raises(ConfigurationError):
        proficiency_bonus_for_level(level)
    with pytest.raises(ConfigurationError):
        sneak_attack_dice(level)


def test_sneak_attack_needs_advantage_and_a_qualifying_weapon() -> None:
    feature = sneak_attack_feature(5)
    assert feature.trigger is Trigger.HIT
    assert feature.is_eligible(True, ["finesse"])
    assert feature.is_eligible(True, ["light", "thrown"])
    assert not feature.is_eligible(False, ["finesse"])
    assert not feature.is_eligible(True, ["heavy"])


def test_feature_without_eligibility_always_applies() -> None:
    feature = ClassFeature("Rage", Trigger.HIT, value=2)
    assert feature.is_eligible(False, [])
    assert feature.dice is None


def test_eligibility_with_no_conditions_is_met() -> None:
    assert Eligibility().is_met(False, [])


def test_string_trigger_and_effect_type_are_coerced() -> None:
    feature = ClassFeature("Inspiring Strike", "crit", effect_type="temp_hp", value=5)
    assert feature.trigger is Trigger.CRIT
    assert feature.effect_type is FeatureEffectType.TEMP_HP

    modifier = DamageModifier("Flame Tongue", "hit", dice_expression="2d6")
    assert modifier.trigger is Trigger.HIT


def test_unknown_trigger_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        ClassFeature("Mystery", "on_sneeze")


def test_unknown_effect_type_is_kept_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    feature = ClassFeature("Odd", Trigger.HIT, effect_type="teleport")
    assert feature.effect_type == "teleport"
    assert "unknown effect type" in caplog.text


def test_bad_feature_dice_fail_at_construction() -> None:
    with pytest.raises(DiceExpressionError):
        ClassFeature("Broken", Trigger.HIT, dice_expression="3d7")

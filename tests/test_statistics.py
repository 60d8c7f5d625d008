import pytest

from tests.helpers import make_combat_result
from weaponsim.errors import EmptyInputError
from weaponsim.game.enums import ConsistencyRating
from weaponsim.simulation.statistics import StatisticalAnalyzer, classify_consistency


def _analyze(damages):
    return StatisticalAnalyzer().analyze([make_combat_result(d) for d in damages])


def test_empty_input_raises() -> None:
    with pytest.raises(EmptyInputError):
        StatisticalAnalyzer().analyze([])


@pytest.mark.parametrize("n", [1, 2, 7, 100])
def test_constant_damage(n) -> None:
    analysis = _analyze([17] * n)
    stats = analysis.damage_stats
    assert analysis.sample_size == n
    assert stats.mean == 17
    assert stats.median == 17
    assert stats.standard_deviation == 0
    assert stats.range == 0
    assert analysis.consistency.coefficient_of_variation == 0
    assert analysis.consistency.rating is ConsistencyRating.VERY_CONSISTENT
    assert analysis.consistency.stability_index == 1


def test_median_odd_and_even() -> None:
    assert _analyze([5, 1, 3, 2, 4]).damage_stats.median == 3
    assert _analyze([4, 1, 3, 2]).damage_stats.median == pytest.approx(2.5)


def test_percentiles_interpolate_between_order_statistics() -> None:
    stats = _analyze([1, 2, 3, 4, 5]).damage_stats
    assert stats.percentiles[25] == pytest.approx(2.0)
    assert stats.percentiles[90] == pytest.approx(4.6)
    assert stats.percentiles[99] == pytest.approx(4.96)
    assert stats.interquartile_range == pytest.approx(2.0)


def test_population_variance() -> None:
    stats = _analyze([2, 4, 4, 4, 5, 5, 7, 9]).damage_stats
    assert stats.mean == pytest.approx(5)
    assert stats.variance == pytest.approx(4)
    assert stats.standard_deviation == pytest.approx(2)
    assert stats.coefficient_of_variation == pytest.approx(0.4)
    assert (stats.min, stats.max, stats.range) == (2, 9, 7)


def test_zero_mean_has_zero_cv() -> None:
    analysis = _analyze([0, 0, 0])
    assert analysis.damage_stats.coefficient_of_variation == 0
    assert analysis.consistency.rating is ConsistencyRating.VERY_CONSISTENT


@pytest.mark.parametrize(
    ("cv", "rating"),
    [
        (0.0, ConsistencyRating.VERY_CONSISTENT),
        (0.0999, ConsistencyRating.VERY_CONSISTENT),
        (0.1, ConsistencyRating.CONSISTENT),
        (0.2, ConsistencyRating.MODERATE),
        (0.4, ConsistencyRating.INCONSISTENT),
        (0.6, ConsistencyRating.VERY_INCONSISTENT),
        (3.0, ConsistencyRating.VERY_INCONSISTENT),
    ],
)
def test_classify_consistency(cv, rating) -> None:
    assert classify_consistency(cv) is rating


def test_more_variance_never_improves_consistency() -> None:
    order = list(ConsistencyRating)
    spreads = [0, 1, 2, 3, 5, 7, 9, 12, 15, 20]
    ranks = [
        order.index(_analyze([20 - s, 20 + s]).consistency.rating) for s in spreads
    ]
    assert ranks == sorted(ranks)


def test_outliers_and_stability() -> None:
    consistency = _analyze([10] * 19 + [100]).consistency
    assert consistency.outlier_count == 1
    assert consistency.outlier_percentage == pytest.approx(5.0)
    cv = consistency.coefficient_of_variation
    assert consistency.relative_standard_deviation == pytest.approx(cv * 100)
    assert consistency.stability_index == pytest.approx(1 / (1 + cv))


def test_no_triggers_means_no_hemorrhage_stats() -> None:
    assert _analyze([10, 12, 14]).hemorrhage_stats is None


def test_hemorrhage_statistics() -> None:
    results = [
        make_combat_result(30, hemorrhage_attacks=(2, 4), hemorrhage_damage_each=10),
        make_combat_result(20, hemorrhage_attacks=(3,), hemorrhage_damage_each=10),
        make_combat_result(10),
    ]
    stats = StatisticalAnalyzer().analyze(results).hemorrhage_stats
    assert stats is not None
    assert stats.trigger_frequency == pytest.approx(1.0)
    assert stats.trigger_rate == pytest.approx(2 / 3)
    assert stats.average_turns_to_trigger == pytest.approx(2.5)
    assert stats.average_damage_per_trigger == pytest.approx(10)
    assert stats.total_hemorrhage_damage == 30
    assert stats.max_triggers_in_single_combat == 2
    assert stats.trigger_distribution == {0: 1, 1: 1, 2: 1}


def test_analysis_is_repeatable() -> None:
    results = [make_combat_result(d) for d in (3, 9, 4, 12, 7)]
    analyzer = StatisticalAnalyzer()
    assert analyzer.analyze(results) == analyzer.analyze(results)

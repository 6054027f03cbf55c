import pytest

from seasonal_wind.core.exceptions import AppValidationError
from seasonal_wind.models import Observation, Season, StrategyName
from seasonal_wind.services.aggregation import (
    GustDirectionStrategy,
    SeasonalAggregator,
    SeasonalMaxStrategy,
    SeasonalMeanStrategy,
    TopPercentileGustStrategy,
    build_strategy,
    direction_matches,
    top_percentile_mean,
)
from seasonal_wind.services.aggregation.seasonal_mean import MeanAccumulator


def _obs(year, month, wspd=None, gst=None, wdir=None):
    return Observation(year=year, month=month, wind_speed_mps=wspd, gust_speed_mps=gst, direction_deg=wdir)


def _season(stats_list, season):
    return next(stats for stats in stats_list if stats.season == season)


def _fold(aggregator, year, observations):
    aggregator.absorb(year, aggregator.fold_year(observations))


def test_seasonal_mean_rollup_is_volume_weighted():
    aggregator = SeasonalAggregator(SeasonalMeanStrategy())
    _fold(
        aggregator,
        2020,
        [_obs(2020, 1, 10, 15), _obs(2020, 1, 20, 25), _obs(2020, 2, 30, 35)],
    )
    _fold(aggregator, 2021, [_obs(2021, 12, 5, 5)])

    winter = _season(aggregator.rollup(), Season.WINTER)
    assert winter.values["wind_mean"] == pytest.approx(16.25)
    assert winter.values["gust_mean"] == pytest.approx((15 + 25 + 35 + 5) / 4)
    assert winter.sample_count == 4

    year_means = [
        _season(summary.seasons, Season.WINTER).values["wind_mean"] for summary in aggregator.year_summaries()
    ]
    assert year_means == [pytest.approx(20.0), pytest.approx(5.0)]
    # Averaging the yearly means would give 12.5; the rollup must not.
    assert sum(year_means) / len(year_means) == pytest.approx(12.5)
    assert winter.values["wind_mean"] != pytest.approx(12.5)


def test_seasonal_mean_reports_none_for_empty_season():
    aggregator = SeasonalAggregator(SeasonalMeanStrategy())
    _fold(aggregator, 2020, [_obs(2020, 7, 4, 6)])

    summary = aggregator.year_summaries()[0]
    assert _season(summary.seasons, Season.WINTER).values == {"wind_mean": None, "gust_mean": None}
    assert _season(summary.seasons, Season.SUMMER).values["wind_mean"] == pytest.approx(4.0)


def test_seasonal_max_rollup_averages_yearly_maxima_and_ignores_empty_years():
    aggregator = SeasonalAggregator(SeasonalMaxStrategy())
    _fold(aggregator, 2019, [_obs(2019, 6, 8, 10), _obs(2019, 7, 12, 20)])
    _fold(aggregator, 2020, [_obs(2020, 1, 3, 4)])
    _fold(aggregator, 2021, [_obs(2021, 8, 6, 14)])

    summer = _season(aggregator.rollup(), Season.SUMMER)
    assert summer.values["wind_max"] == pytest.approx((12 + 6) / 2)
    assert summer.values["gust_max"] == pytest.approx((20 + 14) / 2)

    summer_2020 = _season(aggregator.year_summaries()[1].seasons, Season.SUMMER)
    assert summer_2020.values == {"wind_max": None, "gust_max": None}
    assert summer_2020.sample_count == 0


def test_seasonal_max_accepts_zero_as_a_real_maximum():
    aggregator = SeasonalAggregator(SeasonalMaxStrategy())
    _fold(aggregator, 2020, [_obs(2020, 3, 0.0, 0.0)])
    spring = _season(aggregator.rollup(), Season.SPRING)
    assert spring.values == {"wind_max": 0.0, "gust_max": 0.0}


def test_gust_direction_mixes_year_weighted_gust_and_volume_weighted_direction():
    aggregator = SeasonalAggregator(GustDirectionStrategy())
    _fold(aggregator, 2015, [_obs(2015, 9, gst=10, wdir=100), _obs(2015, 10, gst=20, wdir=200)])
    _fold(aggregator, 2016, [_obs(2016, 11, gst=30, wdir=300)])

    fall = _season(aggregator.rollup(), Season.FALL)
    assert fall.values["gust_max"] == pytest.approx((20 + 30) / 2)
    assert fall.values["direction_mean"] == pytest.approx((100 + 200 + 300) / 3)

    fall_2015 = _season(aggregator.year_summaries()[0].seasons, Season.FALL)
    assert fall_2015.values == {"gust_max": 20.0, "direction_mean": pytest.approx(150.0)}


def test_absorbing_partials_in_any_order_gives_same_rollup():
    observations = [_obs(2020, 1, 5, 8), _obs(2020, 1, 7, 9), _obs(2020, 2, 1, 2)]
    forward = SeasonalAggregator(SeasonalMeanStrategy())
    for obs in observations:
        _fold(forward, 2020, [obs])

    backward = SeasonalAggregator(SeasonalMeanStrategy())
    for obs in reversed(observations):
        _fold(backward, 2020, [obs])

    assert forward.rollup() == backward.rollup()


def test_mean_accumulator_merge_keeps_counts_in_lockstep():
    left = MeanAccumulator()
    left.add(_obs(2020, 1, 2, 3))
    right = MeanAccumulator()
    right.add(_obs(2020, 1, 4, 5))
    left.merge(right)
    assert (left.samples, left.wind_count, left.gust_count) == (2, 2, 2)
    assert (left.wind_sum, left.gust_sum) == (6.0, 8.0)


def test_fold_year_does_not_touch_owned_buckets_until_absorbed():
    aggregator = SeasonalAggregator(SeasonalMeanStrategy())
    partial = aggregator.fold_year([_obs(2020, 1, 5, 6)])
    assert aggregator.years == []
    assert not aggregator.has_data()
    aggregator.absorb(2020, partial)
    assert aggregator.years == [2020]
    assert aggregator.has_data()


def test_year_with_no_valid_rows_still_gets_a_row():
    aggregator = SeasonalAggregator(SeasonalMeanStrategy())
    aggregator.absorb(2020, aggregator.fold_year([]))
    summaries = aggregator.year_summaries()
    assert [summary.year for summary in summaries] == [2020]
    assert all(stats.values["wind_mean"] is None for stats in summaries[0].seasons)
    assert not aggregator.has_data()


@pytest.mark.parametrize(
    ("direction", "expected"),
    [(150.0, True), (90.0, True), (120.0, True), (151.0, False), (89.9, False)],
)
def test_direction_window_is_inclusive(direction, expected):
    assert direction_matches(direction, 120.0, 30.0) is expected


def test_direction_window_does_not_wrap_around_north():
    assert direction_matches(359.0, 5.0, 10.0) is False
    assert direction_matches(0.0, 5.0, 10.0) is True


def test_top_percentile_mean_uses_highest_values():
    values = [float(value) for value in range(1, 101)]
    result = top_percentile_mean(values, 5.0)
    assert result.cutoff == 5
    assert result.used_count == 5
    assert result.mean == pytest.approx((100 + 99 + 98 + 97 + 96) / 5)
    assert result.fallback_to_all is False


def test_top_percentile_mean_falls_back_to_all_values_when_cutoff_below_one(caplog):
    values = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0]
    result = top_percentile_mean(values, 10.0)
    assert result.cutoff == 0
    assert result.used_count == 7
    assert result.fallback_to_all is True
    assert result.mean == pytest.approx(4.0)
    assert "averaging the whole set" in caplog.text


def test_top_percentile_mean_of_empty_set_is_none():
    result = top_percentile_mean([], 1.0)
    assert result.mean is None
    assert result.qualifying_count == 0


def test_top_percentile_strategy_filters_by_direction_across_years():
    strategy = TopPercentileGustStrategy(direction_target_deg=120, direction_tolerance_deg=30, percentile=50)
    aggregator = SeasonalAggregator(strategy)
    _fold(aggregator, 2020, [_obs(2020, 1, gst=10, wdir=150), _obs(2020, 6, gst=40, wdir=151)])
    _fold(aggregator, 2021, [_obs(2021, 7, gst=20, wdir=90), _obs(2021, 8, gst=30, wdir=100)])

    assert aggregator.year_summaries() == []
    assert aggregator.rollup() == []
    summary = aggregator.top_percentile_summary()
    assert summary is not None
    assert summary.qualifying_count == 3
    assert summary.cutoff == 1
    assert summary.mean_gust_mps == pytest.approx(30.0)


def test_top_percentile_summary_is_none_for_seasonal_strategies():
    assert SeasonalAggregator(SeasonalMeanStrategy()).top_percentile_summary() is None


def test_build_strategy_resolves_names():
    assert isinstance(build_strategy("mean"), SeasonalMeanStrategy)
    assert isinstance(build_strategy(StrategyName.MAX), SeasonalMaxStrategy)
    assert isinstance(build_strategy("gust-direction"), GustDirectionStrategy)
    strategy = build_strategy("top-percentile", direction_target=200, direction_tolerance=20, percentile=2)
    assert isinstance(strategy, TopPercentileGustStrategy)
    assert strategy.parameters() == {"direction": 200, "tolerance": 20, "percentile": 2}


def test_build_strategy_rejects_unknown_name():
    with pytest.raises(AppValidationError, match="Unknown strategy"):
        build_strategy("median")


def test_top_percentile_strategy_requires_direction_and_valid_parameters():
    with pytest.raises(AppValidationError, match="requires a direction"):
        build_strategy("top-percentile")
    with pytest.raises(AppValidationError, match="Percentile"):
        build_strategy("top-percentile", direction_target=100, percentile=0)
    with pytest.raises(AppValidationError, match="tolerance"):
        build_strategy("top-percentile", direction_target=100, direction_tolerance=-1)
    with pytest.raises(AppValidationError, match="between 0 and 360"):
        build_strategy("top-percentile", direction_target=400)

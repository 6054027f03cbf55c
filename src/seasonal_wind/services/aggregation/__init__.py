from __future__ import annotations

from seasonal_wind.core.exceptions import AppValidationError
from seasonal_wind.models import StrategyName
from seasonal_wind.services.aggregation.aggregator import SeasonalAggregator
from seasonal_wind.services.aggregation.base import AggregationStrategy
from seasonal_wind.services.aggregation.gust_direction import GustDirectionStrategy
from seasonal_wind.services.aggregation.seasonal_max import SeasonalMaxStrategy
from seasonal_wind.services.aggregation.seasonal_mean import SeasonalMeanStrategy
from seasonal_wind.services.aggregation.top_percentile import (
    TopPercentileGustStrategy,
    direction_matches,
    top_percentile_mean,
)

STRATEGY_CLASSES: dict[StrategyName, type[AggregationStrategy]] = {
    StrategyName.MEAN: SeasonalMeanStrategy,
    StrategyName.MAX: SeasonalMaxStrategy,
    StrategyName.GUST_DIRECTION: GustDirectionStrategy,
    StrategyName.TOP_PERCENTILE: TopPercentileGustStrategy,
}


def build_strategy(
    name: StrategyName | str,
    direction_target: float | None = None,
    direction_tolerance: float = 15.0,
    percentile: float = 1.0,
) -> AggregationStrategy:
    try:
        strategy_name = StrategyName(name)
    except ValueError as exc:
        choices = ", ".join(item.value for item in StrategyName)
        raise AppValidationError(f"Unknown strategy '{name}'. Choose one of: {choices}.") from exc

    if strategy_name == StrategyName.TOP_PERCENTILE:
        if direction_target is None:
            raise AppValidationError("The top-percentile strategy requires a direction target in degrees.")
        return TopPercentileGustStrategy(
            direction_target_deg=direction_target,
            direction_tolerance_deg=direction_tolerance,
            percentile=percentile,
        )
    return STRATEGY_CLASSES[strategy_name]()


__all__ = [
    "AggregationStrategy",
    "GustDirectionStrategy",
    "STRATEGY_CLASSES",
    "SeasonalAggregator",
    "SeasonalMaxStrategy",
    "SeasonalMeanStrategy",
    "TopPercentileGustStrategy",
    "build_strategy",
    "direction_matches",
    "top_percentile_mean",
]

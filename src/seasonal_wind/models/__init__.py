from seasonal_wind.models.observation import Observation, ObservationField, Season
from seasonal_wind.models.report import (
    MetricColumn,
    SeasonalReport,
    SeasonStats,
    SkippedYear,
    StrategyInfo,
    StrategyName,
    TopPercentileSummary,
    YearSummary,
)

__all__ = [
    "MetricColumn",
    "Observation",
    "ObservationField",
    "Season",
    "SeasonalReport",
    "SeasonStats",
    "SkippedYear",
    "StrategyInfo",
    "StrategyName",
    "TopPercentileSummary",
    "YearSummary",
]

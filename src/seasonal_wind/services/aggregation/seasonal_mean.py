from __future__ import annotations

from dataclasses import dataclass

from seasonal_wind.models import MetricColumn, Observation, ObservationField, StrategyName
from seasonal_wind.services.aggregation.base import AggregationStrategy, ratio


@dataclass
class MeanAccumulator:
    samples: int = 0
    wind_sum: float = 0.0
    wind_count: int = 0
    gust_sum: float = 0.0
    gust_count: int = 0

    def add(self, observation: Observation) -> None:
        self.samples += 1
        if observation.wind_speed_mps is not None:
            self.wind_sum += observation.wind_speed_mps
            self.wind_count += 1
        if observation.gust_speed_mps is not None:
            self.gust_sum += observation.gust_speed_mps
            self.gust_count += 1

    def merge(self, other: "MeanAccumulator") -> None:
        self.samples += other.samples
        self.wind_sum += other.wind_sum
        self.wind_count += other.wind_count
        self.gust_sum += other.gust_sum
        self.gust_count += other.gust_count


class SeasonalMeanStrategy(AggregationStrategy[MeanAccumulator]):
    """Seasonal mean of WSPD and GST.

    The multi-year value re-aggregates raw sums and counts, so years with more valid
    samples weigh more than sparse years. It is not the mean of the yearly means.
    """

    name = StrategyName.MEAN
    description = "Mean wind speed and gust per season; multi-year value weighted by observation volume."
    required_fields = (ObservationField.WIND_SPEED, ObservationField.GUST_SPEED)
    columns = (
        MetricColumn(key="wind_mean", label="WSPD(avg)", decimals=2),
        MetricColumn(key="gust_mean", label="GST(avg)", decimals=2),
    )

    def new_accumulator(self) -> MeanAccumulator:
        return MeanAccumulator()

    def finalize_year(self, accumulator: MeanAccumulator) -> dict[str, float | None]:
        return {
            "wind_mean": ratio(accumulator.wind_sum, accumulator.wind_count),
            "gust_mean": ratio(accumulator.gust_sum, accumulator.gust_count),
        }

    def rollup(self, accumulators: list[MeanAccumulator]) -> dict[str, float | None]:
        total = MeanAccumulator()
        for accumulator in accumulators:
            total.merge(accumulator)
        return self.finalize_year(total)

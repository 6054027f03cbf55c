from __future__ import annotations

from dataclasses import dataclass

from seasonal_wind.models import MetricColumn, Observation, ObservationField, StrategyName
from seasonal_wind.services.aggregation.base import AggregationStrategy, mean_of_present, running_max


@dataclass
class MaxAccumulator:
    samples: int = 0
    wind_max: float | None = None
    gust_max: float | None = None

    def add(self, observation: Observation) -> None:
        self.samples += 1
        self.wind_max = running_max(self.wind_max, observation.wind_speed_mps)
        self.gust_max = running_max(self.gust_max, observation.gust_speed_mps)

    def merge(self, other: "MaxAccumulator") -> None:
        self.samples += other.samples
        self.wind_max = running_max(self.wind_max, other.wind_max)
        self.gust_max = running_max(self.gust_max, other.gust_max)


class SeasonalMaxStrategy(AggregationStrategy[MaxAccumulator]):
    name = StrategyName.MAX
    description = "Maximum wind speed and gust per season; multi-year value is the mean of the yearly maxima."
    required_fields = (ObservationField.WIND_SPEED, ObservationField.GUST_SPEED)
    columns = (
        MetricColumn(key="wind_max", label="WSPD(max)", decimals=2),
        MetricColumn(key="gust_max", label="GST(max)", decimals=2),
    )

    def new_accumulator(self) -> MaxAccumulator:
        return MaxAccumulator()

    def finalize_year(self, accumulator: MaxAccumulator) -> dict[str, float | None]:
        return {"wind_max": accumulator.wind_max, "gust_max": accumulator.gust_max}

    def rollup(self, accumulators: list[MaxAccumulator]) -> dict[str, float | None]:
        # Years without a valid sample carry None and never enter the mean.
        return {
            "wind_max": mean_of_present([accumulator.wind_max for accumulator in accumulators]),
            "gust_max": mean_of_present([accumulator.gust_max for accumulator in accumulators]),
        }

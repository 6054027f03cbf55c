from __future__ import annotations

from dataclasses import dataclass

from seasonal_wind.models import MetricColumn, Observation, ObservationField, StrategyName
from seasonal_wind.services.aggregation.base import AggregationStrategy, mean_of_present, ratio, running_max


@dataclass
class GustDirectionAccumulator:
    samples: int = 0
    gust_max: float | None = None
    direction_sum: float = 0.0
    direction_count: int = 0

    def add(self, observation: Observation) -> None:
        self.samples += 1
        self.gust_max = running_max(self.gust_max, observation.gust_speed_mps)
        if observation.direction_deg is not None:
            self.direction_sum += observation.direction_deg
            self.direction_count += 1

    def merge(self, other: "GustDirectionAccumulator") -> None:
        self.samples += other.samples
        self.gust_max = running_max(self.gust_max, other.gust_max)
        self.direction_sum += other.direction_sum
        self.direction_count += other.direction_count


class GustDirectionStrategy(AggregationStrategy[GustDirectionAccumulator]):
    """Seasonal maximum gust together with the arithmetic mean direction of every reading.

    Across years the gust column averages the yearly maxima, while the direction column
    divides the summed directions of all years by their total count.
    """

    name = StrategyName.GUST_DIRECTION
    description = "Maximum gust and mean direction per season; gust averaged over yearly maxima."
    required_fields = (ObservationField.DIRECTION, ObservationField.GUST_SPEED)
    columns = (
        MetricColumn(key="gust_max", label="MAX GST", decimals=2),
        MetricColumn(key="direction_mean", label="DIR(avg)", decimals=1),
    )

    def new_accumulator(self) -> GustDirectionAccumulator:
        return GustDirectionAccumulator()

    def finalize_year(self, accumulator: GustDirectionAccumulator) -> dict[str, float | None]:
        return {
            "gust_max": accumulator.gust_max,
            "direction_mean": ratio(accumulator.direction_sum, accumulator.direction_count),
        }

    def rollup(self, accumulators: list[GustDirectionAccumulator]) -> dict[str, float | None]:
        direction_sum = sum(accumulator.direction_sum for accumulator in accumulators)
        direction_count = sum(accumulator.direction_count for accumulator in accumulators)
        return {
            "gust_max": mean_of_present([accumulator.gust_max for accumulator in accumulators]),
            "direction_mean": ratio(direction_sum, direction_count),
        }

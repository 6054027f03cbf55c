from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from seasonal_wind.models import MetricColumn, Observation, ObservationField, Season, StrategyName
from seasonal_wind.services.seasons import season_of

AccumulatorT = TypeVar("AccumulatorT")


def ratio(total: float, count: int) -> float | None:
    return total / count if count > 0 else None


def mean_of_present(values: list[float | None]) -> float | None:
    real = [value for value in values if value is not None]
    return sum(real) / len(real) if real else None


def running_max(current: float | None, candidate: float | None) -> float | None:
    if candidate is None:
        return current
    if current is None or candidate > current:
        return candidate
    return current


class AggregationStrategy(ABC, Generic[AccumulatorT]):
    """Folds observations into per-bucket accumulators and rolls them up across years.

    Accumulators expose ``samples`` and support ``add(observation)`` and ``merge(other)``; merging is
    commutative and associative so a year can be folded in isolation and combined later.
    """

    name: ClassVar[StrategyName]
    description: ClassVar[str]
    required_fields: ClassVar[tuple[ObservationField, ...]]
    columns: ClassVar[tuple[MetricColumn, ...]]
    per_year_breakdown: ClassVar[bool] = True

    def accepts(self, observation: Observation) -> bool:
        return True

    def bucket_for(self, observation: Observation) -> Season | None:
        return season_of(observation.month)

    @abstractmethod
    def new_accumulator(self) -> AccumulatorT:
        raise NotImplementedError

    def update(self, accumulator: AccumulatorT, observation: Observation) -> None:
        accumulator.add(observation)  # type: ignore[attr-defined]

    @abstractmethod
    def finalize_year(self, accumulator: AccumulatorT) -> dict[str, float | None]:
        """Derived per-year values for one season bucket."""

    @abstractmethod
    def rollup(self, accumulators: list[AccumulatorT]) -> dict[str, float | None]:
        """Multi-year values for one season from that season's per-year accumulators."""

    def parameters(self) -> dict[str, Any]:
        return {}

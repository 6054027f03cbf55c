from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from seasonal_wind.core.exceptions import AppValidationError
from seasonal_wind.models import (
    MetricColumn,
    Observation,
    ObservationField,
    Season,
    StrategyName,
    TopPercentileSummary,
)
from seasonal_wind.services.aggregation.base import AggregationStrategy

logger = logging.getLogger(__name__)


def direction_matches(direction_deg: float, target_deg: float, tolerance_deg: float) -> bool:
    """Inclusive window check; the 0/360 boundary is not wrapped."""
    return target_deg - tolerance_deg <= direction_deg <= target_deg + tolerance_deg


@dataclass(frozen=True)
class TopPercentileResult:
    qualifying_count: int
    cutoff: int
    used_count: int
    fallback_to_all: bool
    mean: float | None


def top_percentile_mean(values: list[float], percentile: float) -> TopPercentileResult:
    """Mean of the strongest ``percentile`` percent of values.

    ``cutoff = floor(len(values) * percentile / 100)``; a cutoff below one falls back to
    averaging the whole set.
    """
    if not values:
        return TopPercentileResult(qualifying_count=0, cutoff=0, used_count=0, fallback_to_all=False, mean=None)

    ordered = sorted(values, reverse=True)
    cutoff = math.floor(len(ordered) * percentile / 100.0)
    fallback = cutoff < 1
    if fallback:
        logger.warning(
            "Top %.2f%% of %d gusts is less than one value; averaging the whole set instead",
            percentile,
            len(ordered),
        )
        selected = ordered
    else:
        selected = ordered[:cutoff]
    return TopPercentileResult(
        qualifying_count=len(ordered),
        cutoff=cutoff,
        used_count=len(selected),
        fallback_to_all=fallback,
        mean=sum(selected) / len(selected),
    )


@dataclass
class GustSampleAccumulator:
    samples: int = 0
    gusts: list[float] = field(default_factory=list)

    def add(self, observation: Observation) -> None:
        if observation.gust_speed_mps is None:
            return
        self.samples += 1
        self.gusts.append(observation.gust_speed_mps)

    def merge(self, other: "GustSampleAccumulator") -> None:
        self.samples += other.samples
        self.gusts.extend(other.gusts)


class TopPercentileGustStrategy(AggregationStrategy[GustSampleAccumulator]):
    """Mean of the strongest gusts blowing from a direction window, across the whole year range.

    Gusts are kept in one set per year (not per season) and only ranked once, at rollup.
    """

    name = StrategyName.TOP_PERCENTILE
    description = "Mean of the top-percentile gusts whose direction lies within target +/- tolerance."
    required_fields = (ObservationField.DIRECTION, ObservationField.GUST_SPEED)
    columns = (MetricColumn(key="top_mean_gust", label="GST(top pct avg)", decimals=2),)
    per_year_breakdown = False

    def __init__(self, direction_target_deg: float, direction_tolerance_deg: float, percentile: float) -> None:
        if not 0.0 <= direction_target_deg <= 360.0:
            raise AppValidationError("Direction target must be between 0 and 360 degrees.")
        if direction_tolerance_deg < 0:
            raise AppValidationError("Direction tolerance must be zero or positive.")
        if not 0.0 < percentile <= 100.0:
            raise AppValidationError("Percentile must be greater than 0 and at most 100.")
        self.direction_target_deg = direction_target_deg
        self.direction_tolerance_deg = direction_tolerance_deg
        self.percentile = percentile

    def accepts(self, observation: Observation) -> bool:
        if observation.direction_deg is None:
            return False
        return direction_matches(observation.direction_deg, self.direction_target_deg, self.direction_tolerance_deg)

    def bucket_for(self, observation: Observation) -> Season | None:
        return None

    def new_accumulator(self) -> GustSampleAccumulator:
        return GustSampleAccumulator()

    def finalize_year(self, accumulator: GustSampleAccumulator) -> dict[str, float | None]:
        return {"top_mean_gust": top_percentile_mean(accumulator.gusts, self.percentile).mean}

    def rollup(self, accumulators: list[GustSampleAccumulator]) -> dict[str, float | None]:
        return {"top_mean_gust": self.summarize(accumulators).mean_gust_mps}

    def summarize(self, accumulators: list[GustSampleAccumulator]) -> TopPercentileSummary:
        gusts: list[float] = []
        for accumulator in accumulators:
            gusts.extend(accumulator.gusts)
        result = top_percentile_mean(gusts, self.percentile)
        return TopPercentileSummary(
            directionTarget=self.direction_target_deg,
            directionTolerance=self.direction_tolerance_deg,
            percentile=self.percentile,
            qualifyingCount=result.qualifying_count,
            cutoff=result.cutoff,
            usedCount=result.used_count,
            fallbackToAll=result.fallback_to_all,
            meanGust=result.mean,
        )

    def parameters(self) -> dict[str, Any]:
        return {
            "direction": self.direction_target_deg,
            "tolerance": self.direction_tolerance_deg,
            "percentile": self.percentile,
        }

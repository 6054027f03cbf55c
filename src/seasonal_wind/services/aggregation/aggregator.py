from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from seasonal_wind.models import Observation, Season, SeasonStats, TopPercentileSummary, YearSummary
from seasonal_wind.services.aggregation.base import AggregationStrategy
from seasonal_wind.services.aggregation.top_percentile import TopPercentileGustStrategy

logger = logging.getLogger(__name__)

YearPartial = dict[Season | None, Any]


class SeasonalAggregator:
    """Owns every (year, season) accumulator for one run.

    ``fold_year`` builds an isolated partial without touching shared state, so it can run on
    a worker thread; ``absorb`` merges partials and must be called from a single thread.
    """

    def __init__(self, strategy: AggregationStrategy) -> None:
        self.strategy = strategy
        self._buckets: dict[int, YearPartial] = {}

    def fold_year(self, observations: Iterable[Observation]) -> YearPartial:
        partial: YearPartial = {}
        for observation in observations:
            if not self.strategy.accepts(observation):
                continue
            key = self.strategy.bucket_for(observation)
            accumulator = partial.get(key)
            if accumulator is None:
                accumulator = self.strategy.new_accumulator()
                partial[key] = accumulator
            self.strategy.update(accumulator, observation)
        return partial

    def absorb(self, year: int, partial: YearPartial) -> None:
        buckets = self._buckets.setdefault(year, {})
        for key, accumulator in partial.items():
            existing = buckets.get(key)
            if existing is None:
                buckets[key] = accumulator
            else:
                existing.merge(accumulator)

    @property
    def years(self) -> list[int]:
        return sorted(self._buckets)

    @property
    def sample_count(self) -> int:
        return sum(
            accumulator.samples for buckets in self._buckets.values() for accumulator in buckets.values()
        )

    def has_data(self) -> bool:
        return self.sample_count > 0

    def _accumulator(self, year: int, season: Season | None) -> Any:
        return self._buckets.get(year, {}).get(season) or self.strategy.new_accumulator()

    def year_summaries(self) -> list[YearSummary]:
        if not self.strategy.per_year_breakdown:
            return []
        summaries: list[YearSummary] = []
        for year in self.years:
            seasons: list[SeasonStats] = []
            for season in Season.ordered():
                accumulator = self._accumulator(year, season)
                seasons.append(
                    SeasonStats(
                        season=season,
                        sampleCount=accumulator.samples,
                        values=self.strategy.finalize_year(accumulator),
                    )
                )
            summaries.append(YearSummary(year=year, seasons=seasons))
        return summaries

    def rollup(self) -> list[SeasonStats]:
        if not self.strategy.per_year_breakdown:
            return []
        rolled: list[SeasonStats] = []
        for season in Season.ordered():
            accumulators = [self._accumulator(year, season) for year in self.years]
            rolled.append(
                SeasonStats(
                    season=season,
                    sampleCount=sum(accumulator.samples for accumulator in accumulators),
                    values=self.strategy.rollup(accumulators),
                )
            )
        return rolled

    def top_percentile_summary(self) -> TopPercentileSummary | None:
        if not isinstance(self.strategy, TopPercentileGustStrategy):
            return None
        accumulators = [self._accumulator(year, None) for year in self.years]
        return self.strategy.summarize(accumulators)

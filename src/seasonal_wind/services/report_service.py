from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from zoneinfo import ZoneInfo

from seasonal_wind.core.config import Settings
from seasonal_wind.core.exceptions import AppValidationError, UpstreamServiceError
from seasonal_wind.models import SeasonalReport, SkippedYear, StrategyInfo, StrategyName
from seasonal_wind.services.aggregation import (
    STRATEGY_CLASSES,
    AggregationStrategy,
    SeasonalAggregator,
    build_strategy,
)
from seasonal_wind.services.aggregation.aggregator import YearPartial
from seasonal_wind.services.ndbc_client import NdbcClient, normalize_station_id
from seasonal_wind.services.parser import parse_observations

logger = logging.getLogger(__name__)

UTC = ZoneInfo("UTC")
EARLIEST_ARCHIVE_YEAR = 1970
MAX_YEAR_SPAN = 100
NO_FILE_REASON = "archive returned a non-success status"


class SeasonalReportService:
    def __init__(self, settings: Settings, client: NdbcClient) -> None:
        self.settings = settings
        self.client = client

    def run(
        self,
        station_id: str | None = None,
        start_year: int | None = None,
        end_year: int | None = None,
        strategy: StrategyName | str = StrategyName.GUST_DIRECTION,
        direction_target: float | None = None,
        direction_tolerance: float | None = None,
        percentile: float | None = None,
        workers: int | None = None,
    ) -> SeasonalReport:
        station = normalize_station_id(station_id or self.settings.default_station_id)
        first_year = self.settings.default_start_year if start_year is None else start_year
        last_year = self.settings.default_end_year if end_year is None else end_year
        self._validate_year_range(first_year, last_year)

        active_strategy = build_strategy(
            strategy,
            direction_target=direction_target,
            direction_tolerance=(
                self.settings.direction_tolerance_deg if direction_tolerance is None else direction_tolerance
            ),
            percentile=self.settings.top_percentile if percentile is None else percentile,
        )
        aggregator = SeasonalAggregator(active_strategy)
        years = list(range(first_year, last_year + 1))
        worker_count = max(1, workers if workers is not None else self.settings.fetch_workers)
        logger.info(
            "Building %s report for station %s years %d-%d (workers=%d)",
            active_strategy.name.value,
            station,
            first_year,
            last_year,
            worker_count,
        )

        if worker_count == 1:
            skipped = self._run_sequential(station, years, aggregator)
        else:
            skipped = self._run_fan_out(station, years, aggregator, worker_count)

        has_data = aggregator.has_data()
        if not has_data:
            logger.warning("No qualifying observations for station %s in %d-%d", station, first_year, last_year)

        return SeasonalReport(
            stationId=station,
            startYear=first_year,
            endYear=last_year,
            strategy=active_strategy.name,
            generated_at_utc=datetime.now(UTC),
            columns=list(active_strategy.columns),
            years=aggregator.year_summaries(),
            rollup=aggregator.rollup(),
            skippedYears=skipped,
            topPercentile=aggregator.top_percentile_summary(),
            hasData=has_data,
        )

    def list_strategies(self) -> list[StrategyInfo]:
        infos: list[StrategyInfo] = []
        for name, strategy_cls in STRATEGY_CLASSES.items():
            parameters: dict[str, float | None] = {}
            if name == StrategyName.TOP_PERCENTILE:
                parameters = {
                    "direction": None,
                    "tolerance": self.settings.direction_tolerance_deg,
                    "percentile": self.settings.top_percentile,
                }
            infos.append(
                StrategyInfo(
                    name=name,
                    description=strategy_cls.description,
                    perYearBreakdown=strategy_cls.per_year_breakdown,
                    requiredFields=[field.value for field in strategy_cls.required_fields],
                    columns=list(strategy_cls.columns),
                    parameters=parameters,
                )
            )
        return infos

    @staticmethod
    def _validate_year_range(start_year: int, end_year: int) -> None:
        if start_year > end_year:
            raise AppValidationError(f"Start year {start_year} must not be after end year {end_year}.")
        if start_year < EARLIEST_ARCHIVE_YEAR:
            raise AppValidationError(f"NDBC historical archives start in {EARLIEST_ARCHIVE_YEAR}.")
        if end_year - start_year + 1 > MAX_YEAR_SPAN:
            raise AppValidationError(f"Year range cannot exceed {MAX_YEAR_SPAN} years.")

    def _collect_year(self, station: str, year: int, aggregator: SeasonalAggregator) -> YearPartial | None:
        text = self.client.fetch_year(station, year)
        if text is None:
            return None
        strategy: AggregationStrategy = aggregator.strategy
        return aggregator.fold_year(parse_observations(text, year, strategy.required_fields))

    def _record_failure(self, year: int, exc: UpstreamServiceError, skipped: list[SkippedYear]) -> None:
        if self.settings.fail_fast:
            raise exc
        logger.warning("Year %s: fetch failed, continuing with remaining years: %s", year, str(exc))
        skipped.append(SkippedYear(year=year, reason=str(exc)))

    def _run_sequential(self, station: str, years: list[int], aggregator: SeasonalAggregator) -> list[SkippedYear]:
        skipped: list[SkippedYear] = []
        for year in years:
            logger.info("Fetching data for year: %s", year)
            try:
                partial = self._collect_year(station, year, aggregator)
            except UpstreamServiceError as exc:
                self._record_failure(year, exc, skipped)
                continue
            if partial is None:
                skipped.append(SkippedYear(year=year, reason=NO_FILE_REASON))
                continue
            aggregator.absorb(year, partial)
        return skipped

    def _run_fan_out(
        self,
        station: str,
        years: list[int],
        aggregator: SeasonalAggregator,
        worker_count: int,
    ) -> list[SkippedYear]:
        skipped: list[SkippedYear] = []
        with ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="ndbc-year") as executor:
            futures: list[tuple[int, Future[YearPartial | None]]] = [
                (year, executor.submit(self._collect_year, station, year, aggregator)) for year in years
            ]
            try:
                # Partials are merged here, on the calling thread, in ascending year order.
                for year, future in futures:
                    try:
                        partial = future.result()
                    except UpstreamServiceError as exc:
                        self._record_failure(year, exc, skipped)
                        continue
                    if partial is None:
                        skipped.append(SkippedYear(year=year, reason=NO_FILE_REASON))
                        continue
                    aggregator.absorb(year, partial)
            except BaseException:
                for _, future in futures:
                    future.cancel()
                raise
        return skipped

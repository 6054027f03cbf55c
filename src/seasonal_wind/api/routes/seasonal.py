import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, Response

from seasonal_wind.api.dependencies import get_service, source_headers
from seasonal_wind.api.route_utils import SERVICE_ERROR_RESPONSES, call_service_or_http
from seasonal_wind.models import SeasonalReport, StrategyName
from seasonal_wind.services import SeasonalReportService, render_report

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Seasonal"])


def _build_report(
    service: SeasonalReportService,
    station_id: str,
    start_year: int | None,
    end_year: int | None,
    strategy: StrategyName,
    direction: float | None,
    tolerance: float | None,
    percentile: float | None,
    endpoint: str,
) -> SeasonalReport:
    return call_service_or_http(
        lambda: service.run(
            station_id=station_id,
            start_year=start_year,
            end_year=end_year,
            strategy=strategy,
            direction_target=direction,
            direction_tolerance=tolerance,
            percentile=percentile,
        ),
        logger=logger,
        endpoint=endpoint,
        context={"station": station_id, "strategy": strategy.value},
    )


@router.get(
    "/api/seasonal/station/{station_id}",
    response_model=SeasonalReport,
    summary="Seasonal wind report for one NDBC station",
    description=(
        "Downloads each archive year in range, folds valid observations into (year, season) buckets and returns "
        "per-year values plus the multi-year rollup defined by the selected strategy."
    ),
    responses=SERVICE_ERROR_RESPONSES,
)
def seasonal_report(
    station_id: str,
    response: Response,
    start_year: int | None = Query(default=None, description="First archive year (defaults to settings)."),
    end_year: int | None = Query(default=None, description="Last archive year, inclusive."),
    strategy: StrategyName = Query(default=StrategyName.GUST_DIRECTION),
    direction: float | None = Query(default=None, description="Target direction in degrees (top-percentile only)."),
    tolerance: float | None = Query(default=None, description="Direction tolerance in degrees."),
    percentile: float | None = Query(default=None, description="Top percentile in percent."),
    service: SeasonalReportService = Depends(get_service),
) -> SeasonalReport:
    report = _build_report(
        service, station_id, start_year, end_year, strategy, direction, tolerance, percentile, "seasonal"
    )
    for key, value in source_headers().items():
        response.headers[key] = value
    logger.info(
        "Seasonal report served station=%s strategy=%s years=%d skipped=%d",
        report.station_id,
        report.strategy.value,
        len(report.years),
        len(report.skipped_years),
    )
    return report


@router.get(
    "/api/seasonal/station/{station_id}/table",
    response_class=PlainTextResponse,
    summary="Seasonal wind report rendered as plain-text tables",
    responses=SERVICE_ERROR_RESPONSES,
)
def seasonal_report_table(
    station_id: str,
    start_year: int | None = Query(default=None),
    end_year: int | None = Query(default=None),
    strategy: StrategyName = Query(default=StrategyName.GUST_DIRECTION),
    direction: float | None = Query(default=None),
    tolerance: float | None = Query(default=None),
    percentile: float | None = Query(default=None),
    service: SeasonalReportService = Depends(get_service),
) -> PlainTextResponse:
    report = _build_report(
        service, station_id, start_year, end_year, strategy, direction, tolerance, percentile, "seasonal/table"
    )
    return PlainTextResponse(render_report(report), headers=source_headers())

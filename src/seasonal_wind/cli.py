"""Command-line entry points.

    seasonal-wind ncdv2 --start-year 2015 --end-year 2024
    seasonal-wind 44013 --strategy mean
    seasonal-wind 44013 --strategy top-percentile --direction 120 --tolerance 30 --percentile 1
    seasonal-wind-serve --port 8000
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace

from seasonal_wind.core.config import Settings, get_settings
from seasonal_wind.core.exceptions import AppValidationError, UpstreamServiceError
from seasonal_wind.core.logging import configure_logging
from seasonal_wind.models import StrategyName
from seasonal_wind.services import NdbcClient, SeasonalReportService, render_report

logger = logging.getLogger(__name__)

EXIT_UPSTREAM_FAILURE = 1
EXIT_INVALID_INPUT = 2


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seasonal-wind",
        description="Seasonal wind speed, gust and direction statistics from NDBC historical archives.",
    )
    parser.add_argument(
        "station_id",
        nargs="?",
        default=settings.default_station_id,
        help=f"NDBC station id (default: {settings.default_station_id})",
    )
    parser.add_argument("--start-year", type=int, default=settings.default_start_year)
    parser.add_argument("--end-year", type=int, default=settings.default_end_year)
    parser.add_argument(
        "--strategy",
        choices=[item.value for item in StrategyName],
        default=StrategyName.GUST_DIRECTION.value,
        help="Aggregation strategy (default: gust-direction)",
    )
    parser.add_argument("--direction", type=float, default=None, help="Target direction in degrees (top-percentile)")
    parser.add_argument(
        "--tolerance",
        type=float,
        default=settings.direction_tolerance_deg,
        help=f"Direction tolerance in degrees (default: {settings.direction_tolerance_deg:g})",
    )
    parser.add_argument(
        "--percentile",
        type=float,
        default=settings.top_percentile,
        help=f"Top percentile in percent (default: {settings.top_percentile:g})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.fetch_workers,
        help="Years fetched concurrently; 1 keeps the run strictly sequential",
    )
    parser.add_argument("--fail-fast", action="store_true", help="Abort on the first failed year")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON instead of tables")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)
    configure_logging(args.log_level)

    if args.fail_fast and not settings.fail_fast:
        settings = replace(settings, fail_fast=True)

    client = NdbcClient(
        base_url=settings.ndbc_base_url,
        archive_dir=settings.ndbc_archive_dir,
        timeout_seconds=settings.request_timeout_seconds,
        min_request_interval_seconds=settings.ndbc_min_request_interval_seconds,
    )
    service = SeasonalReportService(settings=settings, client=client)
    try:
        report = service.run(
            station_id=args.station_id,
            start_year=args.start_year,
            end_year=args.end_year,
            strategy=args.strategy,
            direction_target=args.direction,
            direction_tolerance=args.tolerance,
            percentile=args.percentile,
            workers=args.workers,
        )
    except AppValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except UpstreamServiceError as exc:
        logger.error("Run aborted: %s", str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_UPSTREAM_FAILURE

    if args.json:
        print(report.model_dump_json(by_alias=True, indent=2))
    else:
        print(render_report(report), end="")
    return 0


def serve(argv: Sequence[str] | None = None) -> int:
    import uvicorn

    parser = argparse.ArgumentParser(prog="seasonal-wind-serve", description="Serve the seasonal wind HTTP API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)
    configure_logging()
    uvicorn.run("seasonal_wind.main:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())

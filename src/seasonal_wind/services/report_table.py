from __future__ import annotations

from seasonal_wind.models import MetricColumn, SeasonalReport, SeasonStats, TopPercentileSummary

NOT_AVAILABLE = "N/A"


def format_value(value: float | None, decimals: int) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.{decimals}f}"


def _format_cells(stats: SeasonStats, columns: list[MetricColumn]) -> list[str]:
    return [format_value(stats.values.get(column.key), column.decimals) for column in columns]


def _format_table(headers: list[str], rows: list[list[str]]) -> list[str]:
    widths = [len(header) for header in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], len(cell))

    def _line(cells: list[str]) -> str:
        first = cells[0].ljust(widths[0])
        rest = [cell.rjust(widths[idx + 1]) for idx, cell in enumerate(cells[1:])]
        return " | ".join([first, *rest])

    separator = "-+-".join("-" * width for width in widths)
    return [_line(headers), separator, *(_line(row) for row in rows)]


def _render_percentile(summary: TopPercentileSummary) -> list[str]:
    low = summary.direction_target_deg - summary.direction_tolerance_deg
    high = summary.direction_target_deg + summary.direction_tolerance_deg
    lines = [
        f"Direction window: {summary.direction_target_deg:.1f} +/- {summary.direction_tolerance_deg:.1f} deg "
        f"({low:.1f} to {high:.1f}, no wrap at 0/360)",
        f"Qualifying gusts: {summary.qualifying_count}",
    ]
    if summary.fallback_to_all:
        lines.append(
            f"Top {summary.percentile:g}% cutoff is below one gust; averaging all {summary.used_count} gusts instead."
        )
    else:
        lines.append(f"Top {summary.percentile:g}% cutoff: {summary.cutoff} gusts")
    lines.append(f"Mean of top gusts: {format_value(summary.mean_gust_mps, 2)} m/s")
    return lines


def render_report(report: SeasonalReport) -> str:
    """Render a report as plain-text tables for terminal output."""
    lines = [
        f"Station {report.station_id} | {report.start_year}-{report.end_year} | strategy={report.strategy.value}",
    ]

    for skipped in report.skipped_years:
        lines.append(f"Skipped year {skipped.year}: {skipped.reason}")

    if not report.has_data:
        lines.append("")
        lines.append(
            f"No qualifying observations for station {report.station_id} "
            f"between {report.start_year} and {report.end_year}."
        )
        return "\n".join(lines) + "\n"

    if report.top_percentile is not None:
        lines.append("")
        lines.extend(_render_percentile(report.top_percentile))
        return "\n".join(lines) + "\n"

    columns = report.columns
    season_headers = [f"{stats.season.value} {column.label}" for stats in report.rollup for column in columns]

    lines.append("")
    lines.append("Per-year seasonal results:")
    year_rows = [
        [str(summary.year), *(cell for stats in summary.seasons for cell in _format_cells(stats, columns))]
        for summary in report.years
    ]
    lines.extend(_format_table(["Year", *season_headers], year_rows))

    lines.append("")
    lines.append("Multi-year results:")
    rollup_rows = [
        [stats.season.value, *_format_cells(stats, columns), str(stats.sample_count)] for stats in report.rollup
    ]
    lines.extend(_format_table(["Season", *(column.label for column in columns), "Samples"], rollup_rows))
    return "\n".join(lines) + "\n"

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator

from seasonal_wind.models import Observation, ObservationField

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"
MIN_COLUMNS = 8

# Column positions in NDBC standard meteorological files (YY MM DD hh mm WDIR WSPD GST ...).
COL_YEAR = 0
COL_MONTH = 1
COL_DAY = 2
COL_HOUR = 3
COL_MINUTE = 4
COL_DIRECTION = 5
COL_WIND_SPEED = 6
COL_GUST_SPEED = 7

SPEED_RANGE_MPS = (0.0, 90.0)
DIRECTION_RANGE_DEG = (0.0, 360.0)

_FIELD_COLUMNS: dict[ObservationField, tuple[int, tuple[float, float]]] = {
    ObservationField.DIRECTION: (COL_DIRECTION, DIRECTION_RANGE_DEG),
    ObservationField.WIND_SPEED: (COL_WIND_SPEED, SPEED_RANGE_MPS),
    ObservationField.GUST_SPEED: (COL_GUST_SPEED, SPEED_RANGE_MPS),
}


def _to_float(raw: str) -> float | None:
    try:
        value = float(raw)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _to_int(raw: str) -> int | None:
    value = _to_float(raw)
    if value is None or not value.is_integer():
        return None
    return int(value)


def _in_range(value: float, bounds: tuple[float, float]) -> bool:
    low, high = bounds
    return low <= value <= high


def parse_line(line: str, year: int, required_fields: Iterable[ObservationField]) -> Observation | None:
    """Parse one data row, or return None when the row must be dropped.

    Required fields must parse and lie in range; optional fields that fail either
    check are carried as absent.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_PREFIX):
        return None

    columns = stripped.split()
    if len(columns) < MIN_COLUMNS:
        return None

    month = _to_int(columns[COL_MONTH])
    if month is None or not 1 <= month <= 12:
        return None

    required = set(required_fields)
    values: dict[str, float | None] = {}
    for field, (column, bounds) in _FIELD_COLUMNS.items():
        value = _to_float(columns[column])
        if value is not None and not _in_range(value, bounds):
            value = None
        if value is None and field in required:
            return None
        values[field.value] = value

    return Observation(
        year=year,
        month=month,
        day=_to_int(columns[COL_DAY]),
        hour=_to_int(columns[COL_HOUR]),
        minute=_to_int(columns[COL_MINUTE]),
        **values,
    )


def parse_observations(
    raw_text: str,
    year: int,
    required_fields: Iterable[ObservationField],
) -> Iterator[Observation]:
    """Lazily yield the valid observations of one archive year."""
    required = frozenset(required_fields)
    kept = 0
    dropped = 0
    for line in raw_text.splitlines():
        if not line.strip() or line.lstrip().startswith(COMMENT_PREFIX):
            continue
        observation = parse_line(line, year, required)
        if observation is None:
            dropped += 1
            continue
        kept += 1
        yield observation
    logger.debug("Parsed year %s: kept=%d dropped=%d", year, kept, dropped)

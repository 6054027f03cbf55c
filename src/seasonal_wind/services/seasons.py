from __future__ import annotations

import logging

from seasonal_wind.models import Season

logger = logging.getLogger(__name__)

_SEASON_BY_MONTH: dict[int, Season] = {
    12: Season.WINTER,
    1: Season.WINTER,
    2: Season.WINTER,
    3: Season.SPRING,
    4: Season.SPRING,
    5: Season.SPRING,
    6: Season.SUMMER,
    7: Season.SUMMER,
    8: Season.SUMMER,
    9: Season.FALL,
    10: Season.FALL,
    11: Season.FALL,
}


def season_of(month: int) -> Season:
    """Meteorological season for a calendar month (December belongs to the same year's Winter)."""
    season = _SEASON_BY_MONTH.get(month)
    if season is None:
        logger.error("Month %r is outside 1..12; refusing to classify it into a season", month)
        raise ValueError(f"Month must be between 1 and 12, got {month!r}")
    return season

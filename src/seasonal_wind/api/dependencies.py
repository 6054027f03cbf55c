from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from seasonal_wind.core.config import Settings, get_settings
from seasonal_wind.services import NdbcClient, SeasonalReportService

NDBC_SOURCE_NOTICE = "Source: NOAA National Data Buoy Center"
NDBC_SOURCE_URL = "https://www.ndbc.noaa.gov/"


@lru_cache(maxsize=1)
def _cached_ndbc_client(
    base_url: str,
    archive_dir: str,
    timeout_seconds: float,
    min_request_interval_seconds: float,
) -> NdbcClient:
    return NdbcClient(
        base_url=base_url,
        archive_dir=archive_dir,
        timeout_seconds=timeout_seconds,
        min_request_interval_seconds=min_request_interval_seconds,
    )


@lru_cache(maxsize=1)
def _cached_service(settings: Settings) -> SeasonalReportService:
    client = _cached_ndbc_client(
        settings.ndbc_base_url,
        settings.ndbc_archive_dir,
        settings.request_timeout_seconds,
        settings.ndbc_min_request_interval_seconds,
    )
    return SeasonalReportService(settings=settings, client=client)


def get_service(settings: Settings = Depends(get_settings)) -> SeasonalReportService:
    return _cached_service(settings)


def source_headers() -> dict[str, str]:
    return {
        "X-Data-Source": NDBC_SOURCE_NOTICE,
        "X-Data-Source-URL": NDBC_SOURCE_URL,
    }


def clear_dependency_caches() -> None:
    _cached_ndbc_client.cache_clear()
    _cached_service.cache_clear()

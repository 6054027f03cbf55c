from __future__ import annotations

import gzip
import logging
import re
import threading
import time
import zlib
from typing import Any

import httpx

from seasonal_wind.core.exceptions import AppValidationError, UpstreamServiceError

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
_STATION_ID_PATTERN = re.compile(r"^[a-z0-9]{3,8}$")


def decode_payload(payload: bytes) -> str:
    """Decompress a gzip payload (detected by magic bytes) or pass plain text through."""
    if payload[:2] == GZIP_MAGIC:
        try:
            payload = gzip.decompress(payload)
        except (OSError, EOFError, zlib.error) as exc:
            raise UpstreamServiceError(f"NDBC payload announced gzip but could not be decompressed: {exc}") from exc
    return payload.decode("utf-8", errors="replace")


def normalize_station_id(station_id: str) -> str:
    normalized = station_id.strip().lower()
    if not _STATION_ID_PATTERN.match(normalized):
        raise AppValidationError(
            f"Invalid NDBC station id '{station_id}'. Expected 3-8 letters or digits (e.g. 44013, ncdv2)."
        )
    return normalized


class NdbcClient:
    BASE_URL = "https://www.ndbc.noaa.gov/view_text_file.php"
    ARCHIVE_DIR = "data/historical/stdmet/"
    USER_AGENT = "seasonal-wind/1.0"
    _request_lock = threading.Lock()
    _last_request_monotonic = 0.0

    def __init__(
        self,
        base_url: str | None = None,
        archive_dir: str | None = None,
        timeout_seconds: float = 30.0,
        min_request_interval_seconds: float = 0.5,
    ) -> None:
        self.base_url = base_url or self.BASE_URL
        self.archive_dir = archive_dir or self.ARCHIVE_DIR
        self.timeout_seconds = timeout_seconds
        self.min_request_interval_seconds = max(0.0, min_request_interval_seconds)

    def build_year_url(self, station_id: str, year: int) -> str:
        station = normalize_station_id(station_id)
        return f"{self.base_url}?filename={station}h{year}.txt.gz&dir={self.archive_dir}"

    def fetch_year(self, station_id: str, year: int) -> str | None:
        """Return one year of standard meteorological text, or None when the archive has no file.

        Transport failures and broken gzip payloads raise UpstreamServiceError.
        """
        url = self.build_year_url(station_id, year)
        logger.info("Requesting NDBC archive year %s for station %s", year, station_id)
        try:
            with httpx.Client(timeout=self.timeout_seconds, headers={"User-Agent": self.USER_AGENT}) as client:
                response = self._throttled_get(client, url)
        except httpx.TimeoutException as exc:
            raise UpstreamServiceError(
                f"NDBC request for {station_id} {year} timed out after {self.timeout_seconds:.0f}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamServiceError(f"NDBC request for {station_id} {year} failed: {exc}") from exc

        if response.status_code != 200:
            logger.warning("Year %s: status code %s, skipping", year, response.status_code)
            return None

        text = decode_payload(response.content)
        logger.info("Year %s: downloaded %d bytes (%d characters decoded)", year, len(response.content), len(text))
        return text

    def _throttled_get(self, client: httpx.Client, url: str, **kwargs: Any) -> httpx.Response:
        # Reserve a start slot under the lock so concurrent workers stay spaced apart
        # without serialising the downloads themselves.
        with self.__class__._request_lock:
            now = time.monotonic()
            slot = max(now, self.__class__._last_request_monotonic + self.min_request_interval_seconds)
            self.__class__._last_request_monotonic = slot
        wait_for = slot - now
        if wait_for > 0:
            logger.debug("Throttling NDBC request for %.2fs before GET %s", wait_for, url)
            time.sleep(wait_for)
        return client.get(url, **kwargs)

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    ndbc_base_url: str = "https://www.ndbc.noaa.gov/view_text_file.php"
    ndbc_archive_dir: str = "data/historical/stdmet/"
    request_timeout_seconds: float = 30.0
    ndbc_min_request_interval_seconds: float = 0.5
    default_station_id: str = "ncdv2"
    default_start_year: int = 2015
    default_end_year: int = 2024
    direction_tolerance_deg: float = 15.0
    top_percentile: float = 1.0
    fetch_workers: int = 1
    fail_fast: bool = False


def _strip_wrapping_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_dotenv_if_present() -> None:
    env_paths = [
        Path.cwd() / ".env",
        Path(__file__).resolve().parents[3] / ".env",
    ]
    for env_path in env_paths:
        if not env_path.exists():
            continue
        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = _strip_wrapping_quotes(value.strip())
            if key:
                os.environ.setdefault(key, value)
        break


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _normalize_archive_dir(raw_dir: str) -> str:
    """The archive path is appended verbatim to the query string, so it always ends in '/'."""
    cleaned = raw_dir.strip().lstrip("/")
    if cleaned and not cleaned.endswith("/"):
        cleaned = f"{cleaned}/"
    return cleaned


def get_settings() -> Settings:
    _load_dotenv_if_present()
    defaults = Settings()
    return Settings(
        ndbc_base_url=os.getenv("NDBC_BASE_URL", defaults.ndbc_base_url).strip(),
        ndbc_archive_dir=_normalize_archive_dir(os.getenv("NDBC_ARCHIVE_DIR", defaults.ndbc_archive_dir)),
        request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30")),
        ndbc_min_request_interval_seconds=float(os.getenv("NDBC_MIN_REQUEST_INTERVAL_SECONDS", "0.5")),
        default_station_id=os.getenv("DEFAULT_STATION_ID", defaults.default_station_id).strip(),
        default_start_year=int(os.getenv("DEFAULT_START_YEAR", str(defaults.default_start_year))),
        default_end_year=int(os.getenv("DEFAULT_END_YEAR", str(defaults.default_end_year))),
        direction_tolerance_deg=float(os.getenv("DIRECTION_TOLERANCE_DEG", "15")),
        top_percentile=float(os.getenv("TOP_PERCENTILE", "1")),
        fetch_workers=max(1, int(os.getenv("FETCH_WORKERS", "1"))),
        fail_fast=_env_bool("FAIL_FAST", False),
    )


get_settings = lru_cache(maxsize=1)(get_settings)


def clear_settings_cache() -> None:
    get_settings.cache_clear()  # type: ignore[attr-defined]

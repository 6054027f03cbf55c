from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from seasonal_wind.models.observation import Season


class StrategyName(str, Enum):
    MEAN = "mean"
    MAX = "max"
    GUST_DIRECTION = "gust-direction"
    TOP_PERCENTILE = "top-percentile"


class MetricColumn(BaseModel):
    key: str
    label: str
    decimals: int = 2


class SeasonStats(BaseModel):
    season: Season
    sample_count: int = Field(alias="sampleCount")
    values: dict[str, float | None]

    model_config = {"populate_by_name": True}


class YearSummary(BaseModel):
    year: int
    seasons: list[SeasonStats]


class SkippedYear(BaseModel):
    year: int
    reason: str


class TopPercentileSummary(BaseModel):
    direction_target_deg: float = Field(alias="directionTarget")
    direction_tolerance_deg: float = Field(alias="directionTolerance")
    percentile: float
    qualifying_count: int = Field(alias="qualifyingCount")
    cutoff: int
    used_count: int = Field(alias="usedCount")
    fallback_to_all: bool = Field(alias="fallbackToAll")
    mean_gust_mps: float | None = Field(alias="meanGust")

    model_config = {"populate_by_name": True}


class SeasonalReport(BaseModel):
    station_id: str = Field(alias="stationId")
    start_year: int = Field(alias="startYear")
    end_year: int = Field(alias="endYear")
    strategy: StrategyName
    generated_at_utc: datetime
    columns: list[MetricColumn]
    years: list[YearSummary]
    rollup: list[SeasonStats]
    skipped_years: list[SkippedYear] = Field(default_factory=list, alias="skippedYears")
    top_percentile: TopPercentileSummary | None = Field(default=None, alias="topPercentile")
    has_data: bool = Field(alias="hasData")

    model_config = {"populate_by_name": True}


class StrategyInfo(BaseModel):
    name: StrategyName
    description: str
    per_year_breakdown: bool = Field(alias="perYearBreakdown")
    required_fields: list[str] = Field(alias="requiredFields")
    columns: list[MetricColumn]
    parameters: dict[str, float | None]

    model_config = {"populate_by_name": True}

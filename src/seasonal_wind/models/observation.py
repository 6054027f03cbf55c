from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Season(str, Enum):
    WINTER = "Winter"
    SPRING = "Spring"
    SUMMER = "Summer"
    FALL = "Fall"

    @classmethod
    def ordered(cls) -> list["Season"]:
        return [cls.WINTER, cls.SPRING, cls.SUMMER, cls.FALL]


class ObservationField(str, Enum):
    DIRECTION = "direction_deg"
    WIND_SPEED = "wind_speed_mps"
    GUST_SPEED = "gust_speed_mps"


class Observation(BaseModel):
    """One standard meteorological row from an NDBC historical file."""

    year: int
    month: int = Field(ge=1, le=12)
    day: int | None = None
    hour: int | None = None
    minute: int | None = None
    direction_deg: float | None = Field(default=None, ge=0.0, le=360.0)
    wind_speed_mps: float | None = Field(default=None, ge=0.0, le=90.0)
    gust_speed_mps: float | None = Field(default=None, ge=0.0, le=90.0)


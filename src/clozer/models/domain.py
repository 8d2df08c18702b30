"""Domain value types shared by the routing and planning services."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Optional

from ..config import Settings, settings


class AvailabilityProfile(str, Enum):
    UNSPECIFIED = "unspecified"
    FLEXIBLE = "flexible"
    WORKING_HOURS_ONLY = "working_hours_only"


class PriorityTier(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AbsentStrategy(str, Enum):
    AFTER_NEXT = "after_next"
    ON_RETURN = "on_return"
    ANOTHER_DAY = "another_day"


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A WGS84 coordinate. Construction fails on NaN or out-of-range values."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        for name, value, bound in (("lat", self.lat, 90.0), ("lng", self.lng, 180.0)):
            if value is None or not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")
            if not -bound <= value <= bound:
                raise ValueError(f"{name} must be within [-{bound:g}, {bound:g}], got {value!r}")


@dataclass(frozen=True, slots=True)
class Stop:
    """A client location to visit; only geocoded stops take part in routing."""

    id: str
    lat: Optional[float]
    lng: Optional[float]
    postal_code: str
    city_name: str
    availability: AvailabilityProfile = AvailabilityProfile.UNSPECIFIED
    name: Optional[str] = None

    @property
    def is_geocoded(self) -> bool:
        return self.lat is not None and self.lng is not None

    @property
    def point(self) -> GeoPoint:
        if not self.is_geocoded:
            raise ValueError(f"Stop {self.id} has no coordinates and cannot be routed.")
        return GeoPoint(self.lat, self.lng)


@dataclass(frozen=True, slots=True)
class WorkingHoursConfig:
    """Working day boundaries used to bound how many visits fit in a day."""

    start_time: time
    end_time: time
    lunch_start: Optional[time] = None
    lunch_end: Optional[time] = None
    default_visit_duration_minutes: int = 30
    late_profile_threshold: Optional[time] = None

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "WorkingHoursConfig":
        return cls(
            start_time=config.work_start_time,
            end_time=config.work_end_time,
            lunch_start=config.lunch_break_start,
            lunch_end=config.lunch_break_end,
            default_visit_duration_minutes=config.default_visit_duration_minutes,
            late_profile_threshold=config.late_profile_threshold,
        )


def default_depot(config: Settings = settings) -> GeoPoint:
    return GeoPoint(config.depot_latitude, config.depot_longitude)

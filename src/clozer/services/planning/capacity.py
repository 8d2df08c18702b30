"""Working-day capacity estimates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

from ...config import settings
from ...models.domain import WorkingHoursConfig


@dataclass(slots=True)
class CompletionEstimate:
    can_complete: bool
    estimated_end_time: datetime
    stops_that_fit: int
    available_minutes: float
    needed_minutes: float


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def available_minutes(config: WorkingHoursConfig) -> int:
    """Minutes between start and end of day, lunch break excluded when configured."""
    minutes = _minutes(config.end_time) - _minutes(config.start_time)
    if config.lunch_start is not None and config.lunch_end is not None:
        minutes -= _minutes(config.lunch_end) - _minutes(config.lunch_start)
    return minutes


def max_stops_per_day(
    config: WorkingHoursConfig,
    travel_overhead_minutes: int = settings.travel_overhead_per_stop_minutes,
) -> int:
    """How many visits fit in a day, counting a fixed travel overhead per visit."""
    per_stop = config.default_visit_duration_minutes + travel_overhead_minutes
    if per_stop <= 0:
        raise ValueError("visit duration plus travel overhead must be positive")
    return max(0, math.floor(available_minutes(config) / per_stop))


def day_end_for(config: WorkingHoursConfig, on_date: date, tz: tzinfo | None = None) -> datetime:
    return datetime.combine(on_date, config.end_time, tzinfo=tz)


def estimate_completion(
    remaining_stop_count: int,
    remaining_travel_seconds: float,
    avg_visit_minutes: float,
    day_end: datetime,
    current_time: datetime,
) -> CompletionEstimate:
    """Check whether the rest of a tour fits before ``day_end``.

    ``stops_that_fit`` spreads the travel time evenly over the remaining stops
    and counts how many travel + visit slots the time left can hold.
    """
    if remaining_stop_count < 0:
        raise ValueError("remaining_stop_count must be >= 0")
    if remaining_travel_seconds < 0 or avg_visit_minutes < 0:
        raise ValueError("travel time and visit duration must be >= 0")
    if (day_end.tzinfo is None) != (current_time.tzinfo is None):
        raise ValueError("day_end and current_time must both be timezone-aware or both naive")

    available = (day_end - current_time).total_seconds() / 60.0

    if remaining_stop_count == 0:
        return CompletionEstimate(
            can_complete=True,
            estimated_end_time=current_time,
            stops_that_fit=0,
            available_minutes=available,
            needed_minutes=0.0,
        )

    needed = remaining_travel_seconds / 60.0 + remaining_stop_count * avg_visit_minutes
    slot = remaining_travel_seconds / 60.0 / remaining_stop_count + avg_visit_minutes

    stops_that_fit = 0
    used = 0.0
    while stops_that_fit < remaining_stop_count and used + slot <= available:
        used += slot
        stops_that_fit += 1

    return CompletionEstimate(
        can_complete=needed <= available,
        estimated_end_time=current_time + timedelta(minutes=needed),
        stops_that_fit=stops_that_fit,
        available_minutes=available,
        needed_minutes=needed,
    )

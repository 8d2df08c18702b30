"""Daily planning request/response schemas."""

from __future__ import annotations

from datetime import date, time
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import settings
from ..models.domain import PriorityTier, WorkingHoursConfig
from .routing import GeoPointModel, StopModel


class WorkingHoursModel(BaseModel):
    start_time: time = settings.work_start_time
    end_time: time = settings.work_end_time
    lunch_start: Optional[time] = settings.lunch_break_start
    lunch_end: Optional[time] = settings.lunch_break_end
    default_visit_duration_minutes: int = Field(default=settings.default_visit_duration_minutes, ge=1)
    late_profile_threshold: Optional[time] = settings.late_profile_threshold

    def to_domain(self) -> WorkingHoursConfig:
        return WorkingHoursConfig(
            start_time=self.start_time,
            end_time=self.end_time,
            lunch_start=self.lunch_start,
            lunch_end=self.lunch_end,
            default_visit_duration_minutes=self.default_visit_duration_minutes,
            late_profile_threshold=self.late_profile_threshold,
        )


class DailyPlanRequest(BaseModel):
    stops: List[StopModel]
    visited_ids: List[str] = Field(default_factory=list, description="Clients already visited are left out.")
    depot: Optional[GeoPointModel] = Field(default=None, description="Defaults to the configured depot.")
    working_hours: Optional[WorkingHoursModel] = None
    plan_date: Optional[date] = None


class TourSuggestionModel(BaseModel):
    suggestion_id: str
    name: str
    plan_date: date
    stops: List[StopModel]
    total_distance_m: float
    total_distance_km: float
    estimated_duration_minutes: int
    estimated_visits: int
    zone: str
    priority: PriorityTier
    rationale: str
    deferred_stop_count: int


class DailyPlanResponse(BaseModel):
    plan_date: date
    suggestions: List[TourSuggestionModel]
    total_to_visit: int
    per_zone_counts: Dict[str, int]
    max_stops_per_day: int
    recommendation: str


class InsightsRequest(BaseModel):
    stops: List[StopModel]
    visited_ids: List[str] = Field(default_factory=list)


class InsightsResponse(BaseModel):
    total_clients: int
    visited_clients: int
    pending_clients: int
    not_geocoded_clients: int
    completion_rate: int
    most_visited_zone: Optional[str]
    suggested_next_action: str
    pending_per_zone: Dict[str, int]

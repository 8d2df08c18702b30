"""Planning domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Dict, List, Optional

from ...config import settings
from ...models.domain import PriorityTier, Stop


@dataclass(slots=True)
class PlannerOptions:
    depot_label: str = settings.depot_label
    max_suggestions: int = settings.max_suggestions
    medium_priority_min_stops: int = settings.medium_priority_min_stops
    travel_overhead_per_stop_minutes: int = settings.travel_overhead_per_stop_minutes
    average_speed_kmh: float = settings.average_speed_kmh
    late_profile_threshold: time = settings.late_profile_threshold


@dataclass(frozen=True, slots=True)
class TourSuggestion:
    suggestion_id: str
    name: str
    plan_date: date
    stops: tuple[Stop, ...]
    total_distance_meters: float
    estimated_duration_minutes: int
    zone_label: str
    priority: PriorityTier
    rationale: str
    deferred_stop_count: int = 0

    @property
    def visit_count(self) -> int:
        return len(self.stops)


@dataclass(slots=True)
class DailyPlan:
    plan_date: date
    suggestions: List[TourSuggestion]
    total_to_visit: int
    per_zone_counts: Dict[str, int]
    max_stops_per_day: int
    recommendation: str


@dataclass(slots=True)
class PortfolioInsights:
    total_clients: int
    visited_clients: int
    pending_clients: int
    not_geocoded_clients: int
    completion_rate: int
    most_visited_zone: Optional[str]
    suggested_next_action: str
    pending_per_zone: Dict[str, int] = field(default_factory=dict)

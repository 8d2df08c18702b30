"""Planning orchestration service."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime

from ...config import settings
from ...models.domain import WorkingHoursConfig, default_depot
from ...schemas.planning import (
    DailyPlanRequest,
    DailyPlanResponse,
    InsightsRequest,
    InsightsResponse,
    TourSuggestionModel,
)
from ...schemas.routing import CompletionRequest, CompletionResponse, StopModel
from ..geospatial import meters_to_km
from .capacity import day_end_for, estimate_completion
from .insights import compute_insights
from .models import TourSuggestion
from .planner import generate_daily_plan

logger = logging.getLogger(__name__)


def _suggestion_model(suggestion: TourSuggestion) -> TourSuggestionModel:
    return TourSuggestionModel(
        suggestion_id=suggestion.suggestion_id,
        name=suggestion.name,
        plan_date=suggestion.plan_date,
        stops=[StopModel.from_domain(stop) for stop in suggestion.stops],
        total_distance_m=suggestion.total_distance_meters,
        total_distance_km=round(meters_to_km(suggestion.total_distance_meters), 1),
        estimated_duration_minutes=suggestion.estimated_duration_minutes,
        estimated_visits=suggestion.visit_count,
        zone=suggestion.zone_label,
        priority=suggestion.priority,
        rationale=suggestion.rationale,
        deferred_stop_count=suggestion.deferred_stop_count,
    )


def build_daily_plan(payload: DailyPlanRequest) -> DailyPlanResponse:
    stops = [stop.to_domain() for stop in payload.stops]
    visited_ids = set(payload.visited_ids)
    unvisited = [stop for stop in stops if stop.id not in visited_ids]
    depot = payload.depot.to_domain() if payload.depot else default_depot()
    config = payload.working_hours.to_domain() if payload.working_hours else WorkingHoursConfig.from_settings()

    plan = generate_daily_plan(unvisited, depot, config, plan_date=payload.plan_date)
    return DailyPlanResponse(
        plan_date=plan.plan_date,
        suggestions=[_suggestion_model(suggestion) for suggestion in plan.suggestions],
        total_to_visit=plan.total_to_visit,
        per_zone_counts=plan.per_zone_counts,
        max_stops_per_day=plan.max_stops_per_day,
        recommendation=plan.recommendation,
    )


def compute_insights_request(payload: InsightsRequest) -> InsightsResponse:
    insights = compute_insights([stop.to_domain() for stop in payload.stops], set(payload.visited_ids))
    return InsightsResponse(**asdict(insights))


def estimate_completion_request(payload: CompletionRequest, now: datetime | None = None) -> CompletionResponse:
    """Completion estimate; the server clock is read only when the request carries none."""
    current_time = payload.current_time or now
    if current_time is None:
        current_time = datetime.now(payload.day_end_time.tzinfo if payload.day_end_time else None)
    day_end = payload.day_end_time or day_end_for(
        WorkingHoursConfig.from_settings(), current_time.date(), current_time.tzinfo
    )
    avg_visit = (
        payload.avg_visit_minutes
        if payload.avg_visit_minutes is not None
        else float(settings.default_visit_duration_minutes)
    )
    estimate = estimate_completion(
        payload.remaining_stop_count,
        payload.remaining_travel_seconds,
        avg_visit,
        day_end,
        current_time,
    )
    if not estimate.can_complete:
        logger.info(
            f"{payload.remaining_stop_count} remaining visits need {estimate.needed_minutes:.0f} min "
            f"but only {estimate.available_minutes:.0f} min are left"
        )
    return CompletionResponse(**asdict(estimate))

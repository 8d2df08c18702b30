"""Daily tour suggestions built from the clients still to visit.

Suggestions come from two strategies: one tour per postal zone (densest zone
first) and one tour made of the clients closest to the depot regardless of
zone. Distances shown on suggestions are quick nearest-neighbour previews that
keep after-hours clients at the end; the optimized order is computed once a
suggestion becomes an actual tour.
"""

from __future__ import annotations

import logging
import math
import uuid
from datetime import date
from typing import Sequence

from ...models.domain import AvailabilityProfile, GeoPoint, PriorityTier, Stop, WorkingHoursConfig
from ..geospatial import haversine_m, meters_to_km, travel_minutes
from ..routing.distance import build_haversine_matrix
from ..routing.optimizer import nearest_neighbor_order, tour_distance
from .capacity import max_stops_per_day
from .models import DailyPlan, PlannerOptions, TourSuggestion
from .zones import cluster_by_zone, rank_zones

logger = logging.getLogger(__name__)

ALL_VISITED_MESSAGE = "All clients have been visited! Import new clients to keep going."
NOT_GEOCODED_MESSAGE = (
    "None of the {count} clients left to visit has a location yet. "
    "Fix their addresses or run geocoding to plan tours."
)
NO_CAPACITY_MESSAGE = (
    "The configured working hours leave no time for visits once lunch and travel are accounted for. "
    "Review the working-hours settings."
)


def estimate_tour_distance(stops: Sequence[Stop], start: GeoPoint, late_stops: Sequence[Stop] = ()) -> float:
    """Closed-loop distance in metres of a nearest-neighbour pass from ``start``.

    ``late_stops`` are only visited once every stop in ``stops`` is done.
    """
    if not stops and not late_stops:
        return 0.0
    matrix = build_haversine_matrix([start, *(stop.point for stop in (*stops, *late_stops))])
    head = nearest_neighbor_order(matrix, range(len(stops)))
    tail = nearest_neighbor_order(
        matrix,
        range(len(stops), len(stops) + len(late_stops)),
        start_node=head[-1] + 1 if head else 0,
    )
    return tour_distance(head + tail, matrix)


def estimate_tour_duration(distance_m: float, stop_count: int, visit_minutes: int, speed_kmh: float) -> int:
    return round(travel_minutes(distance_m, speed_kmh) + stop_count * visit_minutes)


def defer_unavailable_stops(stops: Sequence[Stop]) -> tuple[list[Stop], int]:
    """Move clients only reachable outside working hours to the end, keeping relative order."""
    available = [stop for stop in stops if stop.availability is not AvailabilityProfile.WORKING_HOURS_ONLY]
    deferred = [stop for stop in stops if stop.availability is AvailabilityProfile.WORKING_HOURS_ONLY]
    return available + deferred, len(deferred)


def priority_for_zone(rank: int, member_count: int, medium_min_stops: int) -> PriorityTier:
    if rank == 0:
        return PriorityTier.HIGH
    if member_count >= medium_min_stops:
        return PriorityTier.MEDIUM
    return PriorityTier.LOW


def _zone_rationale(priority: PriorityTier, rank: int, member_count: int) -> str:
    if rank == 0:
        return (
            f"Densest zone with {member_count} clients. "
            "Grouping the day's visits here keeps driving between clients to a minimum."
        )
    if priority is PriorityTier.MEDIUM:
        return f"{member_count} clients in this zone. Good prospecting potential."
    return f"{member_count} isolated clients. Best combined with a nearby zone."


def _build_suggestion(
    stops: Sequence[Stop],
    zone_label: str,
    plan_date: date,
    priority: PriorityTier,
    rationale: str,
    depot: GeoPoint,
    config: WorkingHoursConfig,
    options: PlannerOptions,
) -> TourSuggestion:
    ordered, deferred = defer_unavailable_stops(stops)
    if deferred:
        threshold = config.late_profile_threshold or options.late_profile_threshold
        rationale = (
            f"{rationale} {deferred} client(s) only available outside working hours "
            f"moved to the end of the tour (best after {threshold:%H:%M})."
        )

    split = len(ordered) - deferred
    distance = estimate_tour_distance(ordered[:split], depot, ordered[split:])
    duration = estimate_tour_duration(
        distance, len(ordered), config.default_visit_duration_minutes, options.average_speed_kmh
    )
    return TourSuggestion(
        suggestion_id=uuid.uuid4().hex,
        name=f"Tour {zone_label}",
        plan_date=plan_date,
        stops=tuple(ordered),
        total_distance_meters=round(distance, 1),
        estimated_duration_minutes=duration,
        zone_label=zone_label,
        priority=priority,
        rationale=rationale,
        deferred_stop_count=deferred,
    )


def _recommendation(total: int, max_per_day: int, zone_count: int, proximity: TourSuggestion, top_zone: str) -> str:
    if total <= max_per_day:
        return (
            f"You have {total} clients to visit. A single day is enough! "
            f'Start the "{proximity.name}" tour to make the most of your time.'
        )
    days_needed = math.ceil(total / max_per_day)
    return (
        f"{total} clients to visit across {zone_count} zones. "
        f"Estimate: {days_needed} days of touring ({max_per_day} clients/day max). "
        f'Start with the "{proximity.name}" tour or pick a zone such as "{top_zone}".'
    )


def generate_daily_plan(
    stops: Sequence[Stop],
    depot: GeoPoint,
    config: WorkingHoursConfig,
    *,
    plan_date: date | None = None,
    options: PlannerOptions | None = None,
) -> DailyPlan:
    """Rank tour suggestions for the clients still to visit."""
    options = options or PlannerOptions()
    plan_date = plan_date or date.today()

    routable = [stop for stop in stops if stop.is_geocoded]
    if len(routable) != len(stops):
        logger.warning(f"Ignoring {len(stops) - len(routable)} clients without coordinates while planning")

    max_per_day = max_stops_per_day(config, options.travel_overhead_per_stop_minutes)

    if not routable:
        recommendation = NOT_GEOCODED_MESSAGE.format(count=len(stops)) if stops else ALL_VISITED_MESSAGE
        return DailyPlan(
            plan_date=plan_date,
            suggestions=[],
            total_to_visit=0,
            per_zone_counts={},
            max_stops_per_day=max_per_day,
            recommendation=recommendation,
        )

    ranked = rank_zones(cluster_by_zone(routable))
    per_zone_counts = {zone: len(members) for zone, members in ranked}
    total = len(routable)

    if max_per_day == 0:
        logger.warning("Working hours leave no capacity for visits; no suggestions generated")
        return DailyPlan(
            plan_date=plan_date,
            suggestions=[],
            total_to_visit=total,
            per_zone_counts=per_zone_counts,
            max_stops_per_day=0,
            recommendation=NO_CAPACITY_MESSAGE,
        )

    suggestions: list[TourSuggestion] = []
    for rank, (zone, members) in enumerate(ranked[: options.max_suggestions - 1]):
        priority = priority_for_zone(rank, len(members), options.medium_priority_min_stops)
        suggestions.append(
            _build_suggestion(
                members[:max_per_day],
                zone,
                plan_date,
                priority,
                _zone_rationale(priority, rank, len(members)),
                depot,
                config,
                options,
            )
        )

    by_distance = sorted(((haversine_m(depot, stop.point), stop) for stop in routable), key=lambda item: item[0])
    nearest = by_distance[:max_per_day]
    mean_radius_km = meters_to_km(sum(distance for distance, _ in nearest) / len(nearest))
    proximity = _build_suggestion(
        [stop for _, stop in nearest],
        f"Near {options.depot_label}",
        plan_date,
        PriorityTier.HIGH,
        f"The {len(nearest)} clients closest to the office (radius ~{round(mean_radius_km)} km). Fastest tour.",
        depot,
        config,
        options,
    )
    suggestions.insert(0, proximity)

    logger.info(
        f"Daily plan for {plan_date}: {total} clients in {len(ranked)} zones, "
        f"{max_per_day} visits/day, {len(suggestions)} suggestions"
    )
    return DailyPlan(
        plan_date=plan_date,
        suggestions=suggestions[: options.max_suggestions],
        total_to_visit=total,
        per_zone_counts=per_zone_counts,
        max_stops_per_day=max_per_day,
        recommendation=_recommendation(total, max_per_day, len(ranked), proximity, ranked[0][0]),
    )

"""Tour routing orchestration service."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Sequence

from ...config import settings
from ...models.domain import AbsentStrategy, GeoPoint, Stop, default_depot
from ...schemas.routing import (
    ReoptimizationRequest,
    ReoptimizationResponse,
    TourLegModel,
    TourOptimizationRequest,
    TourOptimizationResponse,
)
from ..geospatial import travel_minutes
from .absence import reoptimize_after_absence, splice_absent_stop
from .distance import DistanceMatrix, build_haversine_matrix
from .models import OptimizedTour, TourLeg
from .optimizer import optimize_tour
from .osrm_client import OSRMClient, fetch_distance_matrix, fetch_route_geometry

logger = logging.getLogger(__name__)


def _split_geocoded(stops: Sequence[Stop]) -> tuple[list[Stop], list[str]]:
    routable = [stop for stop in stops if stop.is_geocoded]
    excluded = [stop.id for stop in stops if not stop.is_geocoded]
    if excluded:
        logger.warning(f"Excluding {len(excluded)} stops without coordinates from routing: {excluded}")
    return routable, excluded


def _resolve_matrix(start: GeoPoint, points: Sequence[GeoPoint], use_road_distances: bool) -> tuple[DistanceMatrix, str]:
    matrix = None
    if use_road_distances and settings.osrm_base_url:
        matrix = fetch_distance_matrix(OSRMClient(), start, points)
    if matrix is not None:
        return matrix, "osrm"
    return build_haversine_matrix([start, *points], speed_kmh=settings.average_speed_kmh), "haversine"


def _leg_duration_s(matrix: DistanceMatrix, i: int, j: int) -> float:
    duration = matrix.duration(i, j)
    if duration is None:
        duration = travel_minutes(matrix.distance(i, j), settings.average_speed_kmh) * 60.0
    return duration


def build_tour_legs(
    stops: Sequence[Stop],
    order: Sequence[int],
    matrix: DistanceMatrix,
    *,
    distance_source: str,
    departure_time: datetime | None = None,
    visit_minutes: int | None = None,
) -> OptimizedTour:
    """Per-stop distance/duration from the previous stop, with arrival estimates."""
    visit_seconds = (visit_minutes if visit_minutes is not None else settings.default_visit_duration_minutes) * 60
    legs: list[TourLeg] = []
    elapsed_s = 0.0
    total_distance = 0.0
    total_duration = 0.0
    previous_node = 0

    for sequence, stop_index in enumerate(order, start=1):
        node = stop_index + 1
        distance = matrix.distance(previous_node, node)
        duration = _leg_duration_s(matrix, previous_node, node)
        elapsed_s += duration
        arrival = departure_time + timedelta(seconds=elapsed_s) if departure_time else None
        elapsed_s += visit_seconds
        total_distance += distance
        total_duration += duration
        legs.append(
            TourLeg(
                stop_id=stops[stop_index].id,
                sequence=sequence,
                distance_from_previous_m=distance,
                duration_from_previous_s=duration,
                estimated_arrival=arrival,
            )
        )
        previous_node = node

    return_distance = matrix.distance(previous_node, 0) if legs else 0.0
    return_duration = _leg_duration_s(matrix, previous_node, 0) if legs else 0.0
    elapsed_s += return_duration

    return OptimizedTour(
        legs=legs,
        return_distance_m=return_distance,
        return_duration_s=return_duration,
        total_distance_m=total_distance + return_distance,
        total_duration_s=total_duration + return_duration,
        distance_source=distance_source,
        estimated_end_time=departure_time + timedelta(seconds=elapsed_s) if departure_time else None,
    )


def optimize_tour_request(payload: TourOptimizationRequest) -> TourOptimizationResponse:
    stops = [stop.to_domain() for stop in payload.stops]
    start = payload.start.to_domain() if payload.start else default_depot()

    routable, excluded = _split_geocoded(stops)
    if len(routable) > settings.max_stops_per_tour:
        raise ValueError(
            f"Tour has {len(routable)} stops; at most {settings.max_stops_per_tour} can be optimized at once."
        )

    points = [stop.point for stop in routable]
    matrix, source = _resolve_matrix(start, points, payload.use_road_distances)
    result = optimize_tour(start, points, matrix)
    logger.info(
        f"Optimized tour of {len(routable)} stops using {source} distances: "
        f"{result.total_distance:.0f} m (nearest neighbour {result.nearest_neighbor_distance:.0f} m)"
    )

    tour = build_tour_legs(
        routable,
        result.order,
        matrix,
        distance_source=source,
        departure_time=payload.departure_time,
        visit_minutes=payload.visit_duration_minutes,
    )
    geometry = None
    if payload.include_geometry and settings.osrm_base_url:
        geometry = fetch_route_geometry(OSRMClient(), start, [points[index] for index in result.order])

    return TourOptimizationResponse(
        ordered_stop_ids=[routable[index].id for index in result.order],
        legs=[
            TourLegModel(
                stop_id=leg.stop_id,
                sequence=leg.sequence,
                distance_from_previous_m=round(leg.distance_from_previous_m, 1),
                duration_from_previous_s=round(leg.duration_from_previous_s, 1),
                estimated_arrival=leg.estimated_arrival,
            )
            for leg in tour.legs
        ],
        total_distance_m=round(tour.total_distance_m, 1),
        total_duration_s=round(tour.total_duration_s, 1),
        return_distance_m=round(tour.return_distance_m, 1),
        return_duration_s=round(tour.return_duration_s, 1),
        distance_source=source,
        excluded_stop_ids=excluded,
        estimated_end_time=tour.estimated_end_time,
        route_geometry=geometry,
    )


def reoptimize_request(payload: ReoptimizationRequest) -> ReoptimizationResponse:
    """Re-order the rest of a tour after a client was found absent."""
    current_position = payload.current_position.to_domain()
    absent = payload.absent_stop.to_domain()
    routable, excluded = _split_geocoded([stop.to_domain() for stop in payload.remaining_stops])
    points = [stop.point for stop in routable]

    matrix = None
    if payload.strategy is not AbsentStrategy.ANOTHER_DAY:
        absent_point = absent.point
        matrix, _ = _resolve_matrix(current_position, points, payload.use_road_distances)
    else:
        absent_point = None

    result = reoptimize_after_absence(current_position, points, absent_point, payload.strategy, matrix)
    ordered_ids = [routable[index].id for index in result.order]
    visit_order = splice_absent_stop(ordered_ids, absent.id, result.absent_insert_position)

    return ReoptimizationResponse(
        visit_order=visit_order,
        absent_insert_position=result.absent_insert_position,
        strategy=result.strategy,
        deferred=result.deferred,
        total_distance_m=round(result.total_distance, 1),
        extra_distance_m=round(result.extra_distance_meters, 1),
        extra_minutes=round(travel_minutes(result.extra_distance_meters, settings.average_speed_kmh)),
        excluded_stop_ids=excluded,
    )

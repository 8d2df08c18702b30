"""Tour sequencing heuristic: nearest-neighbour construction plus 2-opt.

The tour is a closed loop that leaves from the start point, visits every stop
once and returns to the start. Node 0 of the distance matrix is the start
point and node ``k + 1`` is stop ``k``.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ...models.domain import GeoPoint
from .distance import DistanceMatrix, build_haversine_matrix
from .models import OptimizationResult

logger = logging.getLogger(__name__)


def tour_distance(order: Sequence[int], matrix: DistanceMatrix) -> float:
    """Closed-loop distance of visiting stops in ``order`` from node 0 and back."""
    if not order:
        return 0.0

    total = matrix.distance(0, order[0] + 1)
    for current, following in zip(order, order[1:]):
        total += matrix.distance(current + 1, following + 1)
    total += matrix.distance(order[-1] + 1, 0)
    return total


def nearest_neighbor_order(
    matrix: DistanceMatrix,
    stop_indices: Iterable[int] | None = None,
    start_node: int = 0,
) -> list[int]:
    """Greedy construction: always move to the closest unvisited stop.

    Only ``stop_indices`` are visited when given, leaving from ``start_node``.
    Ties go to the lowest stop index.
    """
    unvisited = sorted(stop_indices) if stop_indices is not None else list(range(matrix.size - 1))
    order: list[int] = []
    current_node = start_node

    while unvisited:
        nearest = unvisited[0]
        nearest_distance = matrix.distance(current_node, nearest + 1)
        for candidate in unvisited[1:]:
            distance = matrix.distance(current_node, candidate + 1)
            if distance < nearest_distance:
                nearest = candidate
                nearest_distance = distance
        order.append(nearest)
        unvisited.remove(nearest)
        current_node = nearest + 1

    return order


def two_opt(order: Sequence[int], matrix: DistanceMatrix) -> tuple[list[int], int]:
    """Improve ``order`` with 2-opt moves until a full pass finds nothing better.

    Each candidate reverses the stops between two cut points of the closed
    tour. The start point stays fixed, so a cut right after it lets the first
    stop move as well. Any strict improvement is adopted immediately and the
    scan continues on the new tour.

    Returns the improved order and the number of passes that improved it.
    """
    best = list(order)
    best_distance = tour_distance(best, matrix)
    n = len(best)
    improving_passes = 0

    improved = True
    while improved:
        improved = False
        for i in range(-1, n - 1):
            for j in range(i + 2, n):
                candidate = best[: i + 1] + best[i + 1 : j + 1][::-1] + best[j + 1 :]
                candidate_distance = tour_distance(candidate, matrix)
                if candidate_distance < best_distance:
                    best = candidate
                    best_distance = candidate_distance
                    improved = True
        if improved:
            improving_passes += 1

    return best, improving_passes


def optimize_tour(
    start: GeoPoint,
    stops: Sequence[GeoPoint],
    distance_matrix: DistanceMatrix | None = None,
) -> OptimizationResult:
    """Order ``stops`` to minimise the round trip from ``start``.

    When ``distance_matrix`` is omitted, great-circle distances in metres are
    used. A supplied matrix must cover the start point plus every stop.
    """
    points = [start, *stops]
    for index, point in enumerate(points):
        if not isinstance(point, GeoPoint):
            label = "start" if index == 0 else f"stop {index - 1}"
            raise ValueError(f"{label} is not a resolved coordinate: {point!r}")

    if distance_matrix is None:
        matrix = build_haversine_matrix(points)
    else:
        distance_matrix.require_size(len(points))
        matrix = distance_matrix

    if not stops:
        return OptimizationResult(order=[], total_distance=0.0)

    if len(stops) == 1:
        round_trip = matrix.distance(0, 1) + matrix.distance(1, 0)
        return OptimizationResult(order=[0], total_distance=round_trip, nearest_neighbor_distance=round_trip)

    initial = nearest_neighbor_order(matrix)
    initial_distance = tour_distance(initial, matrix)
    improved, passes = two_opt(initial, matrix)
    total = tour_distance(improved, matrix)

    logger.debug(
        f"Optimized {len(stops)} stops: nearest neighbour {initial_distance:.0f} -> "
        f"{total:.0f} after {passes} improving 2-opt passes"
    )
    return OptimizationResult(
        order=improved,
        total_distance=total,
        nearest_neighbor_distance=initial_distance,
        improvement_passes=passes,
    )

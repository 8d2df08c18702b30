"""Re-planning a running tour when a client is not at home."""

from __future__ import annotations

import logging
from typing import Sequence, TypeVar

from ...models.domain import AbsentStrategy, GeoPoint
from ..geospatial import haversine_m
from .distance import DistanceMatrix
from .models import ReoptimizationResult
from .optimizer import optimize_tour

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _detour_m(current_position: GeoPoint, ordered: Sequence[GeoPoint], absent: GeoPoint, position: int) -> float:
    previous = current_position if position == 0 else ordered[position - 1]
    following = ordered[position] if position < len(ordered) else current_position
    return haversine_m(previous, absent) + haversine_m(absent, following) - haversine_m(previous, following)


def reoptimize_after_absence(
    current_position: GeoPoint,
    remaining_stops: Sequence[GeoPoint],
    absent_stop: GeoPoint | None,
    strategy: AbsentStrategy | str,
    distance_matrix: DistanceMatrix | None = None,
) -> ReoptimizationResult:
    """Re-order the remaining stops from where the rep currently stands.

    ``after_next`` schedules the absent client right after the next visit,
    ``on_return`` puts it last before heading back, and ``another_day`` leaves
    today's order untouched and defers the client without re-optimizing.
    The insert position refers to ``order``; use :func:`splice_absent_stop`
    to build the final visit list.
    """
    strategy = AbsentStrategy(strategy)

    if strategy is AbsentStrategy.ANOTHER_DAY:
        logger.info("Absent client deferred to another day; remaining order kept")
        return ReoptimizationResult(
            order=list(range(len(remaining_stops))),
            absent_insert_position=None,
            strategy=strategy,
            total_distance=0.0,
            deferred=True,
        )

    if not isinstance(absent_stop, GeoPoint):
        raise ValueError(f"absent stop is not a resolved coordinate: {absent_stop!r}")

    optimized = optimize_tour(current_position, remaining_stops, distance_matrix)
    if strategy is AbsentStrategy.AFTER_NEXT:
        position = min(1, len(optimized.order))
    else:
        position = len(optimized.order)

    ordered_points = [remaining_stops[index] for index in optimized.order]
    extra = _detour_m(current_position, ordered_points, absent_stop, position)
    logger.info(
        f"Re-optimized {len(remaining_stops)} remaining stops ({strategy.value}); "
        f"absent client goes to position {position}, detour {extra:.0f} m"
    )
    return ReoptimizationResult(
        order=optimized.order,
        absent_insert_position=position,
        strategy=strategy,
        total_distance=optimized.total_distance,
        extra_distance_meters=extra,
    )


def splice_absent_stop(items: Sequence[T], absent: T, position: int | None) -> list[T]:
    """Return a new list with ``absent`` inserted at ``position``.

    A ``None`` position means the visit was deferred and is left out.
    """
    spliced = list(items)
    if position is None:
        return spliced
    if position < 0 or position > len(spliced):
        raise ValueError(f"insert position {position} outside 0..{len(spliced)}")
    spliced.insert(position, absent)
    return spliced

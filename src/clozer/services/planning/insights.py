"""Portfolio progress helpers."""

from __future__ import annotations

import math
from typing import AbstractSet, Sequence

from ...models.domain import Stop
from .models import PortfolioInsights
from .zones import cluster_by_zone, sub_zone


def select_unvisited(stops: Sequence[Stop], visited_ids: AbstractSet[str]) -> list[Stop]:
    """Clients that still need a visit and can be placed on a tour."""
    return [stop for stop in stops if stop.id not in visited_ids and stop.is_geocoded]


def _next_action(total: int, visited: int, pending: int, not_geocoded: int, completion_rate: int) -> str:
    if total == 0:
        return "Import your client file to get started."
    if not_geocoded > 0:
        return f"{not_geocoded} clients have no location. Fix their addresses or run geocoding."
    if pending == 0 and visited > 0:
        return "Congratulations! Every client has been visited. Import new clients."
    if completion_rate < 25:
        return f"{pending} clients to visit. Launch an optimized tour to get going!"
    if completion_rate < 75:
        return f"Good progress! {pending} clients left. Keep going with the remaining zones."
    return f"Almost done! Only {pending} clients left to visit."


def compute_insights(stops: Sequence[Stop], visited_ids: AbstractSet[str]) -> PortfolioInsights:
    total = len(stops)
    visited_stops = [stop for stop in stops if stop.id in visited_ids]
    not_geocoded = sum(1 for stop in stops if not stop.is_geocoded)
    pending_stops = select_unvisited(stops, visited_ids)
    completion_rate = math.floor(len(visited_stops) / total * 100 + 0.5) if total else 0

    visited_per_zone: dict[str, int] = {}
    for stop in visited_stops:
        zone = sub_zone(stop.postal_code, stop.city_name)
        visited_per_zone[zone] = visited_per_zone.get(zone, 0) + 1

    most_visited_zone = None
    most_visits = 0
    for zone, count in visited_per_zone.items():
        if count > most_visits:
            most_visited_zone, most_visits = zone, count

    return PortfolioInsights(
        total_clients=total,
        visited_clients=len(visited_stops),
        pending_clients=len(pending_stops),
        not_geocoded_clients=not_geocoded,
        completion_rate=completion_rate,
        most_visited_zone=most_visited_zone,
        suggested_next_action=_next_action(
            total, len(visited_stops), len(pending_stops), not_geocoded, completion_rate
        ),
        pending_per_zone={zone: len(members) for zone, members in cluster_by_zone(pending_stops).items()},
    )

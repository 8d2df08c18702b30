"""Daily planning services."""

from .capacity import estimate_completion, max_stops_per_day
from .insights import compute_insights, select_unvisited
from .planner import generate_daily_plan
from .zones import cluster_by_zone, coarse_zone, sub_zone

__all__ = [
    "generate_daily_plan",
    "max_stops_per_day",
    "estimate_completion",
    "cluster_by_zone",
    "coarse_zone",
    "sub_zone",
    "compute_insights",
    "select_unvisited",
]

"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ...models.domain import AbsentStrategy


@dataclass(slots=True)
class OptimizationResult:
    order: List[int]
    total_distance: float
    nearest_neighbor_distance: float = 0.0
    improvement_passes: int = 0


@dataclass(slots=True)
class ReoptimizationResult:
    order: List[int]
    absent_insert_position: Optional[int]
    strategy: AbsentStrategy
    total_distance: float
    extra_distance_meters: float = 0.0
    deferred: bool = False


@dataclass(slots=True)
class TourLeg:
    stop_id: str
    sequence: int
    distance_from_previous_m: float
    duration_from_previous_s: float
    estimated_arrival: Optional[datetime] = None


@dataclass(slots=True)
class OptimizedTour:
    legs: List[TourLeg]
    return_distance_m: float
    return_duration_s: float
    total_distance_m: float
    total_duration_s: float
    distance_source: str
    excluded_stop_ids: List[str] = field(default_factory=list)
    estimated_end_time: Optional[datetime] = None

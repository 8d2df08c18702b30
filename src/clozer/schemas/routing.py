"""Tour routing request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import AbsentStrategy, AvailabilityProfile, GeoPoint, Stop


class GeoPointModel(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)

    def to_domain(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)


class StopModel(BaseModel):
    id: str
    lat: Optional[float] = Field(None, ge=-90.0, le=90.0)
    lng: Optional[float] = Field(None, ge=-180.0, le=180.0)
    postal_code: str = ""
    city_name: str = ""
    availability: AvailabilityProfile = AvailabilityProfile.UNSPECIFIED
    name: Optional[str] = None

    def to_domain(self) -> Stop:
        return Stop(
            id=self.id,
            lat=self.lat,
            lng=self.lng,
            postal_code=self.postal_code,
            city_name=self.city_name,
            availability=self.availability,
            name=self.name,
        )

    @classmethod
    def from_domain(cls, stop: Stop) -> "StopModel":
        return cls(
            id=stop.id,
            lat=stop.lat,
            lng=stop.lng,
            postal_code=stop.postal_code,
            city_name=stop.city_name,
            availability=stop.availability,
            name=stop.name,
        )


class TourOptimizationRequest(BaseModel):
    start: Optional[GeoPointModel] = Field(default=None, description="Defaults to the configured depot.")
    stops: List[StopModel]
    use_road_distances: bool = Field(
        default=True,
        description="Ask the routing service for road distances; great-circle estimates are used otherwise.",
    )
    departure_time: Optional[datetime] = Field(default=None, description="Enables per-stop arrival estimates.")
    visit_duration_minutes: Optional[int] = Field(default=None, ge=0)
    include_geometry: bool = Field(default=False, description="Attach the road polyline when OSRM is configured.")


class TourLegModel(BaseModel):
    stop_id: str
    sequence: int
    distance_from_previous_m: float
    duration_from_previous_s: float
    estimated_arrival: Optional[datetime] = None


class TourOptimizationResponse(BaseModel):
    ordered_stop_ids: List[str]
    legs: List[TourLegModel]
    total_distance_m: float
    total_duration_s: float
    return_distance_m: float
    return_duration_s: float
    distance_source: str
    excluded_stop_ids: List[str]
    estimated_end_time: Optional[datetime] = None
    route_geometry: Optional[str] = Field(default=None, description="Encoded polyline of the closed tour.")


class ReoptimizationRequest(BaseModel):
    current_position: GeoPointModel
    remaining_stops: List[StopModel]
    absent_stop: StopModel
    strategy: AbsentStrategy
    use_road_distances: bool = True


class ReoptimizationResponse(BaseModel):
    visit_order: List[str] = Field(..., description="Remaining visits with the absent client re-inserted.")
    absent_insert_position: Optional[int]
    strategy: AbsentStrategy
    deferred: bool
    total_distance_m: float
    extra_distance_m: float
    extra_minutes: int
    excluded_stop_ids: List[str]


class CompletionRequest(BaseModel):
    remaining_stop_count: int = Field(..., ge=0)
    remaining_travel_seconds: float = Field(..., ge=0.0)
    avg_visit_minutes: Optional[float] = Field(default=None, ge=0.0)
    day_end_time: Optional[datetime] = Field(default=None, description="Defaults to today's configured end of day.")
    current_time: Optional[datetime] = Field(default=None, description="Defaults to the server clock.")


class CompletionResponse(BaseModel):
    can_complete: bool
    estimated_end_time: datetime
    stops_that_fit: int
    available_minutes: float
    needed_minutes: float

"""Geospatial helper functions.

Distances are expressed in metres throughout the package; kilometres only
appear where values are rendered for people.
"""

from __future__ import annotations

import math

from ..models.domain import GeoPoint

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Compute the great-circle distance between two points in metres."""

    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def meters_to_km(meters: float) -> float:
    return meters / 1000.0


def travel_minutes(distance_m: float, speed_kmh: float) -> float:
    """Convert a driving distance in metres to minutes at a constant speed."""
    if speed_kmh <= 0:
        raise ValueError("speed_kmh must be positive")
    if distance_m <= 0:
        return 0.0
    return meters_to_km(distance_m) / speed_kmh * 60.0

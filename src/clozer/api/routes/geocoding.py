"""Geocoding endpoints."""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, status

from ...schemas.geocoding import GeocodeRequest, GeocodeResponse
from ...services.geocoding import NominatimClient

router = APIRouter(prefix="/geocoding", tags=["geocoding"])


@lru_cache(maxsize=1)
def get_geocoder() -> NominatimClient:
    """Shared client so every request goes through the same rate limiter."""
    return NominatimClient()


@router.post("/search", response_model=GeocodeResponse, status_code=status.HTTP_200_OK)
def search(payload: GeocodeRequest) -> GeocodeResponse:
    outcome = get_geocoder().geocode_smart(payload.address, payload.postal_code, payload.city)
    result = outcome.result
    return GeocodeResponse(
        found=result is not None,
        lat=result.lat if result else None,
        lng=result.lng if result else None,
        display_name=result.display_name if result else None,
        confidence=result.confidence if result else None,
        variant_used=outcome.variant_used,
        variant_index=outcome.variant_index,
        total_variants=outcome.total_variants,
        is_fallback=outcome.is_fallback,
    )

"""Geocoding request/response schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class GeocodeRequest(BaseModel):
    address: str = ""
    postal_code: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)


class GeocodeResponse(BaseModel):
    found: bool
    lat: Optional[float] = None
    lng: Optional[float] = None
    display_name: Optional[str] = None
    confidence: Optional[float] = None
    variant_used: Optional[str] = None
    variant_index: int
    total_variants: int
    is_fallback: bool

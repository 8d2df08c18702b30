"""Geocoding services."""

from .address import address_variants, extract_street_number, sanitize_address
from .client import GeocodingResult, NominatimClient, RateLimiter, SmartGeocodingResult

__all__ = [
    "address_variants",
    "extract_street_number",
    "sanitize_address",
    "GeocodingResult",
    "NominatimClient",
    "RateLimiter",
    "SmartGeocodingResult",
]

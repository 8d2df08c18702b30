"""Nominatim (OpenStreetMap) geocoding client."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from ...config import settings
from ...models.domain import GeoPoint
from .address import address_variants

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GeocodingResult:
    lat: float
    lng: float
    display_name: str
    confidence: float

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)


@dataclass(slots=True)
class SmartGeocodingResult:
    result: Optional[GeocodingResult]
    variant_used: Optional[str]
    variant_index: int
    total_variants: int
    is_fallback: bool


class RateLimiter:
    """Enforces a minimum interval between consecutive calls to :meth:`wait`."""

    def __init__(
        self,
        min_interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.min_interval_seconds = min_interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None
        self._lock = threading.Lock()

    def wait(self) -> float:
        """Block until the next call is allowed; returns the time slept."""
        slept = 0.0
        with self._lock:
            if self._last_call is not None:
                elapsed = self._clock() - self._last_call
                if elapsed < self.min_interval_seconds:
                    slept = self.min_interval_seconds - elapsed
                    self._sleep(slept)
            self._last_call = self._clock()
        return slept


class NominatimClient:
    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        country_codes: str | None = None,
        timeout: float = 10.0,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.nominatim_url
        self.user_agent = user_agent or settings.nominatim_user_agent
        self.country_codes = country_codes or settings.geocode_country_codes
        self.timeout = timeout
        self.rate_limiter = rate_limiter or RateLimiter(settings.geocode_min_interval_seconds)
        self.transport = transport

    def search(self, query: str) -> GeocodingResult | None:
        """Geocode a free-text query; ``None`` when nothing matches or the service fails."""
        self.rate_limiter.wait()
        params = {
            "q": query,
            "format": "json",
            "limit": "1",
            "countrycodes": self.country_codes,
            "addressdetails": "1",
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(self.base_url, params=params, headers={"User-Agent": self.user_agent})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Geocoding request failed for {query!r}: {e}")
            return None

        if not isinstance(data, list) or not data:
            if isinstance(data, dict) and data.get("error"):
                logger.warning(f"Geocoding service error for {query!r}: {data['error']}")
            return None

        match = data[0]
        try:
            return GeocodingResult(
                lat=float(match["lat"]),
                lng=float(match["lon"]),
                display_name=match.get("display_name", ""),
                confidence=float(match.get("importance") or 0.5),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Unexpected geocoding payload for {query!r}: {e}")
            return None

    def geocode(self, address: str, postal_code: str, city: str) -> GeocodingResult | None:
        """Single lookup of the address as written."""
        parts = [part for part in (address.strip(), f"{postal_code} {city}".strip()) if part]
        return self.search(", ".join([*parts, "France"]))

    def geocode_smart(
        self,
        address: str,
        postal_code: str,
        city: str,
        region_hint: str | None = None,
    ) -> SmartGeocodingResult:
        """Try address variants from most to least precise until one resolves."""
        variants = address_variants(address, postal_code, city, region_hint or settings.geocode_region_hint)
        for index, variant in enumerate(variants):
            result = self.search(variant)
            if result is not None:
                if index > 0:
                    logger.info(f"Geocoded {address!r} using fallback variant {index + 1}/{len(variants)}")
                return SmartGeocodingResult(
                    result=result,
                    variant_used=variant,
                    variant_index=index,
                    total_variants=len(variants),
                    is_fallback=index > 0,
                )

        logger.warning(f"No geocoding match for {address!r}, {postal_code} {city}")
        return SmartGeocodingResult(
            result=None,
            variant_used=None,
            variant_index=-1,
            total_variants=len(variants),
            is_fallback=False,
        )

"""HTTP client for the OSRM table service (road distance matrices)."""

from __future__ import annotations

import logging
import time
from typing import Sequence

import httpx

from ...config import settings
from ...models.domain import GeoPoint
from .distance import DistanceMatrix

logger = logging.getLogger(__name__)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            transport=self.transport,
        )

    def _url(self, service: str, coordinates: Sequence[tuple[float, float]]) -> str:
        if len(coordinates) < 2:
            raise ValueError(f"At least two coordinates are required for OSRM {service}.")
        # OSRM expects "lon,lat;lon,lat;..."
        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        return f"{self.base_url}/{service}/v1/{self.profile}/{coordinate_str}"

    def table(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Get the distance/duration matrix for ``(lat, lon)`` coordinates.

        Row and column 0 correspond to the first coordinate.
        """
        data = self._get_json(self._url("table", coordinates), {"annotations": "distance,duration"})
        if "durations" not in data or "distances" not in data:
            raise ValueError("OSRM response missing durations/distances.")
        return data

    def route(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Road route through the ``(lat, lon)`` waypoints, in the given order.

        The payload keeps OSRM's shape; ``routes[0]`` carries ``distance`` (m),
        ``duration`` (s) and a polyline ``geometry``.
        """
        params = {"overview": "full", "geometries": "polyline", "steps": "false"}
        data = self._get_json(self._url("route", coordinates), params)
        if not data.get("routes"):
            raise ValueError("OSRM response contains no route.")
        return data

    def _get_json(self, url: str, params: dict) -> dict:
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    if data.get("code") != "Ok":
                        raise ValueError(f"OSRM request failed: {data.get('message', data.get('code'))}")
                    return data
                except (httpx.TimeoutException, httpx.ConnectError, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Failed to reach OSRM service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
                except (httpx.HTTPError, ValueError):
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
        finally:
            client.close()


def build_coordinate_list(start: GeoPoint, stops: Sequence[GeoPoint]) -> list[tuple[float, float]]:
    """Coordinates in matrix order: start point first, then the stops."""
    return [(start.lat, start.lng), *((stop.lat, stop.lng) for stop in stops)]


def fetch_distance_matrix(
    client: OSRMClient | None,
    start: GeoPoint,
    stops: Sequence[GeoPoint],
) -> DistanceMatrix | None:
    """Road distance matrix for a tour, or ``None`` when it cannot be obtained.

    Callers fall back to great-circle estimates on ``None``.
    """
    if client is None or not stops:
        return None
    try:
        table = client.table(build_coordinate_list(start, stops))
        matrix = DistanceMatrix.from_table(table)
        matrix.require_size(len(stops) + 1)
        return matrix
    except (ConnectionError, ValueError, httpx.HTTPError) as e:
        logger.warning(f"OSRM table request failed: {e}. Using haversine fallback.")
        return None


def fetch_route_geometry(client: OSRMClient | None, start: GeoPoint, ordered_stops: Sequence[GeoPoint]) -> str | None:
    """Encoded polyline of the closed tour start -> stops -> start, or ``None``."""
    if client is None or not ordered_stops:
        return None
    waypoints = [*build_coordinate_list(start, ordered_stops), (start.lat, start.lng)]
    try:
        return client.route(waypoints)["routes"][0].get("geometry")
    except (ConnectionError, ValueError, httpx.HTTPError) as e:
        logger.warning(f"OSRM route request failed: {e}. Returning tour without geometry.")
        return None


def check_health(base_url: str | None = None, transport: httpx.BaseTransport | None = None) -> bool:
    """Check OSRM reachability with a minimal two-point table request."""
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    try:
        client = OSRMClient(base_url=base, max_retries=0, timeout=5.0, transport=transport)
        data = client.table([(45.6486, 0.1556), (45.6950, 0.3300)])
        return isinstance(data.get("durations"), list)
    except (ConnectionError, ValueError, httpx.HTTPError):
        return False

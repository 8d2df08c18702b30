import pytest
from fastapi.testclient import TestClient

from clozer.main import create_app
from clozer.services.geocoding.client import GeocodingResult, SmartGeocodingResult


def _stop(sid: str, lat: float | None, lng: float | None, postal_code: str = "16000", city: str = "Angoulême") -> dict:
    return {"id": sid, "lat": lat, "lng": lng, "postal_code": postal_code, "city_name": city}


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    from clozer.services.routing import service as routing_service

    monkeypatch.setattr(routing_service.settings, "osrm_base_url", None)
    return TestClient(create_app())


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}
    osrm = api_client.get("/api/health/osrm").json()
    assert osrm["configured"] is False
    assert osrm["fallback"] == "haversine"


def test_optimize_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/tours/optimize",
        json={
            "start": {"lat": 0, "lng": 0},
            "stops": [_stop("far", 0, 10), _stop("near", 0, 1), _stop("farther", 0, 11)],
            "departure_time": "2026-10-19T08:30:00",
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["ordered_stop_ids"][0] == "near"
    assert payload["distance_source"] == "haversine"
    assert [leg["sequence"] for leg in payload["legs"]] == [1, 2, 3]
    assert payload["legs"][0]["estimated_arrival"].startswith("2026-10-19T")


def test_optimize_endpoint_rejects_out_of_range_coordinates(api_client: TestClient):
    response = api_client.post("/api/tours/optimize", json={"stops": [_stop("bad", 95.0, 0.0)]})

    assert response.status_code == 422


def test_reoptimize_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/tours/reoptimize",
        json={
            "current_position": {"lat": 45.6486, "lng": 0.1556},
            "remaining_stops": [_stop("R1", 45.70, 0.20), _stop("R2", 45.65, 0.16)],
            "absent_stop": _stop("ABS", 45.66, 0.17),
            "strategy": "after_next",
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["visit_order"][1] == "ABS"
    assert payload["strategy"] == "after_next"


def test_reoptimize_endpoint_rejects_unroutable_absent_client(api_client: TestClient):
    response = api_client.post(
        "/api/tours/reoptimize",
        json={
            "current_position": {"lat": 45.6486, "lng": 0.1556},
            "remaining_stops": [_stop("R1", 45.70, 0.20)],
            "absent_stop": _stop("ABS", None, None),
            "strategy": "on_return",
        },
    )

    assert response.status_code == 400


def test_completion_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/tours/completion",
        json={
            "remaining_stop_count": 3,
            "remaining_travel_seconds": 3600,
            "avg_visit_minutes": 30,
            "current_time": "2026-10-19T16:00:00",
            "day_end_time": "2026-10-19T18:00:00",
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["can_complete"] is False
    assert payload["stops_that_fit"] == 2


def test_completion_endpoint_rejects_mixed_timezones(api_client: TestClient):
    response = api_client.post(
        "/api/tours/completion",
        json={
            "remaining_stop_count": 1,
            "remaining_travel_seconds": 60,
            "current_time": "2026-10-19T16:00:00+02:00",
            "day_end_time": "2026-10-19T18:00:00",
        },
    )

    assert response.status_code == 400


def test_daily_plan_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/planning/daily",
        json={
            "stops": [
                _stop("A", 45.65, 0.156),
                _stop("B", 45.66, 0.157),
                _stop("C", 45.75, -0.63, "17100", "Saintes"),
            ],
            "plan_date": "2026-10-19",
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["total_to_visit"] == 3
    assert payload["per_zone_counts"] == {"Angoulême Centre": 2, "Charente-Maritime Nord": 1}
    assert payload["suggestions"][0]["priority"] == "high"
    assert len(payload["suggestions"]) <= 5


def test_daily_plan_endpoint_rejects_short_postal_code(api_client: TestClient):
    response = api_client.post(
        "/api/planning/daily",
        json={"stops": [_stop("A", 45.65, 0.156, postal_code="16")]},
    )

    assert response.status_code == 400


def test_insights_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/planning/insights",
        json={"stops": [_stop("A", 45.65, 0.156), _stop("B", 45.66, 0.157)], "visited_ids": ["A", "B"]},
    )

    assert response.status_code == 200
    assert response.json()["completion_rate"] == 100


def test_geocoding_endpoint(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from clozer.api.routes import geocoding as geocoding_routes

    class DummyGeocoder:
        def geocode_smart(self, address, postal_code, city):
            return SmartGeocodingResult(
                result=GeocodingResult(lat=45.65, lng=0.16, display_name="Angoulême", confidence=0.6),
                variant_used=f"{postal_code} {city}, France",
                variant_index=2,
                total_variants=4,
                is_fallback=True,
            )

    monkeypatch.setattr(geocoding_routes, "get_geocoder", lambda: DummyGeocoder())

    response = api_client.post(
        "/api/geocoding/search",
        json={"address": "12 rue des Écoles", "postal_code": "16000", "city": "Angoulême"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["found"] is True
    assert payload["is_fallback"] is True
    assert payload["lat"] == pytest.approx(45.65)

from datetime import date, time

import pytest

from clozer.models.domain import AvailabilityProfile, GeoPoint, PriorityTier, Stop, WorkingHoursConfig
from clozer.services.geospatial import haversine_m
from clozer.services.planning import planner
from clozer.services.planning.models import PlannerOptions
from clozer.services.planning.planner import (
    ALL_VISITED_MESSAGE,
    NO_CAPACITY_MESSAGE,
    estimate_tour_duration,
    generate_daily_plan,
)

DEPOT = GeoPoint(45.6486, 0.1556)
PLAN_DATE = date(2026, 10, 19)


def _config(**overrides) -> WorkingHoursConfig:
    values = dict(
        start_time=time(8, 30),
        end_time=time(18, 0),
        lunch_start=time(12, 0),
        lunch_end=time(13, 30),
        default_visit_duration_minutes=30,
        late_profile_threshold=time(17, 30),
    )
    values.update(overrides)
    return WorkingHoursConfig(**values)


def _options(**overrides) -> PlannerOptions:
    values = dict(
        depot_label="Angoulême",
        max_suggestions=5,
        medium_priority_min_stops=5,
        travel_overhead_per_stop_minutes=15,
        average_speed_kmh=50.0,
        late_profile_threshold=time(17, 30),
    )
    values.update(overrides)
    return PlannerOptions(**values)


def _stops(prefix: str, count: int, postal_code: str, city: str, lat: float, lng: float, **extra) -> list[Stop]:
    return [
        Stop(
            id=f"{prefix}-{i}",
            lat=lat + 0.002 * i,
            lng=lng,
            postal_code=postal_code,
            city_name=city,
            **extra,
        )
        for i in range(count)
    ]


def _plan(stops, config=None):
    return generate_daily_plan(stops, DEPOT, config or _config(), plan_date=PLAN_DATE, options=_options())


def test_empty_plan_skips_clustering(monkeypatch):
    def _fail(*args, **kwargs):
        raise AssertionError("clustering should not run without clients")

    monkeypatch.setattr(planner, "cluster_by_zone", _fail)

    plan = _plan([])

    assert plan.suggestions == []
    assert plan.total_to_visit == 0
    assert plan.recommendation == ALL_VISITED_MESSAGE
    assert plan.max_stops_per_day == 10


def test_stops_without_coordinates_are_not_planned():
    plan = _plan([Stop(id="x", lat=None, lng=None, postal_code="16000", city_name="Angoulême")])

    assert plan.total_to_visit == 0
    assert plan.suggestions == []
    assert plan.recommendation != ALL_VISITED_MESSAGE
    assert "1 clients" in plan.recommendation
    assert "geocoding" in plan.recommendation


def test_plan_puts_proximity_tour_first_then_densest_zone():
    stops = (
        _stops("ang", 6, "16000", "Angoulême", 45.650, 0.156)
        + _stops("sai", 2, "17100", "Saintes", 45.746, -0.633)
        + _stops("far", 1, "99999", "Nowhereville", 45.900, 0.500)
    )

    plan = _plan(stops)

    assert plan.total_to_visit == 9
    assert plan.per_zone_counts == {"Angoulême Centre": 6, "Charente-Maritime Nord": 2, "Nowhereville": 1}
    assert [s.zone_label for s in plan.suggestions] == [
        "Near Angoulême",
        "Angoulême Centre",
        "Charente-Maritime Nord",
        "Nowhereville",
    ]
    proximity, densest, second, third = plan.suggestions
    assert proximity.priority is PriorityTier.HIGH
    assert proximity.name == "Tour Near Angoulême"
    assert proximity.visit_count == 9
    assert densest.priority is PriorityTier.HIGH
    assert "6 clients" in densest.rationale
    assert second.priority is PriorityTier.LOW
    assert third.priority is PriorityTier.LOW
    assert all(s.plan_date == PLAN_DATE for s in plan.suggestions)
    assert all(s.total_distance_meters > 0 for s in plan.suggestions)
    assert "A single day is enough" in plan.recommendation


def test_second_zone_with_enough_clients_is_medium_priority():
    stops = _stops("a", 6, "16000", "Angoulême", 45.650, 0.156) + _stops("b", 5, "16100", "Balzac", 45.700, 0.120)

    plan = _plan(stops)

    zone_tiers = {s.zone_label: s.priority for s in plan.suggestions[1:]}
    assert zone_tiers == {"Angoulême Centre": PriorityTier.HIGH, "Nord Angoulême": PriorityTier.MEDIUM}


def test_plan_caps_suggestion_count():
    stops = []
    for offset, code in enumerate(["16000", "16100", "16200", "16300", "16400", "16500", "16600"]):
        stops += _stops(code, 7 - offset, code, "Ville", 45.60 + offset * 0.05, 0.15)

    plan = _plan(stops)

    assert len(plan.suggestions) == 5
    assert plan.suggestions[0].zone_label == "Near Angoulême"
    assert plan.suggestions[1].zone_label == "Angoulême Centre"


def test_large_portfolio_needs_several_days():
    stops = _stops("ang", 23, "16000", "Angoulême", 45.600, 0.156)

    plan = _plan(stops)

    assert plan.max_stops_per_day == 10
    assert all(s.visit_count <= 10 for s in plan.suggestions)
    assert "3 days" in plan.recommendation
    assert '"Angoulême Centre"' in plan.recommendation


def test_clients_reachable_only_after_work_go_last():
    late = _stops("late", 1, "16000", "Angoulême", 45.649, 0.156, availability=AvailabilityProfile.WORKING_HOURS_ONLY)
    regular = _stops("reg", 3, "16000", "Angoulême", 45.660, 0.156)

    plan = _plan(late + regular)

    zone = plan.suggestions[1]
    assert [stop.id for stop in zone.stops][-1] == "late-0"
    assert zone.deferred_stop_count == 1
    assert "1 client(s)" in zone.rationale
    assert "17:30" in zone.rationale


def test_no_capacity_gives_no_suggestions():
    config = _config(start_time=time(8, 0), end_time=time(9, 0), lunch_start=time(7, 0), lunch_end=time(12, 0))

    plan = _plan(_stops("a", 3, "16000", "Angoulême", 45.65, 0.156), config=config)

    assert plan.suggestions == []
    assert plan.total_to_visit == 3
    assert plan.recommendation == NO_CAPACITY_MESSAGE


def test_estimate_tour_duration_adds_driving_and_visits():
    assert estimate_tour_duration(50_000, 2, 30, 50.0) == 120
    assert estimate_tour_duration(0, 3, 30, 50.0) == 90


def test_estimate_tour_distance_is_zero_without_stops():
    assert planner.estimate_tour_distance([], DEPOT) == pytest.approx(0.0)


def test_preview_distance_visits_after_hours_clients_last():
    late = Stop(
        id="late",
        lat=45.6486,
        lng=0.1356,
        postal_code="16000",
        city_name="Angoulême",
        availability=AvailabilityProfile.WORKING_HOURS_ONLY,
    )
    first = Stop(id="r1", lat=45.6986, lng=0.1556, postal_code="16000", city_name="Angoulême")
    second = Stop(id="r2", lat=45.7486, lng=0.1556, postal_code="16000", city_name="Angoulême")

    plan = _plan([late, first, second])

    zone = plan.suggestions[1]
    assert [stop.id for stop in zone.stops] == ["r1", "r2", "late"]
    expected = (
        haversine_m(DEPOT, first.point)
        + haversine_m(first.point, second.point)
        + haversine_m(second.point, late.point)
        + haversine_m(late.point, DEPOT)
    )
    assert zone.total_distance_meters == pytest.approx(expected, abs=0.1)

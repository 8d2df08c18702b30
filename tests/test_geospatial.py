import pytest

from clozer.models.domain import GeoPoint
from clozer.services.geospatial import haversine_m, meters_to_km, travel_minutes


def test_haversine_is_zero_for_same_point():
    point = GeoPoint(45.6486, 0.1556)

    assert haversine_m(point, point) == 0


def test_haversine_is_symmetric():
    angouleme = GeoPoint(45.6486, 0.1556)
    cognac = GeoPoint(45.6958, -0.3287)

    assert haversine_m(angouleme, cognac) == pytest.approx(haversine_m(cognac, angouleme))
    assert haversine_m(angouleme, cognac) == pytest.approx(38_000, rel=0.05)


def test_one_degree_of_longitude_on_equator():
    assert haversine_m(GeoPoint(0, 0), GeoPoint(0, 1)) == pytest.approx(111_195, rel=1e-3)


def test_travel_minutes():
    assert travel_minutes(50_000, 50.0) == pytest.approx(60.0)
    assert travel_minutes(0, 50.0) == 0
    with pytest.raises(ValueError):
        travel_minutes(1000, 0)


def test_meters_to_km():
    assert meters_to_km(1500) == pytest.approx(1.5)

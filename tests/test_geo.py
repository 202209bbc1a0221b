import math

import pytest

from schemas import GeoPoint
from services.geo import EARTH_RADIUS_KM, distance, proximity


def test_same_point_is_zero():
    p = GeoPoint(lat=37.7749, lng=-122.4194)
    assert distance(p, p) == 0.0
    assert distance({"lat": 10.5, "lng": 20.25}, {"lat": 10.5, "lng": 20.25}) == 0.0


def test_nyc_to_la():
    d = distance({"lat": 40.7128, "lng": -74.0060}, {"lat": 34.0522, "lng": -118.2437})
    assert d == pytest.approx(3936, rel=0.05)


def test_london_to_paris():
    d = distance(GeoPoint(lat=51.5074, lng=-0.1278), GeoPoint(lat=48.8566, lng=2.3522))
    assert d == pytest.approx(344, rel=0.05)


def test_antipodal_is_half_circumference():
    d = distance(GeoPoint(lat=0, lng=0), GeoPoint(lat=0, lng=180))
    assert d == pytest.approx(math.pi * EARTH_RADIUS_KM, rel=1e-9)
    assert d == pytest.approx(20015, rel=1e-3)


def test_out_of_range_angles_still_finite():
    d = distance(GeoPoint(lat=95, lng=400), GeoPoint(lat=-120, lng=-370))
    assert d is not None and math.isfinite(d) and d >= 0


@pytest.mark.parametrize(
    "bad",
    [None, {}, {"lat": 1.0}, {"lat": "1", "lng": 2}, {"lat": float("nan"), "lng": 0}, {"lat": True, "lng": 0}],
)
def test_invalid_point_is_undefined(bad):
    assert distance(bad, {"lat": 0, "lng": 0}) is None
    assert distance({"lat": 0, "lng": 0}, bad) is None


def test_proximity_bounds_and_decay():
    assert proximity(0, 1000) == 1.0
    assert 0 < proximity(5000, 1000) < proximity(100, 1000) < 1
    assert proximity(None, 1000) == 0.0


def test_larger_decay_never_lowers_proximity():
    for d in (1, 50, 500, 5000):
        assert proximity(d, 100) < proximity(d, 1000) < proximity(d, 10_000)

import math

import numpy as np

from gpxaudit.geo import EARTH_RADIUS_M, consecutive_distances_m, haversine_m, haversine_m_array
from gpxaudit.points import Point


def test_haversine_one_degree_along_meridian():
    expected = EARTH_RADIUS_M * math.pi / 180.0
    assert math.isclose(haversine_m(0.0, 0.0, 1.0, 0.0), expected, rel_tol=1e-12)
    assert math.isclose(haversine_m(10.0, 5.0, 11.0, 5.0), expected, rel_tol=1e-12)


def test_haversine_identical_points_is_zero_and_symmetric():
    assert haversine_m(45.0, 7.0, 45.0, 7.0) == 0.0
    d1 = haversine_m(48.8566, 2.3522, 51.5074, -0.1278)
    d2 = haversine_m(51.5074, -0.1278, 48.8566, 2.3522)
    assert math.isclose(d1, d2)
    # Paris-London is roughly 343 km
    assert 340_000 < d1 < 346_000


def test_haversine_antipodal_is_half_circumference():
    assert math.isclose(haversine_m(0.0, 0.0, 0.0, 180.0), math.pi * EARTH_RADIUS_M, rel_tol=1e-12)


def test_vectorized_matches_scalar():
    lat1 = np.array([0.0, 45.0, -33.9])
    lon1 = np.array([0.0, 7.0, 151.2])
    lat2 = np.array([1.0, 45.001, -37.8])
    lon2 = np.array([0.0, 7.001, 144.9])
    out = haversine_m_array(lat1, lon1, lat2, lon2)
    expected = [haversine_m(a, b, c, d) for a, b, c, d in zip(lat1, lon1, lat2, lon2)]
    np.testing.assert_allclose(out, expected, rtol=1e-9)


def test_consecutive_distances_keeps_zero_steps():
    pts = [
        Point(index=0, lat=0.0, lon=0.0),
        Point(index=1, lat=0.0, lon=0.0),
        Point(index=2, lat=1.0, lon=0.0),
    ]
    d = consecutive_distances_m(pts)
    assert d.shape == (2,)
    assert d[0] == 0.0
    assert math.isclose(d[1], EARTH_RADIUS_M * math.pi / 180.0, rel_tol=1e-12)
    assert consecutive_distances_m(pts[:1]).shape == (0,)

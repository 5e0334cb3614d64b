"""
Test configuration: makes `src` importable without an installed distribution and
provides a small factory for building point sequences.
"""

import os
import sys

import pytest


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)


@pytest.fixture
def make_points():
    """
    make_points([(lat, lon, time_raw), ...]) -> list[Point] with indices 0..n-1.
    """
    from gpxaudit.points import Point

    def _make(rows):
        return [Point(index=i, lat=lat, lon=lon, time_raw=t) for i, (lat, lon, t) in enumerate(rows)]

    return _make

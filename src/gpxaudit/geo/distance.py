from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from gpxaudit.points import Point

EARTH_RADIUS_M = 6_371_000.0  # mean Earth radius


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance in meters between two lat/lon points given in degrees.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def haversine_m_array(
    lat1: np.ndarray, lon1: np.ndarray, lat2: np.ndarray, lon2: np.ndarray
) -> np.ndarray:
    """
    Vectorized haversine over broadcastable arrays of degrees. Returns meters.
    """
    lat1 = np.asarray(lat1, dtype=float)
    lat2 = np.asarray(lat2, dtype=float)
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    d_phi = np.radians(lat2 - lat1)
    d_lambda = np.radians(np.asarray(lon2, dtype=float) - np.asarray(lon1, dtype=float))

    a = np.sin(d_phi / 2.0) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2.0) ** 2
    c = 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def consecutive_distances_m(points: Sequence[Point]) -> np.ndarray:
    """
    Distances between each point and the next one, length len(points)-1.
    Zero-length steps are kept; no filtering is applied here.
    """
    if len(points) < 2:
        return np.array([], dtype=float)
    lat = np.array([p.lat for p in points], dtype=float)
    lon = np.array([p.lon for p in points], dtype=float)
    return haversine_m_array(lat[:-1], lon[:-1], lat[1:], lon[1:])

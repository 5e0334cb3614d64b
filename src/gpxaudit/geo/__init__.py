"""Great-circle geometry on WGS84 latitude/longitude in degrees."""

from .distance import EARTH_RADIUS_M, consecutive_distances_m, haversine_m, haversine_m_array

__all__ = [
    "EARTH_RADIUS_M",
    "consecutive_distances_m",
    "haversine_m",
    "haversine_m_array",
]

from .core import Point, parse_timestamp_ms, points_from_dataframe, points_to_dataframe

__all__ = [
    "Point",
    "parse_timestamp_ms",
    "points_from_dataframe",
    "points_to_dataframe",
]

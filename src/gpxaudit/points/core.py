from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from pandas.errors import OutOfBoundsDatetime

from gpxaudit.errors import ValidationError

POINT_TYPES = ("wpt", "rtept", "trkpt")


def parse_timestamp_ms(time_raw: Optional[str]) -> Optional[float]:
    """
    Parse an ISO-8601 timestamp string to whole epoch milliseconds.

    Offset-aware instants are converted to UTC; naive instants are read as UTC.
    Sub-millisecond digits are rounded to the nearest millisecond.
    Returns None for absent, empty or unparseable input, for relative keywords
    such as "now" or "today", and for instants pandas cannot represent.
    """
    if time_raw is None:
        return None
    text = str(time_raw).strip()
    # ISO-8601 dates start with the year
    if not text or not text[0].isdigit():
        return None
    try:
        ts = pd.to_datetime(text, format="ISO8601", utc=True)
        if pd.isna(ts):
            return None
        ms = ts.as_unit("ms").asm8.astype("int64")
    except (ValueError, TypeError, OverflowError, OutOfBoundsDatetime):
        return None
    return float(ms)


@dataclass(frozen=True)
class Point:
    """
    One GPX point as handed over by the ingestion step.

    Fields:
      - index: position in the original document (audit events refer to it).
      - lat, lon: decimal degrees, validated to [-90, 90] / [-180, 180].
      - time_raw: timestamp text exactly as read, or None when absent.
      - ele: elevation in meters, if the source had one.
      - point_type: "wpt", "rtept" or "trkpt".
    """
    index: int
    lat: float
    lon: float
    time_raw: Optional[str] = None
    ele: Optional[float] = None
    point_type: str = "trkpt"

    def __post_init__(self) -> None:
        try:
            lat = float(self.lat)
            lon = float(self.lon)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                f"Point {self.index}: coordinates must be numeric, got lat={self.lat!r}, lon={self.lon!r}"
            ) from exc
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise ValidationError(f"Point {self.index}: coordinates must be finite (lat={lat}, lon={lon})")
        if lat < -90.0 or lat > 90.0:
            raise ValidationError(f"Point {self.index}: lat={lat} outside [-90, 90]")
        if lon < -180.0 or lon > 180.0:
            raise ValidationError(f"Point {self.index}: lon={lon} outside [-180, 180]")
        if self.point_type not in POINT_TYPES:
            raise ValidationError(f"point_type must be one of {POINT_TYPES}, got {self.point_type!r}")

        time_raw = self.time_raw
        if time_raw is not None:
            if not isinstance(time_raw, str):
                raise ValidationError(f"Point {self.index}: time_raw must be a string or None")
            time_raw = time_raw.strip() or None

        ele = self.ele
        if ele is not None:
            ele = float(ele)
            if not math.isfinite(ele):
                ele = None

        # Store normalized values back (frozen dataclass workaround)
        object.__setattr__(self, "index", int(self.index))
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lon", lon)
        object.__setattr__(self, "time_raw", time_raw)
        object.__setattr__(self, "ele", ele)

    @property
    def has_time(self) -> bool:
        return self.time_raw is not None

    def timestamp_ms(self) -> Optional[float]:
        """Epoch milliseconds, or None if the timestamp is absent or unparseable."""
        return parse_timestamp_ms(self.time_raw)


def points_from_dataframe(
    df: pd.DataFrame,
    *,
    lat_col: str = "lat",
    lon_col: str = "lon",
    time_col: Optional[str] = "time",
    ele_col: Optional[str] = None,
    type_col: Optional[str] = None,
    index_col: Optional[str] = None,
) -> List[Point]:
    """
    Build Points from a per-point DataFrame, keeping row order.

    Args:
        df: One row per point, in document order.
        lat_col, lon_col: Coordinate columns in decimal degrees.
        time_col: Optional column with raw timestamp text. NaN/None means absent.
            Pandas datetime columns are accepted and rendered to ISO text.
        ele_col: Optional elevation column.
        type_col: Optional column with the GPX point type.
        index_col: Optional column with original indices (defaults to row position).

    Returns:
        List of Point in row order.
    """
    cols = [lat_col, lon_col, time_col, ele_col, type_col, index_col]
    missing = [c for c in cols if c is not None and c not in df.columns]
    if missing:
        raise KeyError(f"DataFrame missing columns: {missing}")

    lats = df[lat_col].to_numpy(dtype=float)
    lons = df[lon_col].to_numpy(dtype=float)
    indices = (
        df[index_col].to_numpy(dtype=int) if index_col is not None else np.arange(len(df), dtype=int)
    )

    times: Sequence[Optional[str]]
    if time_col is None:
        times = [None] * len(df)
    else:
        col = df[time_col]
        if pd.api.types.is_datetime64_any_dtype(col):
            times = [None if pd.isna(v) else v.isoformat() for v in col]
        else:
            times = [None if pd.isna(v) else str(v) for v in col]

    eles: Sequence[Optional[float]]
    if ele_col is None:
        eles = [None] * len(df)
    else:
        eles = [None if pd.isna(v) else float(v) for v in df[ele_col]]

    types = list(df[type_col].astype(str)) if type_col is not None else ["trkpt"] * len(df)

    return [
        Point(
            index=int(indices[i]),
            lat=float(lats[i]),
            lon=float(lons[i]),
            time_raw=times[i],
            ele=eles[i],
            point_type=types[i],
        )
        for i in range(len(df))
    ]


def points_to_dataframe(points: Sequence[Point]) -> pd.DataFrame:
    """
    Long-form per-point table.
    Columns: index, point_type, lat, lon, ele, time_raw, time_ms
    """
    return pd.DataFrame(
        {
            "index": [p.index for p in points],
            "point_type": [p.point_type for p in points],
            "lat": [p.lat for p in points],
            "lon": [p.lon for p in points],
            "ele": [p.ele for p in points],
            "time_raw": [p.time_raw for p in points],
            "time_ms": [p.timestamp_ms() for p in points],
        },
        columns=["index", "point_type", "lat", "lon", "ele", "time_raw", "time_ms"],
    )

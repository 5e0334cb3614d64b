from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

import numpy as np
import pandas as pd


def frozen_series(values: Iterable[float]) -> np.ndarray:
    """1D float array with the write flag cleared."""
    arr = np.array(values if isinstance(values, np.ndarray) else list(values), dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"Expected 1D series, got shape {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class TimeDistancePair:
    """One consecutive pair with a positive time step and a positive distance."""

    dt_sec: float
    dd_meters: float

    def to_dict(self) -> Dict[str, float]:
        return {"dtSec": float(self.dt_sec), "ddMeters": float(self.dd_meters)}


@dataclass(frozen=True)
class NonPositiveDeltaEvent:
    """A timestamped point whose time did not advance past the previous timestamped point."""

    index: int
    prev_index: int
    delta_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return {"index": int(self.index), "prevIndex": int(self.prev_index), "delta": float(self.delta_ms)}


@dataclass(frozen=True)
class AuditResult:
    """
    Everything the sampling audit derives from one point sequence.

    Series (read-only float arrays, every element finite and > 0):
      - time_deltas_ms: positive steps between consecutive timestamped points.
      - distance_deltas_m_geometry_only: every consecutive pair, timestamps ignored.
      - distance_deltas_m_time_conditioned: one distance per positive time step.
      - distance_deltas_m: the primary series (time-conditioned when the track
        shows time progression, geometry-only otherwise).

    Flags:
      - has_valid_timestamps: at least one point carries a parseable timestamp.
      - has_time_progression: at least one positive time step was observed.
    """

    time_deltas_ms: np.ndarray
    distance_deltas_m_geometry_only: np.ndarray
    distance_deltas_m_time_conditioned: np.ndarray
    time_distance_pairs: Tuple[TimeDistancePair, ...] = ()

    has_valid_timestamps: bool = False
    has_time_progression: bool = False

    min_delta_ms: Optional[float] = None
    max_delta_ms: Optional[float] = None
    median_delta_ms: Optional[float] = None

    # time-delta pass
    timestamped_points_count: int = 0
    consecutive_timestamp_pairs_count: int = 0
    rejected_timestamp_pairs_delta_leq_zero: int = 0
    non_positive_time_delta_events: Tuple[NonPositiveDeltaEvent, ...] = ()

    # geometry-only distance pass
    consecutive_point_pairs_considered: int = 0
    rejected_distance_invalid_or_zero: int = 0

    # joint pass
    joint_consecutive_pairs_inspected: int = 0
    joint_pairs_with_both_timestamps: int = 0
    joint_rejected_missing_timestamp: int = 0
    joint_rejected_non_positive_dt: int = 0
    joint_rejected_invalid_or_zero_distance: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "time_deltas_ms", frozen_series(self.time_deltas_ms))
        object.__setattr__(
            self, "distance_deltas_m_geometry_only", frozen_series(self.distance_deltas_m_geometry_only)
        )
        object.__setattr__(
            self, "distance_deltas_m_time_conditioned", frozen_series(self.distance_deltas_m_time_conditioned)
        )
        object.__setattr__(self, "time_distance_pairs", tuple(self.time_distance_pairs))
        object.__setattr__(self, "non_positive_time_delta_events", tuple(self.non_positive_time_delta_events))

        if self.has_time_progression != (len(self.time_deltas_ms) > 0):
            raise ValueError("has_time_progression must be True exactly when time_deltas_ms is non-empty")
        if self.time_distance_pairs and not self.has_time_progression:
            raise ValueError("time_distance_pairs require has_time_progression")

    @property
    def distance_deltas_m(self) -> np.ndarray:
        """Primary distance series."""
        if self.has_time_progression:
            return self.distance_deltas_m_time_conditioned
        return self.distance_deltas_m_geometry_only

    @property
    def distance_mode(self) -> str:
        return "time_conditioned" if self.has_time_progression else "geometry_only"

    @property
    def total_delta_count(self) -> int:
        return int(len(self.time_deltas_ms))

    @property
    def time_deltas_sec(self) -> np.ndarray:
        return self.time_deltas_ms / 1000.0

    def pairs_frame(self) -> pd.DataFrame:
        """Joint pairs as a table with columns dt_sec, dd_meters."""
        return pd.DataFrame(
            {
                "dt_sec": [p.dt_sec for p in self.time_distance_pairs],
                "dd_meters": [p.dd_meters for p in self.time_distance_pairs],
            },
            columns=["dt_sec", "dd_meters"],
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable view using the exported field names."""
        return {
            "timeDeltasMs": self.time_deltas_ms.tolist(),
            "totalDeltaCount": self.total_delta_count,
            "minDeltaMs": self.min_delta_ms,
            "maxDeltaMs": self.max_delta_ms,
            "medianDeltaMs": self.median_delta_ms,
            "distanceDeltasM": self.distance_deltas_m.tolist(),
            "distanceDeltasMGeometryOnly": self.distance_deltas_m_geometry_only.tolist(),
            "distanceDeltasMTimeConditioned": self.distance_deltas_m_time_conditioned.tolist(),
            "timeDistancePairs": [p.to_dict() for p in self.time_distance_pairs],
            "hasTimeProgression": bool(self.has_time_progression),
            "hasValidTimestamps": bool(self.has_valid_timestamps),
            "timestampedPointsCount": self.timestamped_points_count,
            "consecutiveTimestampPairsCount": self.consecutive_timestamp_pairs_count,
            "rejectedTimestampPairsDeltaLeqZero": self.rejected_timestamp_pairs_delta_leq_zero,
            "consecutivePointPairsConsidered": self.consecutive_point_pairs_considered,
            "rejectedDistanceInvalidOrZero": self.rejected_distance_invalid_or_zero,
            "jointConsecutivePairsInspected": self.joint_consecutive_pairs_inspected,
            "jointPairsWithBothTimestamps": self.joint_pairs_with_both_timestamps,
            "jointRejectedMissingTimestamp": self.joint_rejected_missing_timestamp,
            "jointRejectedNonPositiveDt": self.joint_rejected_non_positive_dt,
            "jointRejectedInvalidOrZeroDistance": self.joint_rejected_invalid_or_zero_distance,
            "nonPositiveTimeDeltaEvents": [e.to_dict() for e in self.non_positive_time_delta_events],
        }

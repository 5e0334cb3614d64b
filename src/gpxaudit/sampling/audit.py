from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from gpxaudit.errors import ValidationError
from gpxaudit.geo import consecutive_distances_m
from gpxaudit.points import Point

from .types import AuditResult, NonPositiveDeltaEvent, TimeDistancePair

logger = logging.getLogger(__name__)


@dataclass
class _TimePass:
    deltas_ms: List[float] = field(default_factory=list)
    # index of the current point for every positive delta
    positive_indices: List[int] = field(default_factory=list)
    events: List[NonPositiveDeltaEvent] = field(default_factory=list)
    timestamped_points: int = 0
    consecutive_pairs: int = 0
    rejected_leq_zero: int = 0


@dataclass
class _JointPass:
    pairs: List[TimeDistancePair] = field(default_factory=list)
    inspected: int = 0
    both_timestamps: int = 0
    rejected_missing: int = 0
    rejected_dt: int = 0
    rejected_distance: int = 0


def _validate_points(points) -> Tuple[Point, ...]:
    if not isinstance(points, (list, tuple)):
        raise ValidationError(f"points must be a list or tuple of Point, got {type(points).__name__}")
    for i, p in enumerate(points):
        if not isinstance(p, Point):
            raise ValidationError(f"points[{i}] is not a Point (got {type(p).__name__})")
    return tuple(points)


def _valid_distance_mask(d: np.ndarray) -> np.ndarray:
    return np.isfinite(d) & (d > 0)


def median_of(values: Sequence[float]) -> Optional[float]:
    """
    Median of a numeric series; the mean of the two central elements for even
    length. Returns None for an empty series.
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return None
    return float(np.median(arr))


def _time_pass(stamps: Sequence[Optional[float]]) -> _TimePass:
    """
    Walk timestamped points in order, pairing each with the previous timestamped point.
    Points without a parseable timestamp neither contribute nor move the anchor.
    """
    out = _TimePass()
    prev_ms: Optional[float] = None
    prev_index: Optional[int] = None
    for i, ms in enumerate(stamps):
        if ms is None:
            continue
        out.timestamped_points += 1
        if prev_ms is not None:
            out.consecutive_pairs += 1
            delta = ms - prev_ms
            if delta > 0:
                out.deltas_ms.append(delta)
                out.positive_indices.append(i)
            else:
                out.rejected_leq_zero += 1
                out.events.append(NonPositiveDeltaEvent(index=i, prev_index=prev_index, delta_ms=delta))
        prev_ms = ms
        prev_index = i
    return out


def _joint_pass(stamps: Sequence[Optional[float]], steps_m: np.ndarray) -> _JointPass:
    """
    Pairs of neighbouring points (iteration order) that both carry a timestamp.
    A pair may be rejected for dt and for distance at the same time; both counters move.
    """
    out = _JointPass()
    for i in range(1, len(stamps)):
        out.inspected += 1
        cur_ms, prev_ms = stamps[i], stamps[i - 1]
        if cur_ms is None or prev_ms is None:
            out.rejected_missing += 1
            continue
        out.both_timestamps += 1
        dt_sec = (cur_ms - prev_ms) / 1000.0
        dd = float(steps_m[i - 1])
        dd_ok = bool(np.isfinite(dd)) and dd > 0
        if dt_sec > 0 and dd_ok:
            out.pairs.append(TimeDistancePair(dt_sec=dt_sec, dd_meters=dd))
            continue
        if dt_sec <= 0:
            out.rejected_dt += 1
        if not dd_ok:
            out.rejected_distance += 1
    return out


def audit_sampling(points: Sequence[Point]) -> AuditResult:
    """
    Observational audit of temporal and spatial sampling in a GPX point sequence.

    Steps, in order:
      1) parse every timestamp once and note whether any is usable;
      2) collect positive time deltas between consecutive timestamped points,
         which decides whether the track shows time progression;
      3) derive distance deltas: geometry-only over every neighbouring pair, and
         time-conditioned for each positive time step (distance from the point
         just before it in iteration order);
      4) when the track shows time progression, collect joint (dt, distance)
         pairs over neighbouring points that are both timestamped;
      5) summarize the time deltas (min, max, median).

    The input is never mutated or reordered. Data-quality problems are counted
    in the result, not raised.

    Args:
        points: Points in document order.

    Returns:
        AuditResult with all series, flags and counters.
    """
    pts = _validate_points(points)
    n = len(pts)

    stamps = [p.timestamp_ms() for p in pts]
    has_valid_timestamps = any(ms is not None for ms in stamps)

    tp = _time_pass(stamps)
    has_time_progression = len(tp.deltas_ms) > 0

    steps_m = consecutive_distances_m(pts)
    geometry_only = steps_m[_valid_distance_mask(steps_m)]
    rejected_distance = int(len(steps_m) - len(geometry_only))

    if tp.positive_indices:
        cond_steps = steps_m[np.asarray(tp.positive_indices, dtype=int) - 1]
        time_conditioned = cond_steps[_valid_distance_mask(cond_steps)]
    else:
        time_conditioned = np.array([], dtype=float)

    jp = _joint_pass(stamps, steps_m) if has_time_progression else _JointPass()

    if has_valid_timestamps and not has_time_progression:
        logger.info("Timestamps present but never advance; distance deltas use geometry-only mode.")

    deltas = np.asarray(tp.deltas_ms, dtype=float)
    result = AuditResult(
        time_deltas_ms=deltas,
        distance_deltas_m_geometry_only=geometry_only,
        distance_deltas_m_time_conditioned=time_conditioned,
        time_distance_pairs=tuple(jp.pairs),
        has_valid_timestamps=has_valid_timestamps,
        has_time_progression=has_time_progression,
        min_delta_ms=float(deltas.min()) if deltas.size else None,
        max_delta_ms=float(deltas.max()) if deltas.size else None,
        median_delta_ms=median_of(deltas),
        timestamped_points_count=tp.timestamped_points,
        consecutive_timestamp_pairs_count=tp.consecutive_pairs,
        rejected_timestamp_pairs_delta_leq_zero=tp.rejected_leq_zero,
        non_positive_time_delta_events=tuple(tp.events),
        consecutive_point_pairs_considered=max(n - 1, 0),
        rejected_distance_invalid_or_zero=rejected_distance,
        joint_consecutive_pairs_inspected=jp.inspected,
        joint_pairs_with_both_timestamps=jp.both_timestamps,
        joint_rejected_missing_timestamp=jp.rejected_missing,
        joint_rejected_non_positive_dt=jp.rejected_dt,
        joint_rejected_invalid_or_zero_distance=jp.rejected_distance,
    )

    logger.debug(
        "sampling audit: points=%d timestamped=%d time_deltas=%d rejected_leq_zero=%d",
        n,
        tp.timestamped_points,
        result.total_delta_count,
        tp.rejected_leq_zero,
    )
    logger.debug(
        "sampling audit: mode=%s distance_deltas=%d (geometry-only %d, rejected %d) joint_pairs=%d",
        result.distance_mode,
        len(result.distance_deltas_m),
        len(geometry_only),
        rejected_distance,
        len(jp.pairs),
    )
    return result

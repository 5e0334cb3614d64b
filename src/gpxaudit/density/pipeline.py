from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from gpxaudit.errors import ValidationError
from gpxaudit.sampling import AuditResult

from .kde import as_numeric_series, bandwidth_bounds, compute_kde, detect_peaks, log_positive, silverman_bandwidth
from .kernel import check_bandwidth
from .types import BandwidthRange, DensityConfig, DensityCurve, KDEPoint


@dataclass(frozen=True)
class SeriesDensity:
    """
    Density estimate of one delta series together with the inputs that produced it.

    bandwidth_log is the kernel width used (natural-log units); bandwidth_linear
    is exp(bandwidth_log), the multiplicative spread it represents in data units.
    """

    values: np.ndarray
    curve: DensityCurve
    peaks: Tuple[KDEPoint, ...]
    bandwidth_log: float
    bounds: Optional[BandwidthRange]
    n_used: int

    @property
    def bandwidth_linear(self) -> float:
        return math.exp(self.bandwidth_log)

    @property
    def is_empty(self) -> bool:
        return self.curve.is_empty


def density_for_series(
    values,
    bandwidth: Optional[float] = None,
    config: Optional[DensityConfig] = None,
) -> SeriesDensity:
    """
    KDE, peaks and bandwidth range for one series.

    If bandwidth is None, Silverman's rule on ln(values) is used (with the
    config fallback for degenerate input).
    """
    cfg = config or DensityConfig()
    arr = as_numeric_series(values, "values")
    if bandwidth is None:
        h = silverman_bandwidth(arr, fallback=cfg.fallback_bandwidth, factor=cfg.silverman_factor)
    else:
        h = check_bandwidth(bandwidth)

    curve = compute_kde(arr, h, cfg.grid_size)
    arr.setflags(write=False)
    return SeriesDensity(
        values=arr,
        curve=curve,
        peaks=tuple(detect_peaks(curve)),
        bandwidth_log=h,
        bounds=bandwidth_bounds(arr, h),
        n_used=int(log_positive(arr).size),
    )


def log_bandwidth_from_linear(bandwidth_linear: float) -> float:
    """
    Log-space bandwidth for a width given as a multiplicative spread in data
    units (h = ln(bandwidth_linear)). Values <= 1 map to h <= 0 and are rejected.
    """
    linear = check_bandwidth(bandwidth_linear)
    return check_bandwidth(math.log(linear))


def _resolve_bandwidth(bandwidth: Optional[float], bandwidth_linear: Optional[float], name: str) -> Optional[float]:
    if bandwidth is not None and bandwidth_linear is not None:
        raise ValidationError(f"give either {name}_bandwidth or {name}_bandwidth_linear, not both")
    if bandwidth_linear is not None:
        return log_bandwidth_from_linear(bandwidth_linear)
    return bandwidth


@dataclass(frozen=True)
class SamplingDensities:
    """Densities of the time deltas (seconds) and primary distance deltas (meters)."""

    time: SeriesDensity
    distance: SeriesDensity
    pairs: pd.DataFrame
    distance_mode: str


def sampling_densities(
    audit: AuditResult,
    *,
    time_bandwidth: Optional[float] = None,
    distance_bandwidth: Optional[float] = None,
    config: Optional[DensityConfig] = None,
    time_bandwidth_linear: Optional[float] = None,
    distance_bandwidth_linear: Optional[float] = None,
) -> SamplingDensities:
    """
    Density estimates for the series of one sampling audit.

    Time deltas are converted from milliseconds to seconds before estimation;
    the distance series is the audit's primary one (time-conditioned or
    geometry-only). Bandwidth overrides are in natural-log units; the
    *_bandwidth_linear forms take the spread in data units and use its ln.

    Args:
        audit: Result of audit_sampling.
        time_bandwidth: Optional log-space bandwidth for the time series.
        distance_bandwidth: Optional log-space bandwidth for the distance series.
        config: Grid size and fallback settings.
        time_bandwidth_linear: Optional linear-unit width for the time series (> 1).
        distance_bandwidth_linear: Optional linear-unit width for the distance series (> 1).

    Returns:
        SamplingDensities with per-series curves, peaks and bandwidth ranges,
        plus the joint (dt, distance) pairs as a DataFrame.
    """
    if not isinstance(audit, AuditResult):
        raise ValidationError(f"audit must be an AuditResult, got {type(audit).__name__}")
    cfg = config or DensityConfig()
    h_time = _resolve_bandwidth(time_bandwidth, time_bandwidth_linear, "time")
    h_distance = _resolve_bandwidth(distance_bandwidth, distance_bandwidth_linear, "distance")
    return SamplingDensities(
        time=density_for_series(audit.time_deltas_sec, h_time, cfg),
        distance=density_for_series(audit.distance_deltas_m, h_distance, cfg),
        pairs=audit.pairs_frame(),
        distance_mode=audit.distance_mode,
    )

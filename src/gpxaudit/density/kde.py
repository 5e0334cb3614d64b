from __future__ import annotations

import logging
import numbers
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd
from scipy.signal import argrelextrema

from gpxaudit.errors import ValidationError

from .kernel import check_bandwidth, gaussian_kernel, gaussian_normalization
from .types import (
    DEFAULT_FALLBACK_BANDWIDTH,
    DEFAULT_GRID_SIZE,
    SILVERMAN_FACTOR,
    BandwidthRange,
    DensityCurve,
    KDEPoint,
)

logger = logging.getLogger(__name__)

MIN_BANDWIDTH = 1e-3
MIN_BANDWIDTH_STEP = 1e-4


def as_numeric_series(data, name: str = "data") -> np.ndarray:
    """
    Convert a list/tuple/1D array/Series of real numbers to a float array.

    NaN and infinities are numbers and pass through; strings, None, booleans and
    other objects raise ValidationError instead of being dropped.
    """
    if isinstance(data, pd.Series):
        data = data.to_numpy()
    if isinstance(data, np.ndarray):
        if data.ndim != 1:
            raise ValidationError(f"{name} must be 1D, got shape {data.shape}")
        if data.dtype.kind in "iuf":
            return data.astype(float)
        if data.dtype.kind != "O":
            raise ValidationError(f"{name} must hold real numbers, got dtype {data.dtype}")
        data = data.tolist()
    if not isinstance(data, (list, tuple)):
        raise ValidationError(f"{name} must be a sequence of numbers, got {type(data).__name__}")
    for i, v in enumerate(data):
        if isinstance(v, (bool, np.bool_)) or not isinstance(v, numbers.Real):
            raise ValidationError(f"{name}[{i}] is not a real number: {v!r}")
    return np.asarray(data, dtype=float)


def _check_grid_size(grid_size) -> int:
    if isinstance(grid_size, bool) or not isinstance(grid_size, numbers.Integral):
        raise ValidationError(f"grid_size must be an integer, got {grid_size!r}")
    if grid_size < 1:
        raise ValidationError(f"grid_size must be >= 1, got {grid_size}")
    return int(grid_size)


def log_positive(data, name: str = "data") -> np.ndarray:
    """ln of the finite, strictly positive entries of data (others are dropped)."""
    values = as_numeric_series(data, name)
    valid = values[np.isfinite(values) & (values > 0)]
    return np.log(valid)


def compute_kde(data, bandwidth: float, grid_size: int = DEFAULT_GRID_SIZE) -> DensityCurve:
    """
    Gaussian kernel density estimate of ln(data).

        y_i = 1 / (n h sqrt(2 pi)) * sum_j exp(-0.5 * ((x_i - ln d_j) / h)^2)

    The grid has grid_size evenly spaced points covering exactly
    [min(ln d), max(ln d)], without padding. With a single distinct value the
    interval has zero width and every grid point sits on that value.

    Args:
        data: Real numbers; only finite values > 0 are used.
        bandwidth: Kernel width h in natural-log units, finite and > 0.
        grid_size: Number of evaluation points.

    Returns:
        DensityCurve of length grid_size, or an empty curve when no usable value remains.

    Raises:
        InvalidBandwidth: bandwidth is not finite and positive.
        ValidationError: data is not a sequence of real numbers, or grid_size < 1.
    """
    h = check_bandwidth(bandwidth)
    m = _check_grid_size(grid_size)
    logs = log_positive(data)
    if logs.size == 0:
        return DensityCurve.empty(h)

    grid = np.linspace(logs.min(), logs.max(), m)
    kernel = gaussian_kernel(h)
    weights = kernel(grid[:, None] - logs[None, :])  # (m, n)
    y = weights.sum(axis=1) * gaussian_normalization(int(logs.size), h)
    return DensityCurve(x_log=grid, x_linear=np.exp(grid), y=y, bandwidth=h)


def peak_indices(y) -> np.ndarray:
    """
    Indices i (1 <= i <= len(y) - 2) with y[i] > y[i-1] and y[i] > y[i+1].
    Endpoints and flat tops are never peaks.
    """
    arr = as_numeric_series(y, "y")
    if arr.size < 3:
        return np.array([], dtype=int)
    return argrelextrema(arr, np.greater, mode="clip")[0].astype(int)


def detect_peaks(curve: DensityCurve) -> List[KDEPoint]:
    """Strict local maxima of a density curve, in grid order."""
    if len(curve) < 3:
        return []
    return [curve[int(i)] for i in peak_indices(curve.y)]


def silverman_bandwidth(
    data,
    *,
    fallback: float = DEFAULT_FALLBACK_BANDWIDTH,
    factor: float = SILVERMAN_FACTOR,
) -> float:
    """
    Silverman's rule in log space: h = factor * s * n^(-1/5), with s the sample
    standard deviation (ddof=1) of ln(data).

    Fewer than two usable values returns `fallback`. A zero or non-finite spread
    is replaced by `fallback` before applying the rule.
    """
    logs = log_positive(data)
    n = int(logs.size)
    if n < 2:
        logger.debug("silverman_bandwidth: n=%d < 2, using fallback %s", n, fallback)
        return float(fallback)
    s = float(np.std(logs, ddof=1))
    if not np.isfinite(s) or s <= 0:
        logger.debug("silverman_bandwidth: degenerate spread s=%s, substituting %s", s, fallback)
        s = float(fallback)
    return float(factor * s * n ** (-0.2))


def bandwidth_bounds(data, bandwidth: float) -> Optional[BandwidthRange]:
    """
    Interactive range for a log-space bandwidth over ln(data).

    Base range is [max(1e-3, r/50), r/5] with r the log-space extent of the data,
    widened to include `bandwidth` (down to max(1e-3, h/2), up to 2h) when it
    falls outside. Returns None when there is no usable data.
    """
    h = check_bandwidth(bandwidth)
    logs = log_positive(data)
    if logs.size == 0:
        return None
    r = float(logs.max() - logs.min())
    h_min = max(MIN_BANDWIDTH, r / 50.0)
    h_max = r / 5.0
    if h < h_min:
        h_min = max(MIN_BANDWIDTH, h * 0.5)
    if h > h_max:
        h_max = h * 2.0
    step = max(MIN_BANDWIDTH_STEP, (h_max - h_min) / 1000.0)
    return BandwidthRange(h_min=h_min, h_max=h_max, step=step)


def kde_with_peaks(
    data, bandwidth: float, grid_size: int = DEFAULT_GRID_SIZE
) -> Tuple[DensityCurve, List[KDEPoint]]:
    """compute_kde followed by detect_peaks."""
    curve = compute_kde(data, bandwidth, grid_size)
    return curve, detect_peaks(curve)


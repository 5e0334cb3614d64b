from __future__ import annotations

import math
import numbers

import numpy as np

from gpxaudit.errors import InvalidBandwidth

_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


def check_bandwidth(bandwidth) -> float:
    """Return bandwidth as float, or raise InvalidBandwidth unless finite and > 0."""
    if isinstance(bandwidth, (bool, np.bool_)) or not isinstance(bandwidth, numbers.Real):
        raise InvalidBandwidth(f"bandwidth must be a real number, got {type(bandwidth).__name__}")
    h = float(bandwidth)
    if not math.isfinite(h) or h <= 0:
        raise InvalidBandwidth(f"bandwidth must be finite and positive, got {h}")
    return h


def gaussian_kernel(bandwidth: float):
    """
    Gaussian kernel: weight = exp(-0.5 * (u / h)^2).
    Returns a callable that maps offsets u -> unnormalized weights.
    """

    h = check_bandwidth(bandwidth)
    inv_h2 = 1.0 / (h * h)

    def _fn(u: np.ndarray) -> np.ndarray:
        return np.exp(-0.5 * (u * u) * inv_h2)

    return _fn


def gaussian_normalization(n: int, bandwidth: float) -> float:
    """1 / (n * h * sqrt(2 pi)), so that the summed kernel integrates to 1."""
    h = check_bandwidth(bandwidth)
    if n < 1:
        raise ValueError("n must be >= 1.")
    return _INV_SQRT_2PI / (n * h)

"""
Log-space Gaussian kernel density estimation for delta series.

All estimation happens on ln(x) for finite x > 0; curves carry both the log
position and its linear value. Functions are pure; KDESession is the only
stateful object and belongs to the caller.
"""

from .types import (
    DEFAULT_FALLBACK_BANDWIDTH,
    DEFAULT_GRID_SIZE,
    BandwidthRange,
    DensityConfig,
    DensityCurve,
    KDEPoint,
)
from .kernel import check_bandwidth, gaussian_kernel, gaussian_normalization
from .kde import (
    as_numeric_series,
    bandwidth_bounds,
    compute_kde,
    detect_peaks,
    kde_with_peaks,
    log_positive,
    peak_indices,
    silverman_bandwidth,
)
from .pipeline import (
    SamplingDensities,
    SeriesDensity,
    density_for_series,
    log_bandwidth_from_linear,
    sampling_densities,
)
from .session import KDESession

__all__ = [
    "DEFAULT_FALLBACK_BANDWIDTH",
    "DEFAULT_GRID_SIZE",
    "BandwidthRange",
    "DensityConfig",
    "DensityCurve",
    "KDEPoint",
    "KDESession",
    "SamplingDensities",
    "SeriesDensity",
    "as_numeric_series",
    "bandwidth_bounds",
    "check_bandwidth",
    "compute_kde",
    "density_for_series",
    "detect_peaks",
    "gaussian_kernel",
    "gaussian_normalization",
    "kde_with_peaks",
    "log_bandwidth_from_linear",
    "log_positive",
    "peak_indices",
    "sampling_densities",
    "silverman_bandwidth",
]

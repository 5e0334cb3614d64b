from .errors import GpxAuditError, InvalidBandwidth, ValidationError
from .points import Point, points_from_dataframe
from .sampling import AuditResult, audit_sampling
from .density import (
    DensityConfig,
    DensityCurve,
    KDESession,
    compute_kde,
    detect_peaks,
    sampling_densities,
    silverman_bandwidth,
)
from .io import audit_payloads

__all__ = [
    "AuditResult",
    "DensityConfig",
    "DensityCurve",
    "GpxAuditError",
    "InvalidBandwidth",
    "KDESession",
    "Point",
    "ValidationError",
    "audit_payloads",
    "audit_sampling",
    "compute_kde",
    "detect_peaks",
    "points_from_dataframe",
    "sampling_densities",
    "silverman_bandwidth",
]

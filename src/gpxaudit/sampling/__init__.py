"""
Sampling audit of GPX point sequences.

Derives time deltas, distance deltas (time-conditioned or geometry-only) and
joint time/distance pairs, counting every rejected pair instead of repairing
or reordering the input.
"""

from .types import AuditResult, NonPositiveDeltaEvent, TimeDistancePair
from .audit import audit_sampling, median_of

__all__ = [
    "AuditResult",
    "NonPositiveDeltaEvent",
    "TimeDistancePair",
    "audit_sampling",
    "median_of",
]

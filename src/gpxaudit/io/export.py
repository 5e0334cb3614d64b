from __future__ import annotations

from typing import Any, Dict, Iterable

import numpy as np

from gpxaudit.errors import ValidationError
from gpxaudit.sampling import AuditResult, TimeDistancePair

PAYLOAD_KINDS = ("time_deltas", "distance_deltas", "time_distance_pairs")


def series_payload(values: Iterable[float]) -> Dict[str, Any]:
    """{"deltas": [...], "count": n} for one delta series."""
    deltas = np.asarray(values if isinstance(values, np.ndarray) else list(values), dtype=float)
    return {"deltas": deltas.tolist(), "count": int(deltas.size)}


def pairs_payload(pairs: Iterable[TimeDistancePair]) -> Dict[str, Any]:
    """{"pairs": [{"dtSec", "ddMeters"}, ...], "count": n} for joint pairs."""
    rows = [p.to_dict() for p in pairs]
    return {"pairs": rows, "count": len(rows)}


def audit_payloads(audit: AuditResult) -> Dict[str, Dict[str, Any]]:
    """
    The three export documents of an audit, keyed by kind:
      time_deltas          (milliseconds)
      distance_deltas      (meters, primary series)
      time_distance_pairs  (seconds, meters)

    Values are plain lists, ints and floats, ready for json.dumps.
    """
    if not isinstance(audit, AuditResult):
        raise ValidationError(f"audit must be an AuditResult, got {type(audit).__name__}")
    return {
        "time_deltas": series_payload(audit.time_deltas_ms),
        "distance_deltas": series_payload(audit.distance_deltas_m),
        "time_distance_pairs": pairs_payload(audit.time_distance_pairs),
    }

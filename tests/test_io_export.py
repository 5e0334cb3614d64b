import json

import numpy as np
import pytest

from gpxaudit import io as gpx_io
from gpxaudit.errors import ValidationError
from gpxaudit.io import PAYLOAD_KINDS, audit_payloads, pairs_payload, series_payload
from gpxaudit.sampling import TimeDistancePair, audit_sampling


def _audit(make_points):
    rows = [
        (0.0, 0.0, "2024-05-01T12:00:00Z"),
        (0.0, 0.001, "2024-05-01T12:00:10Z"),
        (0.0, 0.002, "2024-05-01T12:00:10Z"),
        (0.0, 0.004, "2024-05-01T12:00:30Z"),
    ]
    return audit_sampling(make_points(rows))


def test_payload_shapes(make_points):
    audit = _audit(make_points)
    payloads = audit_payloads(audit)

    assert tuple(payloads) == PAYLOAD_KINDS
    assert payloads["time_deltas"] == {"deltas": [10_000.0, 20_000.0], "count": 2}
    assert payloads["distance_deltas"]["count"] == len(audit.distance_deltas_m)
    np.testing.assert_allclose(payloads["distance_deltas"]["deltas"], audit.distance_deltas_m)
    pairs = payloads["time_distance_pairs"]
    assert pairs["count"] == len(pairs["pairs"]) == 2
    assert pairs["pairs"][0]["dtSec"] == 10.0


def test_payloads_are_json_documents(make_points):
    payloads = audit_payloads(_audit(make_points))
    assert json.loads(json.dumps(payloads)) == payloads


def test_series_and_pairs_payload_helpers():
    assert series_payload([]) == {"deltas": [], "count": 0}
    assert series_payload(np.array([1.5, 2.0])) == {"deltas": [1.5, 2.0], "count": 2}
    p = pairs_payload([TimeDistancePair(dt_sec=1.0, dd_meters=3.0)])
    assert p == {"pairs": [{"dtSec": 1.0, "ddMeters": 3.0}], "count": 1}


def test_audit_payloads_rejects_other_inputs():
    with pytest.raises(ValidationError):
        audit_payloads({"timeDeltasMs": []})


def test_io_exposes_no_file_access():
    for name in ("write_payload", "save_audit_payloads", "load_series_payload", "load_pairs_payload"):
        assert not hasattr(gpx_io, name)

import math

import numpy as np
import pytest

from gpxaudit.density import (
    DensityConfig,
    KDESession,
    compute_kde,
    density_for_series,
    log_bandwidth_from_linear,
    sampling_densities,
    silverman_bandwidth,
)
from gpxaudit.errors import InvalidBandwidth, ValidationError
from gpxaudit.sampling import audit_sampling


def _track(make_points, seconds, lons):
    return make_points(
        [(0.0, lon, None if s is None else f"2024-05-01T12:{s // 60:02d}:{s % 60:02d}Z") for s, lon in zip(seconds, lons)]
    )


def test_density_for_series_defaults_to_silverman():
    values = [1.0, 2.0, 2.5, 3.0, 10.0]
    sd = density_for_series(values)

    assert sd.bandwidth_log == pytest.approx(silverman_bandwidth(values))
    assert sd.bandwidth_linear == pytest.approx(math.exp(sd.bandwidth_log))
    assert sd.n_used == 5
    assert len(sd.curve) == 200
    assert sd.bounds is not None
    np.testing.assert_allclose(sd.curve.y, compute_kde(values, sd.bandwidth_log).y)


def test_density_for_series_empty_input():
    sd = density_for_series([])
    assert sd.is_empty
    assert sd.peaks == ()
    assert sd.bounds is None
    assert sd.bandwidth_log == 1.0


def test_sampling_densities_uses_seconds_and_primary_distances(make_points):
    pts = _track(make_points, [0, 10, 20, 35, 45], [0.0, 0.001, 0.002, 0.004, 0.005])
    audit = audit_sampling(pts)
    out = sampling_densities(audit, config=DensityConfig(grid_size=50))

    assert out.distance_mode == "time_conditioned"
    assert len(out.time.curve) == 50
    assert out.time.curve.x_linear[0] == pytest.approx(10.0)
    assert out.time.curve.x_linear[-1] == pytest.approx(15.0)
    np.testing.assert_allclose(out.distance.values, audit.distance_deltas_m)
    assert list(out.pairs.columns) == ["dt_sec", "dd_meters"]
    assert len(out.pairs) == 4


def test_sampling_densities_bandwidth_overrides(make_points):
    pts = _track(make_points, [0, 5, 15, 20], [0.0, 0.001, 0.003, 0.004])
    audit = audit_sampling(pts)
    out = sampling_densities(audit, time_bandwidth=0.05, distance_bandwidth=0.2)
    assert out.time.bandwidth_log == 0.05
    assert out.distance.bandwidth_log == 0.2

    with pytest.raises(InvalidBandwidth):
        sampling_densities(audit, time_bandwidth=0.0)


def test_sampling_densities_linear_bandwidths(make_points):
    pts = _track(make_points, [0, 5, 15, 20], [0.0, 0.001, 0.003, 0.004])
    audit = audit_sampling(pts)
    out = sampling_densities(audit, time_bandwidth_linear=1.5, distance_bandwidth_linear=math.e)
    assert out.time.bandwidth_log == pytest.approx(math.log(1.5))
    assert out.time.bandwidth_linear == pytest.approx(1.5)
    assert out.distance.bandwidth_log == pytest.approx(1.0)

    same = sampling_densities(audit, time_bandwidth=math.log(1.5))
    np.testing.assert_allclose(out.time.curve.y, same.time.curve.y)

    with pytest.raises(ValidationError):
        sampling_densities(audit, time_bandwidth=0.4, time_bandwidth_linear=1.5)


@pytest.mark.parametrize("linear", [1.0, 0.5, 0.0, -2.0, float("nan")])
def test_linear_bandwidth_must_exceed_one(linear):
    with pytest.raises(InvalidBandwidth):
        log_bandwidth_from_linear(linear)


def test_sampling_densities_without_timestamps(make_points):
    pts = _track(make_points, [None, None, None], [0.0, 0.001, 0.003])
    out = sampling_densities(audit_sampling(pts))
    assert out.distance_mode == "geometry_only"
    assert out.time.is_empty
    assert not out.distance.is_empty
    assert out.pairs.empty


def test_sampling_densities_rejects_other_inputs():
    with pytest.raises(ValidationError):
        sampling_densities({"timeDeltasMs": [1.0]})


def test_session_recomputes_on_bandwidth_change():
    values = [1.0, 1.2, 1.4, 8.0, 9.0, 11.0]
    session = KDESession(values)
    default_h = session.bandwidth
    assert default_h == pytest.approx(silverman_bandwidth(values))
    y_default = session.curve.y.copy()

    curve = session.set_bandwidth(0.05)
    assert session.bandwidth == 0.05
    assert curve is session.curve
    assert not np.allclose(curve.y, y_default)
    assert len(session.peaks) >= 2

    session.reset_bandwidth()
    assert session.bandwidth == pytest.approx(default_h)
    np.testing.assert_allclose(session.curve.y, y_default)


def test_session_keeps_state_on_invalid_bandwidth():
    session = KDESession([1.0, 2.0, 3.0], bandwidth=0.3)
    before = session.curve
    with pytest.raises(InvalidBandwidth):
        session.set_bandwidth(-1.0)
    assert session.bandwidth == 0.3
    assert session.curve is before


def test_sessions_are_independent():
    a = KDESession([1.0, 2.0, 3.0], bandwidth=0.3, config=DensityConfig(grid_size=20))
    b = KDESession([10.0, 20.0, 30.0], bandwidth=0.3, config=DensityConfig(grid_size=20))
    a.set_bandwidth(0.9)
    assert b.bandwidth == 0.3
    assert b.curve.x_linear[0] == pytest.approx(10.0)

    b.set_values([5.0, 6.0])
    assert b.curve.x_linear[-1] == pytest.approx(6.0)
    assert a.curve.x_linear[-1] == pytest.approx(3.0)

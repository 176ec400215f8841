from __future__ import annotations

import pytest

from gesture_fit.tracking.fitter import FitResult
from gesture_fit.tracking.kinematics import (
    derive_motion,
    forecast_point,
    format_stats,
    sample_curve,
    tangent_segment,
)

PARABOLA = FitResult(c=0.0, b=0.0, a=0.01, t0=0)


def test_no_fit_defaults_to_zero_motion() -> None:
    stats = derive_motion(None, sample_count=2, t_last=10, system_velocity=0.25)
    assert not stats.has_fit
    assert stats.velocity == 0.0
    assert stats.acceleration == 0.0
    assert stats.system_velocity == 0.25
    assert stats.position is None
    assert stats.forecast is None
    assert stats.tangent is None


def test_derived_motion_at_last_sample() -> None:
    stats = derive_motion(PARABOLA, sample_count=4, t_last=30, system_velocity=0.5)
    assert stats.has_fit
    assert stats.position == pytest.approx(9.0)
    assert stats.velocity == pytest.approx(0.6)
    assert stats.acceleration == pytest.approx(0.02)
    assert stats.system_velocity == 0.5


def test_forecast_follows_the_curve() -> None:
    t, y = forecast_point(PARABOLA, 30, horizon=150)
    assert t == 180
    assert y == pytest.approx(0.01 * 180 * 180)


def test_tangent_is_linear_projection() -> None:
    (t0, y0), (t1, y1) = tangent_segment(PARABOLA, 30, horizon=150)
    assert (t0, y0) == (30, pytest.approx(9.0))
    assert t1 == 180
    assert y1 == pytest.approx(9.0 + 0.6 * 150)


def test_sample_curve() -> None:
    curve = sample_curve(PARABOLA, 0, 100, steps=100)
    assert curve.shape == (101, 2)
    assert curve[0].tolist() == pytest.approx([0.0, 0.0])
    assert curve[-1].tolist() == pytest.approx([100.0, 100.0])
    assert curve[50].tolist() == pytest.approx([50.0, 25.0])


def test_format_stats_units() -> None:
    lines = format_stats(derive_motion(PARABOLA, 4, 30, system_velocity=0.55))
    assert lines[0] == "Velocity: 600.0 px/s"
    assert lines[1] == "System velocity: 550.0 px/s"
    assert lines[2] == "Accel: 0.02000 px/ms^2"

    assert format_stats(derive_motion(None, 0, None)) == ["Velocity: 0 px/ms", "Accel: 0 px/ms^2"]

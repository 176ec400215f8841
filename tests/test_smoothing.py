from __future__ import annotations

import pytest

from gesture_fit.tracking.kalman import ConstantAccelerationKalman
from gesture_fit.tracking.smoothing import SimpleSmoother


def test_smoother_tracks_constant_velocity() -> None:
    smoother = SimpleSmoother(window_size=3)
    for t in range(0, 100, 10):
        smoother.update(t, 2.0 * t)
    assert smoother.get_velocity() == pytest.approx(2.0)
    assert smoother.get_position() == pytest.approx(2.0 * 80)


def test_smoother_ignores_same_instant_samples() -> None:
    smoother = SimpleSmoother(window_size=3)
    smoother.observe(0, 1.0)
    smoother.observe(0, 5.0)
    assert smoother.get_velocity() == 0.0


def test_smoother_reset() -> None:
    smoother = SimpleSmoother()
    smoother.observe(0, 0.0)
    smoother.observe(10, 10.0)
    assert smoother.get_velocity() == pytest.approx(1.0)
    smoother.reset()
    assert smoother.get_velocity() == 0.0
    assert smoother.get_position() == 0.0


def test_kalman_converges_on_constant_velocity() -> None:
    kf = ConstantAccelerationKalman()
    for t in range(0, 1000, 10):
        kf.observe(t, 100.0 + 0.5 * t)
    assert kf.get_velocity() == pytest.approx(0.5, abs=0.05)
    assert kf.get_position() == pytest.approx(100.0 + 0.5 * 990, abs=2.0)


def test_kalman_first_sample_sets_state() -> None:
    kf = ConstantAccelerationKalman()
    kf.observe(1234, 42.0)
    assert kf.get_position() == 42.0
    assert kf.get_velocity() == 0.0

    kf.reset()
    assert kf.get_position() == 0.0


def test_kalman_transition() -> None:
    kf = ConstantAccelerationKalman()
    f = kf.transition(10.0)
    assert f[0, 1] == 10.0
    assert f[0, 2] == pytest.approx(50.0)
    assert f[1, 2] == 10.0

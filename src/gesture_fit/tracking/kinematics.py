"""Kinematic quantities derived from a quadratic fit."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from gesture_fit.tracking.fitter import FitResult

Point = tuple[float, float]


@dataclass(frozen=True)
class MotionStats:
    """Snapshot of the estimator output for one window state."""

    fit: FitResult | None
    sample_count: int
    t_last: int | None
    position: float | None
    velocity: float          # units/ms, 0.0 without a fit
    acceleration: float      # units/ms^2, 0.0 without a fit
    system_velocity: float   # units/ms
    forecast: Point | None
    tangent: tuple[Point, Point] | None

    @property
    def has_fit(self) -> bool:
        """Check whether a fit was available."""
        return self.fit is not None


def forecast_point(fit: FitResult, t_last: int, horizon: float = 150) -> Point:
    """Get the point on the fitted curve ``horizon`` ms after ``t_last``."""
    t = t_last + horizon
    return float(t), fit.position(t)


def tangent_segment(fit: FitResult, t_last: int, horizon: float = 150) -> tuple[Point, Point]:
    """Get the velocity vector at ``t_last`` projected ``horizon`` ms ahead."""
    y0 = fit.position(t_last)
    v = fit.velocity(t_last)
    return (float(t_last), y0), (float(t_last + horizon), y0 + v * horizon)


def sample_curve(fit: FitResult, t_min: float, t_max: float, steps: int = 100) -> np.ndarray:
    """Sample the fitted curve at ``steps + 1`` evenly spaced times.

    Returns an array of shape ``(steps + 1, 2)`` holding ``(t, y)`` rows.
    """
    t = np.linspace(float(t_min), float(t_max), int(steps) + 1)
    tau = t - float(fit.t0)
    y = fit.a * tau * tau + fit.b * tau + fit.c
    return np.column_stack((t, y))


def derive_motion(
    fit: FitResult | None,
    sample_count: int,
    t_last: int | None,
    system_velocity: float = 0.0,
    horizon: float = 150,
) -> MotionStats:
    """Derive velocity, acceleration and forecast for the latest sample.

    Without a fit (or without samples) velocity and acceleration are zero.
    """
    if fit is None or t_last is None:
        return MotionStats(
            fit=None,
            sample_count=sample_count,
            t_last=t_last,
            position=None,
            velocity=0.0,
            acceleration=0.0,
            system_velocity=float(system_velocity),
            forecast=None,
            tangent=None,
        )
    return MotionStats(
        fit=fit,
        sample_count=sample_count,
        t_last=t_last,
        position=fit.position(t_last),
        velocity=fit.velocity(t_last),
        acceleration=fit.acceleration,
        system_velocity=float(system_velocity),
        forecast=forecast_point(fit, t_last, horizon),
        tangent=tangent_segment(fit, t_last, horizon),
    )


def format_stats(stats: MotionStats) -> list[str]:
    """Format the overlay text lines (velocity in units/s)."""
    if not stats.has_fit:
        return ["Velocity: 0 px/ms", "Accel: 0 px/ms^2"]
    return [
        f"Velocity: {stats.velocity * 1000:.1f} px/s",
        f"System velocity: {stats.system_velocity * 1000:.1f} px/s",
        f"Accel: {stats.acceleration:.5f} px/ms^2",
    ]

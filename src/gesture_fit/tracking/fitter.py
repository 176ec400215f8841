"""Least-squares quadratic fit over a window of samples.

Fits ``y(t) = a*(t - t0)**2 + b*(t - t0) + c`` where ``t0`` is the timestamp
of the first sample. Working in ``tau = t - t0`` keeps the power sums small
enough that ``tau**4`` stays well conditioned for millisecond timestamps.

The normal equations

    | n   S1  S2 |   | c |   | Sy   |
    | S1  S2  S3 | . | b | = | Sty  |
    | S2  S3  S4 |   | a |   | St2y |

are solved with Cramer's rule. A determinant below the singular threshold
yields no fit. All samples at one instant make the system exactly singular;
other degenerate spreads are only rejected when their determinant is that small.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from gesture_fit.tracking.window import Sample

MIN_SAMPLES = 3
SINGULAR_THRESHOLD = 1e-12


@dataclass(frozen=True)
class FitResult:
    """Quadratic coefficients in the ``(t - t0)`` basis."""

    c: float
    b: float
    a: float
    t0: int

    def position(self, t: float) -> float:
        """Evaluate the fitted curve at ``t``."""
        tau = float(t - self.t0)
        return self.a * tau * tau + self.b * tau + self.c

    def velocity(self, t: float) -> float:
        """Get the slope of the fitted curve at ``t`` (units/ms)."""
        return 2.0 * self.a * float(t - self.t0) + self.b

    @property
    def acceleration(self) -> float:
        """Get the constant second derivative (units/ms^2)."""
        return 2.0 * self.a

    def raw_coefficients(self) -> tuple[float, float, float]:
        """Get ``(p, q, r)`` such that ``y = p*t**2 + q*t + r`` in raw time."""
        t0 = float(self.t0)
        p = self.a
        q = self.b - 2.0 * self.a * t0
        r = self.a * t0 * t0 - self.b * t0 + self.c
        return p, q, r


def normal_equations(samples: Sequence[Sample]) -> tuple[np.ndarray, np.ndarray, int]:
    """Build the normal-equations matrix and right-hand side.

    Returns ``(matrix, rhs, t0)``. ``samples`` must not be empty.
    """
    t0 = samples[0].t
    tau = np.array([s.t - t0 for s in samples], dtype=np.float64)
    y = np.array([s.y for s in samples], dtype=np.float64)
    tau2 = tau * tau

    s1 = tau.sum()
    s2 = tau2.sum()
    s3 = (tau2 * tau).sum()
    s4 = (tau2 * tau2).sum()

    matrix = np.array(
        [
            [float(len(samples)), s1, s2],
            [s1, s2, s3],
            [s2, s3, s4],
        ],
        dtype=np.float64,
    )
    rhs = np.array([y.sum(), (tau * y).sum(), (tau2 * y).sum()], dtype=np.float64)
    return matrix, rhs, t0


def _det3(m: np.ndarray) -> float:
    # Cofactor expansion along the first row.
    return float(
        m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
        - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
        + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
    )


def fit_quadratic(
    samples: Sequence[Sample],
    singular_threshold: float = SINGULAR_THRESHOLD,
) -> FitResult | None:
    """Fit a quadratic to ``samples`` in the least-squares sense.

    Returns None when there are fewer than three samples or the system is
    singular. This is a normal outcome, not an error.
    """
    if len(samples) < MIN_SAMPLES:
        return None

    matrix, rhs, t0 = normal_equations(samples)

    det = _det3(matrix)
    if abs(det) < singular_threshold:
        return None

    def _solve(col: int) -> float:
        replaced = matrix.copy()
        replaced[:, col] = rhs
        return _det3(replaced) / det

    return FitResult(c=_solve(0), b=_solve(1), a=_solve(2), t0=t0)

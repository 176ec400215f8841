"""Constant acceleration Kalman filter along one axis."""
from __future__ import annotations

import numpy as np


class ConstantAccelerationKalman:
    """Constant acceleration Kalman filter with per-sample time steps."""

    def __init__(self, process_var: float = 1e-4, meas_var: float = 4.0) -> None:
        """Initialize the Kalman filter."""
        # State is: [y, vy, ay]; time is in ms
        self.process_var = float(process_var)
        self.x = np.zeros((3, 1), dtype=np.float64)
        self.P = np.eye(3, dtype=np.float64) * 100.0
        self.R = np.eye(1, dtype=np.float64) * meas_var
        self.H = np.zeros((1, 3), dtype=np.float64)
        self.H[0, 0] = 1.0
        self._last_t: int | None = None

    def transition(self, dt: float) -> np.ndarray:
        """Build the state transition for a step of ``dt`` ms."""
        f = np.eye(3, dtype=np.float64)
        f[0, 1] = dt
        f[0, 2] = 0.5 * dt * dt
        f[1, 2] = dt
        return f

    def predict(self, dt: float) -> np.ndarray:
        """Predict the state ``dt`` ms ahead."""
        f = self.transition(dt)
        # Process noise scaled for acceleration uncertainty
        q = np.zeros((3, 3), dtype=np.float64)
        q[2, 2] = self.process_var * dt
        self.x = f @ self.x
        self.P = f @ self.P @ f.T + q
        return self.x.copy()

    def update(self, z: float) -> np.ndarray:
        """Update the state with a position measurement."""
        y = np.array([[z]], dtype=np.float64) - (self.H @ self.x)
        s = self.H @ self.P @ self.H.T + self.R
        k = self.P @ self.H.T @ np.linalg.inv(s)
        self.x = self.x + k @ y
        i = np.eye(3, dtype=np.float64)
        self.P = (i - k @ self.H) @ self.P
        return self.x.copy()

    def set_state(self, y: float) -> None:
        """Set the state."""
        self.x[:] = 0
        self.x[0, 0] = y
        self.P = np.eye(3, dtype=np.float64) * 50.0

    def reset(self) -> None:
        """Forget the track."""
        self.x[:] = 0
        self.P = np.eye(3, dtype=np.float64) * 100.0
        self._last_t = None

    def observe(self, t: int, y: float) -> None:
        """Feed one timestamped sample."""
        if self._last_t is None:
            self.set_state(y)
            self._last_t = t
            return
        dt = float(t - self._last_t)
        if dt > 0:
            self.predict(dt)
            self._last_t = t
        self.update(y)

    def get_position(self) -> float:
        """Get the position."""
        return float(self.x[0, 0])

    def get_velocity(self) -> float:
        """Get the velocity (units/ms)."""
        return float(self.x[1, 0])

"""Smoothing utilities for gesture tracking."""
from __future__ import annotations

from typing import Protocol


class VelocityEstimator(Protocol):
    """Independent velocity estimate fed the same samples as the fitter."""

    def reset(self) -> None: ...

    def observe(self, t: int, y: float) -> None: ...

    def get_velocity(self) -> float: ...


class SimpleSmoother:
    """Simple position/velocity smoother using a small sliding window."""

    def __init__(self, window_size: int = 3) -> None:
        """Initialize the smoother."""
        self.positions: list[tuple[int, float]] = []
        self.velocities: list[float] = []
        self.window_size = max(2, int(window_size))

    def reset(self) -> None:
        """Forget all samples."""
        self.positions.clear()
        self.velocities.clear()

    def update(self, t: int, y: float) -> float:
        """Update the smoother and return the smoothed position."""
        dimension = 2
        self.positions.append((t, y))
        if len(self.positions) > self.window_size:
            self.positions.pop(0)
        if len(self.positions) >= dimension:
            # Same-instant samples carry no slope information.
            total_dt = self.positions[-1][0] - self.positions[0][0]
            if total_dt > 0:
                vy = (self.positions[-1][1] - self.positions[0][1]) / total_dt
                self.velocities.append(vy)
                if len(self.velocities) > dimension:
                    self.velocities.pop(0)
        return self.get_position()

    def observe(self, t: int, y: float) -> None:
        """Feed one sample."""
        self.update(t, y)

    def get_position(self) -> float:
        """Get the position."""
        if not self.positions:
            return 0.0
        return float(sum(p[1] for p in self.positions) / len(self.positions))

    def get_velocity(self) -> float:
        """Get the velocity (units/ms)."""
        if not self.velocities:
            return 0.0
        return float(sum(self.velocities) / len(self.velocities))

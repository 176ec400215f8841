"""Mapping between (t, y) sample space and plot pixels."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from gesture_fit.tracking.window import Sample


@dataclass(frozen=True)
class PlotBounds:
    """Visible data range of the chart."""

    min_t: float
    max_t: float
    min_y: float
    max_y: float

    @property
    def t_range(self) -> float:
        """Get the visible time span."""
        return self.max_t - self.min_t

    @property
    def y_range(self) -> float:
        """Get the visible value span."""
        return self.max_y - self.min_y


def plot_bounds(
    samples: Sequence[Sample],
    y_padding: float = 0.1,
    min_t_range: float = 100,
    min_y_range: float = 10.0,
) -> PlotBounds | None:
    """Compute chart bounds for ``samples``, or None for an empty window.

    Ranges narrower than ``min_t_range`` / ``min_y_range`` are widened (the
    y range around its midpoint), then the y range is padded by ``y_padding``
    of itself on both sides.
    """
    if not samples:
        return None
    min_t = min(s.t for s in samples)
    max_t = max(max(s.t for s in samples), min_t + min_t_range)

    min_y = min(s.y for s in samples)
    max_y = max(s.y for s in samples)
    range_y = max_y - min_y
    if range_y < min_y_range:
        mid = (min_y + max_y) / 2.0
        range_y = min_y_range
        min_y, max_y = mid - range_y / 2.0, mid + range_y / 2.0
    return PlotBounds(
        min_t=float(min_t),
        max_t=float(max_t),
        min_y=min_y - range_y * y_padding,
        max_y=max_y + range_y * y_padding,
    )


def map_point(
    bounds: PlotBounds,
    t: float,
    y: float,
    width: float,
    height: float,
    margin: float = 40.0,
) -> tuple[float, float]:
    """Map a sample-space point into a ``width`` x ``height`` plot.

    Larger y maps lower on screen, matching screen-space input.
    """
    inner_w = width - 2 * margin
    inner_h = height - 2 * margin
    x_ratio = (t - bounds.min_t) / bounds.t_range
    y_ratio = (y - bounds.min_y) / bounds.y_range
    return margin + x_ratio * inner_w, margin + y_ratio * inner_h

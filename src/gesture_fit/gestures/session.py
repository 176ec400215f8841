"""Motion session: the seam between gesture capture and rendering.

Capture code calls ``on_gesture_start`` / ``on_sample`` as events arrive.
Each mutation recomputes the quadratic fit and the derived kinematics before
the next mutation is accepted, then pushes the new ``MotionStats`` to
subscribers. Renderers can also poll ``current_fit`` / ``current_window`` /
``current_stats`` on every refresh tick.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable

from gesture_fit.settings import FitConfig
from gesture_fit.tracking.fitter import FitResult, fit_quadratic
from gesture_fit.tracking.kalman import ConstantAccelerationKalman
from gesture_fit.tracking.kinematics import MotionStats, derive_motion
from gesture_fit.tracking.smoothing import SimpleSmoother, VelocityEstimator
from gesture_fit.tracking.window import Sample, SampleWindow

logger = logging.getLogger(__name__)

Listener = Callable[[MotionStats], None]


def make_system_estimator(cfg: FitConfig) -> VelocityEstimator:
    """Create the independent velocity estimator named in ``cfg``."""
    if cfg.system_estimator == "kalman":
        return ConstantAccelerationKalman(
            process_var=cfg.kalman_process_var,
            meas_var=cfg.kalman_meas_var,
        )
    return SimpleSmoother(window_size=cfg.smoother_window)


class MotionSession:
    """Owns a sample window and keeps its fit up to date."""

    def __init__(
        self,
        cfg: FitConfig | None = None,
        window: SampleWindow | None = None,
        system_estimator: VelocityEstimator | None = None,
    ) -> None:
        """Initialize the session."""
        self.cfg = cfg if cfg is not None else FitConfig()
        self.window = window if window is not None else SampleWindow(self.cfg.capacity)
        self.system_estimator = (
            system_estimator if system_estimator is not None else make_system_estimator(self.cfg)
        )

        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._fit: FitResult | None = None
        self._stats = derive_motion(None, 0, None)
        self._active = False

    @property
    def active(self) -> bool:
        """Check whether a gesture is in progress."""
        return self._active

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with fresh stats after every mutation.

        Returns a callable that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def on_gesture_start(self) -> None:
        """Start a new gesture, discarding the previous one."""
        with self._lock:
            self._active = True
            self.window.clear()
            self.system_estimator.reset()
            logger.info("Gesture started")
            self._recompute()

    def on_sample(self, t: int, y: float) -> None:
        """Record a sample of the active gesture."""
        with self._lock:
            self.window.append(Sample(int(t), float(y)))
            self.system_estimator.observe(int(t), float(y))
            logger.debug("Sample t=%s y=%.2f", t, y)
            self._recompute()

    def on_gesture_end(self) -> None:
        """End the gesture; the last window and fit stay available."""
        with self._lock:
            self._active = False
            logger.info(
                "Gesture ended after %d samples (velocity=%.4f units/ms)",
                self._stats.sample_count,
                self._stats.velocity,
            )

    def current_fit(self) -> FitResult | None:
        """Get the fit for the current window."""
        with self._lock:
            return self._fit

    def current_window(self) -> tuple[Sample, ...]:
        """Get a snapshot of the current window."""
        return self.window.snapshot()

    def current_stats(self) -> MotionStats:
        """Get the derived kinematics for the current window."""
        with self._lock:
            return self._stats

    def _analysis_samples(self, samples: tuple[Sample, ...]) -> tuple[Sample, ...]:
        n = self.cfg.analysis_window
        if n is None or len(samples) <= n:
            return samples
        return samples[-n:]

    def _recompute(self) -> None:
        samples = self.window.snapshot()
        self._fit = fit_quadratic(
            self._analysis_samples(samples),
            singular_threshold=self.cfg.singular_threshold,
        )
        last = samples[-1] if samples else None
        self._stats = derive_motion(
            self._fit,
            sample_count=len(samples),
            t_last=last.t if last is not None else None,
            system_velocity=self.system_estimator.get_velocity(),
            horizon=self.cfg.forecast_horizon_ms,
        )
        for listener in list(self._listeners):
            try:
                listener(self._stats)
            except Exception:
                logger.exception("Motion listener failed")

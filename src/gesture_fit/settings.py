"""Settings for the motion estimator.

Settings are persisted as a simple JSON file. Missing keys fall back to
``DEFAULT_SETTINGS`` so a partial file only overrides what it names.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gesture_fit.tracking.fitter import MIN_SAMPLES

DEFAULT_SETTINGS = {
    "capacity": 20,                  # samples kept in the sliding window
    "analysis_window": None,         # samples used for the fit (None = whole window)
    "forecast_horizon_ms": 150,      # forecast/tangent projection
    "singular_threshold": 1e-12,     # |det| below this means no fit
    "y_padding": 0.1,                # fraction of the y range added on each side
    "min_t_range": 100,              # ms
    "min_y_range": 10.0,             # px
    "curve_steps": 100,
    "system_estimator": "smoother",  # smoother | kalman
    "smoother_window": 3,
    "kalman_process_var": 1e-4,
    "kalman_meas_var": 4.0,
}

SYSTEM_ESTIMATORS = ("smoother", "kalman")

SETTINGS_ENV = "GESTURE_FIT_SETTINGS"

logger = logging.getLogger(__name__)


def settings_path() -> Path:
    """Get the path to the settings file."""
    override = os.environ.get(SETTINGS_ENV)
    if override:
        return Path(override)
    return Path.cwd() / "gesture_fit.json"


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Load the settings from the file, merged over the defaults."""
    path = Path(path) if path is not None else settings_path()
    data = DEFAULT_SETTINGS.copy()

    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            data.update(json.load(f))
        logger.info("Loaded settings from %s", path)

    return data


def save_settings(data: dict[str, Any], path: Path | None = None) -> Path:
    """Save the settings to the file."""
    path = Path(path) if path is not None else settings_path()

    logger.info("Saving settings to %s", path)

    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    logger.info("Saved settings to %s", path)
    return path


@dataclass(frozen=True)
class FitConfig:
    """Fit and display configuration."""

    capacity: int = 20
    analysis_window: int | None = None
    forecast_horizon_ms: int = 150
    singular_threshold: float = 1e-12
    y_padding: float = 0.1
    min_t_range: int = 100
    min_y_range: float = 10.0
    curve_steps: int = 100
    system_estimator: str = "smoother"
    smoother_window: int = 3
    kalman_process_var: float = 1e-4
    kalman_meas_var: float = 4.0

    def __post_init__(self) -> None:
        """Validate the configuration."""
        if self.capacity < 1:
            msg = f"capacity must be at least 1, got {self.capacity}"
            raise ValueError(msg)
        if self.analysis_window is not None and self.analysis_window < MIN_SAMPLES:
            msg = f"analysis_window must be at least {MIN_SAMPLES}, got {self.analysis_window}"
            raise ValueError(msg)
        if self.system_estimator not in SYSTEM_ESTIMATORS:
            msg = f"unknown system estimator {self.system_estimator!r}, expected one of {SYSTEM_ESTIMATORS}"
            raise ValueError(msg)
        if self.min_t_range <= 0 or self.min_y_range <= 0:
            msg = "min_t_range and min_y_range must be positive"
            raise ValueError(msg)
        if self.y_padding < 0:
            msg = f"y_padding must not be negative, got {self.y_padding}"
            raise ValueError(msg)
        if self.forecast_horizon_ms < 0:
            msg = f"forecast_horizon_ms must not be negative, got {self.forecast_horizon_ms}"
            raise ValueError(msg)
        if self.curve_steps < 1:
            msg = f"curve_steps must be at least 1, got {self.curve_steps}"
            raise ValueError(msg)

    @classmethod
    def from_settings(cls, s: dict[str, Any]) -> FitConfig:
        """Build a config from a settings dict."""
        window = s.get("analysis_window")
        return cls(
            capacity=int(s.get("capacity", 20)),
            analysis_window=int(window) if window is not None else None,
            forecast_horizon_ms=int(s.get("forecast_horizon_ms", 150)),
            singular_threshold=float(s.get("singular_threshold", 1e-12)),
            y_padding=float(s.get("y_padding", 0.1)),
            min_t_range=int(s.get("min_t_range", 100)),
            min_y_range=float(s.get("min_y_range", 10.0)),
            curve_steps=int(s.get("curve_steps", 100)),
            system_estimator=str(s.get("system_estimator", "smoother")),
            smoother_window=int(s.get("smoother_window", 3)),
            kalman_process_var=float(s.get("kalman_process_var", 1e-4)),
            kalman_meas_var=float(s.get("kalman_meas_var", 4.0)),
        )

    def to_settings(self) -> dict[str, Any]:
        """Get the config as a settings dict."""
        return {
            "capacity": self.capacity,
            "analysis_window": self.analysis_window,
            "forecast_horizon_ms": self.forecast_horizon_ms,
            "singular_threshold": self.singular_threshold,
            "y_padding": self.y_padding,
            "min_t_range": self.min_t_range,
            "min_y_range": self.min_y_range,
            "curve_steps": self.curve_steps,
            "system_estimator": self.system_estimator,
            "smoother_window": self.smoother_window,
            "kalman_process_var": self.kalman_process_var,
            "kalman_meas_var": self.kalman_meas_var,
        }

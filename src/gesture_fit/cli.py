from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
import typer

from gesture_fit.gestures.session import MotionSession
from gesture_fit.settings import FitConfig, load_settings, save_settings, settings_path
from gesture_fit.tracking.fitter import fit_quadratic
from gesture_fit.tracking.kinematics import MotionStats, derive_motion
from gesture_fit.tracking.window import Sample

app = typer.Typer(help="Sliding-window quadratic motion estimator for drag gestures")


def _load_config(settings_file: Optional[Path]) -> FitConfig:
    try:
        return FitConfig.from_settings(load_settings(settings_file))
    except (ValueError, TypeError, json.JSONDecodeError) as e:
        raise typer.BadParameter(f"Invalid settings: {e}") from e


def _parse_sample(text: str) -> Sample:
    """Parse a ``t,y`` pair."""
    parts = text.replace(";", ",").split(",")
    if len(parts) != 2:
        raise typer.BadParameter(f"Expected 't,y', got {text!r}")
    try:
        return Sample(int(float(parts[0])), float(parts[1]))
    except ValueError as e:
        raise typer.BadParameter(f"Expected numeric 't,y', got {text!r}") from e


def _stats_line(stats: MotionStats) -> str:
    if not stats.has_fit:
        return f"n={stats.sample_count:2d} no fit (sys_v={stats.system_velocity * 1000:.1f} px/s)"
    return (
        f"n={stats.sample_count:2d} t={stats.t_last:5d} y={stats.position:8.2f} "
        f"v={stats.velocity * 1000:8.1f} px/s sys_v={stats.system_velocity * 1000:8.1f} px/s "
        f"acc={stats.acceleration:.5f} px/ms^2"
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),  # noqa: FBT001, FBT003
) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def fit(
    points: Optional[List[str]] = typer.Argument(
        None, help="Samples as 't,y' pairs. Read one per line from stdin if omitted."
    ),
    settings_file: Optional[Path] = typer.Option(
        None, "--settings", dir_okay=False, help="Settings JSON file"
    ),
    horizon: Optional[int] = typer.Option(
        None, min=0, help="Forecast horizon in ms. Defaults to the settings value."
    ),
):
    """Fit a quadratic to the given samples and print the kinematics."""
    cfg = _load_config(settings_file)
    if not points:
        points = [line.strip() for line in sys.stdin if line.strip()]
    samples = [_parse_sample(p) for p in points]
    if not samples:
        raise typer.BadParameter("No samples given")

    result = fit_quadratic(samples, singular_threshold=cfg.singular_threshold)
    if result is None:
        typer.echo(f"No fit ({len(samples)} samples)")
        return

    t_last = samples[-1].t
    stats = derive_motion(
        result,
        len(samples),
        t_last,
        horizon=cfg.forecast_horizon_ms if horizon is None else horizon,
    )
    p, q, r = result.raw_coefficients()
    typer.echo(f"t0={result.t0} a={result.a:.6g} b={result.b:.6g} c={result.c:.6g}")
    typer.echo(f"raw: y = {p:.6g}*t^2 + {q:.6g}*t + {r:.6g}")
    typer.echo(f"velocity({t_last}) = {stats.velocity:.6g} units/ms")
    typer.echo(f"acceleration = {stats.acceleration:.6g} units/ms^2")
    ft, fy = stats.forecast
    typer.echo(f"forecast({ft:.0f}) = {fy:.6g}")


@app.command()
def simulate(
    samples: int = typer.Option(30, min=1, help="Number of samples to generate"),
    interval: int = typer.Option(16, min=0, help="Time between samples in ms"),
    start: float = typer.Option(100.0, help="Initial position in px"),
    velocity: float = typer.Option(0.5, help="Initial velocity in px/ms"),
    accel: float = typer.Option(0.002, help="Acceleration in px/ms^2"),
    noise: float = typer.Option(0.5, min=0.0, help="Gaussian position noise in px"),
    seed: int = typer.Option(0, help="Random seed"),
    settings_file: Optional[Path] = typer.Option(
        None, "--settings", dir_okay=False, help="Settings JSON file"
    ),
):
    """Feed a synthetic drag through a session and print the stats per sample."""
    cfg = _load_config(settings_file)
    session = MotionSession(cfg)
    session.subscribe(lambda stats: typer.echo(_stats_line(stats)) if stats.sample_count else None)

    rng = np.random.default_rng(seed)
    t = np.arange(samples, dtype=np.int64) * interval
    y = start + velocity * t + 0.5 * accel * t * t + rng.normal(0.0, noise, size=samples)

    session.on_gesture_start()
    for ti, yi in zip(t, y):
        session.on_sample(int(ti), float(yi))
    session.on_gesture_end()

    stats = session.current_stats()
    if stats.has_fit:
        true_v = velocity + accel * float(t[-1])
        typer.echo(
            f"final: v={stats.velocity:.4f} px/ms (true {true_v:.4f}), "
            f"acc={stats.acceleration:.5f} px/ms^2 (true {accel:.5f})"
        )


@app.command()
def view(
    camera: Optional[str] = typer.Option(
        None, help="Camera index or source path. Drag with the mouse if omitted."
    ),
    width: int = typer.Option(640, min=200, help="Window width in px"),
    height: int = typer.Option(720, min=200, help="Window height in px"),
    settings_file: Optional[Path] = typer.Option(
        None, "--settings", dir_okay=False, help="Settings JSON file"
    ),
):
    """Open the split-screen viewer."""
    from gesture_fit.gestures.viewer import run_viewer

    session = MotionSession(_load_config(settings_file))
    run_viewer(session, camera=camera, width=width, height=height)


@app.command()
def settings(
    settings_file: Optional[Path] = typer.Option(
        None, "--settings", dir_okay=False, help="Settings JSON file"
    ),
    write: bool = typer.Option(False, "--write", help="Save the effective settings"),  # noqa: FBT001, FBT003
):
    """Print the effective settings."""
    cfg = _load_config(settings_file)
    data = cfg.to_settings()
    typer.echo(json.dumps(data, indent=2))
    if write:
        path = save_settings(data, settings_file)
        typer.echo(f"Wrote settings to {path}")
    elif settings_file is None:
        typer.echo(f"Settings file: {settings_path()}")


if __name__ == "__main__":
    app()

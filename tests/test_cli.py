from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from gesture_fit.cli import app

runner = CliRunner()


def test_fit_prints_coefficients() -> None:
    result = runner.invoke(app, ["fit", "0,0", "10,1", "20,4", "30,9"])
    assert result.exit_code == 0, result.output
    assert "t0=0 a=0.01" in result.output
    assert "velocity(30) = 0.6 units/ms" in result.output
    assert "forecast(180) = 324" in result.output


def test_fit_reads_stdin() -> None:
    result = runner.invoke(app, ["fit"], input="0,0\n10,1\n20,4\n\n30,9\n")
    assert result.exit_code == 0, result.output
    assert "a=0.01" in result.output


def test_fit_two_samples_has_no_fit() -> None:
    result = runner.invoke(app, ["fit", "0,0", "10,1"])
    assert result.exit_code == 0, result.output
    assert "No fit (2 samples)" in result.output


def test_fit_rejects_malformed_sample() -> None:
    result = runner.invoke(app, ["fit", "0,0", "ten"])
    assert result.exit_code != 0


def test_simulate_prints_a_line_per_sample() -> None:
    result = runner.invoke(app, ["simulate", "--samples", "12", "--noise", "0"])
    assert result.exit_code == 0, result.output
    lines = [line for line in result.output.splitlines() if line.startswith("n=")]
    assert len(lines) == 12
    assert "no fit" in lines[1]
    assert "v=" in lines[2]
    assert "final: v=" in result.output


def test_settings_write(tmp_path: Path) -> None:
    path = tmp_path / "gesture_fit.json"
    result = runner.invoke(app, ["settings", "--settings", str(path), "--write"])
    assert result.exit_code == 0, result.output
    assert json.loads(path.read_text(encoding="utf-8"))["capacity"] == 20


def test_invalid_settings_file(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"capacity": 0}), encoding="utf-8")
    result = runner.invoke(app, ["fit", "--settings", str(path), "0,0", "10,1", "20,4"])
    assert result.exit_code != 0


def test_null_setting_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "null.json"
    path.write_text(json.dumps({"capacity": None}), encoding="utf-8")
    result = runner.invoke(app, ["fit", "--settings", str(path), "0,0", "10,1", "20,4"])
    assert result.exit_code == 2
    assert not isinstance(result.exception, TypeError)

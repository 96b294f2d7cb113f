from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from icolamp.cli import app

runner = CliRunner()


def test_parts_lists_every_part():
    result = runner.invoke(app, ["parts"])
    assert result.exit_code == 0, result.output
    for name in ("lens", "lid", "quadrant-5", "quadrant-3", "base", "base-cap"):
        assert name in result.output


def test_params_applies_overrides():
    result = runner.invoke(app, ["params", "--set", "lensDepth=35"])
    assert result.exit_code == 0, result.output
    assert "outer_depth" in result.output
    assert "75" in result.output


def test_params_reads_config_file(tmp_path):
    config = tmp_path / "lamp.json"
    config.write_text(json.dumps({"wall_width": 0.3}))
    result = runner.invoke(app, ["params", "-c", str(config)])
    assert result.exit_code == 0, result.output
    assert "Warning" in result.output


def test_params_rejects_bad_assignment():
    result = runner.invoke(app, ["params", "--set", "wall_width=thick"])
    assert result.exit_code != 0


def test_params_rejects_missing_config(tmp_path):
    result = runner.invoke(app, ["params", "-c", str(tmp_path / "missing.json")])
    assert result.exit_code != 0


def test_build_rejects_unknown_part(tmp_path):
    result = runner.invoke(app, ["build", "dodecahedron", "-o", str(tmp_path / "x.stl")])
    assert result.exit_code != 0
    assert not (tmp_path / "x.stl").exists()


def test_build_rejects_unknown_units(tmp_path):
    result = runner.invoke(app, ["build", "lid", "--units", "furlongs", "-o", str(tmp_path / "x.stl")])
    assert result.exit_code != 0


def test_build_reports_infeasible_parameters(tmp_path):
    result = runner.invoke(app, ["build", "lid", "--set", "led_hole_size=40", "-o", str(tmp_path / "x.stl")])
    assert result.exit_code != 0
    assert not (tmp_path / "x.stl").exists()


@pytest.mark.csg
@pytest.mark.stl
def test_build_writes_stl(tmp_path):
    target = tmp_path / "lid.stl"
    result = runner.invoke(app, ["build", "lid", "--lod", "preview", "-o", str(target)])
    assert result.exit_code == 0, result.output
    assert "Built lid" in result.output
    assert target.stat().st_size > 84


@pytest.mark.csg
@pytest.mark.stl
def test_build_does_not_overwrite(tmp_path):
    target = tmp_path / "lid.stl"
    target.write_text("keep me")
    result = runner.invoke(app, ["build", "lid", "--lod", "preview", "-o", str(target)])
    assert result.exit_code == 0, result.output
    assert target.read_text() == "keep me"
    assert (tmp_path / "lid (1).stl").exists()


@pytest.mark.csg
@pytest.mark.stl
def test_plan_writes_every_part(tmp_path):
    out = tmp_path / "dist"
    result = runner.invoke(app, ["plan", "-o", str(out), "--lod", "preview"])
    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in out.glob("*.stl")) == sorted(
        f"{name}.stl" for name in ("lid", "quadrant-5", "quadrant-3", "lens", "base", "base-cap")
    )
    assert "19 LEDs" in result.output

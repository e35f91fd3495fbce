"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from packages.geometry.export import read_ply_mesh
from packages.scene.cli import main


class TestSolidCommand:
    def test_writes_ply(self, tmp_path: Path):
        out = tmp_path / "pool.ply"
        result = CliRunner().invoke(main, ["solid", "rectangle", "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "8 vertices" in result.output
        vertices, faces = read_ply_mesh(out)
        assert vertices.shape == (8, 3)
        assert faces.shape == (12, 3)

    def test_rejects_zero_depth(self, tmp_path: Path):
        result = CliRunner().invoke(
            main, ["solid", "lagoon", "--depth", "0", "-o", str(tmp_path / "x.ply")]
        )
        assert result.exit_code == 2
        assert not (tmp_path / "x.ply").exists()

    def test_rejects_unknown_shape(self):
        result = CliRunner().invoke(main, ["solid", "triangle"])
        assert result.exit_code == 2


class TestSceneCommand:
    def test_writes_json(self, tmp_path: Path):
        out = tmp_path / "scene.json"
        result = CliRunner().invoke(
            main,
            ["scene", "--shape", "lagoon", "--time-of-day", "night", "--spa", "-o", str(out)],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert data["time_of_day"] == "night"
        assert data["units"] == "feet"
        assert "pool_shell_0" in data["meshes"]
        assert any(node["name"] == "spillover_spa" for node in data["nodes"])

    def test_prints_json(self):
        result = CliRunner().invoke(main, ["--log-level", "warning", "scene", "--no-led"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [light["name"] for light in data["lights"]] == ["ambient", "sun"]


class TestEstimateCommand:
    def test_total(self):
        result = CliRunner().invoke(main, ["estimate"])
        assert result.exit_code == 0, result.output
        assert "Total" in result.output
        assert "28,700.00" in result.output

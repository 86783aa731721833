"""Tests for arenaforge.cli - validate, presets, scatter, and layout commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from arenaforge import output
from arenaforge.cli import load_arena, main
from arenaforge.output import print_summary, print_validation
from arenaforge.presets import PRESET_DIR
from arenaforge.schema import ArenaConfig
from arenaforge.validation import ValidationResult


def _write_yaml(tmp_path: Path, name: str, data: dict) -> Path:
    p = tmp_path / f"{name}.yaml"
    p.write_text(yaml.dump(data))
    return p


def _minimal_arena(**overrides) -> dict:
    """Return a minimal valid arena document, with optional overrides."""
    base = {
        "name": "cli_arena",
        "shape": "circle",
        "width": 50,
        "height": 50,
        "loops": [{"radius": 10}],
    }
    base.update(overrides)
    return base


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------

class TestValidate:
    def test_valid_file_passes(self, tmp_path, capsys):
        path = _write_yaml(tmp_path, "ok", _minimal_arena())
        assert _run(["validate", str(path)]) == 0
        out = capsys.readouterr().out
        assert "PASS" in out
        assert "1 valid" in out

    def test_invalid_file_fails_with_errors(self, tmp_path, capsys):
        portals = [
            {"id": f"p{i}", "inPoint": [-5, i], "outPoint": [5, i], "radius": 1}
            for i in range(3)
        ]
        path = _write_yaml(tmp_path, "bad", _minimal_arena(portals=portals))
        assert _run(["validate", str(path)]) == 1
        out = capsys.readouterr().out
        assert "FAIL" in out
        assert "Maximum 2 portals allowed (got 3)" in out

    def test_mixed_files(self, tmp_path, capsys):
        good = _write_yaml(tmp_path, "good", _minimal_arena())
        bad = _write_yaml(tmp_path, "bad", _minimal_arena(name=""))
        assert _run(["validate", str(good), str(bad)]) == 1
        assert "2 arenas: 1 valid, 1 invalid" in capsys.readouterr().out

    def test_json_document(self, tmp_path, capsys):
        path = tmp_path / "arena.json"
        path.write_text(json.dumps(_minimal_arena()))
        assert _run(["validate", str(path)]) == 0

    def test_bundled_presets_validate(self, capsys):
        paths = sorted(str(p) for p in PRESET_DIR.glob("*.yaml"))
        assert _run(["validate", *paths]) == 0


# ---------------------------------------------------------------------------
# presets
# ---------------------------------------------------------------------------

class TestPresets:
    def test_lists_every_preset(self, capsys):
        assert _run(["presets"]) == 0
        out = capsys.readouterr().out
        for key in ("classic", "hazard_zone", "water_world", "twin_gates", "racetrack_rally"):
            assert key in out


# ---------------------------------------------------------------------------
# scatter
# ---------------------------------------------------------------------------

class TestScatter:
    def test_writes_document(self, tmp_path):
        src = _write_yaml(tmp_path, "src", _minimal_arena())
        out = tmp_path / "out" / "scattered.yaml"
        code = _run([
            "scatter", str(src), "--obstacles", "5", "--pits", "4",
            "--placement", "edges", "--seed", "7", "-o", str(out),
        ])
        assert code == 0
        config = load_arena(out)
        assert isinstance(config, ArenaConfig)
        assert len(config.obstacles) <= 5
        assert len(config.pits) <= 4
        assert config.loops[0].radius == 10

    def test_seed_is_reproducible(self, tmp_path):
        src = _write_yaml(tmp_path, "src", _minimal_arena())
        first, second = tmp_path / "a.yaml", tmp_path / "b.yaml"
        for out in (first, second):
            _run(["scatter", str(src), "--obstacles", "6", "--seed", "3", "-o", str(out)])
        assert first.read_text() == second.read_text()

    def test_stdout(self, tmp_path, capsys):
        src = _write_yaml(tmp_path, "src", _minimal_arena())
        assert _run(["scatter", str(src), "--obstacles", "2", "--seed", "1"]) == 0
        doc = yaml.safe_load(capsys.readouterr().out)
        assert doc["name"] == "cli_arena"
        assert len(doc["obstacles"]) == 2

    def test_bad_placement_rejected(self, tmp_path):
        src = _write_yaml(tmp_path, "src", _minimal_arena())
        assert _run(["scatter", str(src), "--placement", "corners"]) == 2


# ---------------------------------------------------------------------------
# layout
# ---------------------------------------------------------------------------

class TestLayout:
    def test_writes_svg_json(self, tmp_path):
        src = _write_yaml(tmp_path, "src", _minimal_arena())
        out = tmp_path / "layout.json"
        assert _run(["layout", str(src), "-o", str(out)]) == 0
        data = json.loads(out.read_text())
        assert data["floor"].startswith("M ")
        assert len(data["loops"]) == 1
        assert len(data["walls"]) == 8
        assert data["water"] is None


class TestArgs:
    def test_command_required(self):
        assert _run([]) == 2


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------

class TestConsoleOutput:
    def test_plain_when_not_a_tty(self, capsys):
        print_validation("a.yaml", ValidationResult(valid=False, errors=("bad wall",)))
        out = capsys.readouterr().out
        assert "\033[" not in out
        assert out.splitlines() == ["FAIL  a.yaml", "      - bad wall"]

    def test_summary_colours_only_non_zero_counts(self, monkeypatch, capsys):
        monkeypatch.setattr(output, "_use_color", lambda: True)
        print_summary([ValidationResult(valid=True, errors=())])
        out = capsys.readouterr().out
        assert "\033[32m1 valid\033[0m" in out
        assert ", 0 invalid" in out

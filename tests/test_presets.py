"""Tests for arenaforge.presets - the bundled preset library."""

from __future__ import annotations

import pytest

from arenaforge.layout import build_layout
from arenaforge.presets import (
    DEFAULT_ARENA,
    PRESET_DIR,
    PRESET_NAMES,
    apply_preset,
    list_presets,
    load_preset,
)
from arenaforge.schema import ArenaConfig
from arenaforge.validation import validate_arena_config


class TestLibrary:
    def test_every_preset_has_a_file(self):
        for key in PRESET_NAMES:
            assert (PRESET_DIR / f"{key}.yaml").is_file(), key

    @pytest.mark.parametrize("key", PRESET_NAMES)
    def test_every_preset_is_valid(self, key):
        result = validate_arena_config(load_preset(key))
        assert result.valid, result.errors

    @pytest.mark.parametrize("key", PRESET_NAMES)
    def test_every_preset_builds_a_layout(self, key):
        layout = build_layout(load_preset(key))
        assert layout.floor.vertices

    def test_unknown_preset(self):
        with pytest.raises(KeyError, match="Available"):
            load_preset("lava_lake")

    def test_list_presets(self):
        rows = list_presets()
        assert [key for key, _, _ in rows] == list(PRESET_NAMES)
        assert ("classic", "Classic Arena") == rows[0][:2]

    def test_default_arena_is_valid(self):
        assert validate_arena_config(DEFAULT_ARENA).valid


# ---------------------------------------------------------------------------
# Preset contents
# ---------------------------------------------------------------------------

class TestPresetContents:
    def test_classic(self):
        config = load_preset("classic")
        assert isinstance(config, ArenaConfig)
        assert config.shape == "circle"
        assert [lp.radius for lp in config.loops] == [15, 20]

    def test_hazard_zone(self):
        config = load_preset("hazard_zone")
        assert config.shape == "octagon"
        assert [lp.shape for lp in config.loops] == ["octagon", "hexagon", "circle"]
        assert [lp.radius for lp in config.loops] == [12, 18, 24]
        assert [(e.angle, e.width) for e in config.exits] == [(0, 30), (90, 30), (180, 30), (270, 30)]
        assert len(config.laser_guns) == 2
        assert config.pits[0].radius == 3
        assert config.wall.has_spikes and config.wall.has_springs

    def test_water_world(self):
        config = load_preset("water_world")
        assert config.theme == "sea"
        assert config.water_body.type == "center"
        assert config.water_body.radius == 10
        assert config.water_body.resolved_color == "#4fc3f7"

    def test_twin_gates(self):
        config = load_preset("twin_gates")
        assert len(config.portals) == 1
        assert config.water_body.type == "moat"
        assert config.water_body.loop_index == 0
        assert config.require_all_goals_destroyed
        assert len(config.goal_objects) == 2

    def test_racetrack_rally(self):
        config = load_preset("racetrack_rally")
        assert (config.width, config.height) == (60, 36)
        assert config.wall.resolved_wall_count(config.shape) == 12
        assert config.loops[1].charge_point_count == 3


# ---------------------------------------------------------------------------
# Applying presets in the editor
# ---------------------------------------------------------------------------

class TestApplyPreset:
    def test_keeps_working_dimensions(self):
        working = DEFAULT_ARENA.merged({"name": "mine", "width": 80, "height": 70})
        applied = apply_preset(working, "hazard_zone")
        assert (applied.width, applied.height) == (80, 70)
        assert applied.shape == "octagon"
        assert applied.name == "Hazard Zone"
        assert len(applied.loops) == 3

    def test_keeps_fields_the_preset_does_not_set(self):
        working = DEFAULT_ARENA.merged({"gravity": 2.5})
        applied = apply_preset(working, "classic")
        assert applied.gravity == 2.5

    def test_does_not_mutate_working_config(self):
        working = DEFAULT_ARENA
        apply_preset(working, "water_world")
        assert working.water_body is None
        assert working.theme == "metrocity"

    def test_unknown_preset(self):
        with pytest.raises(KeyError):
            apply_preset(DEFAULT_ARENA, "nope")

"""Tests for arenaforge.schema - value types, transforms, and document codec."""

from __future__ import annotations

import pytest

from arenaforge.errors import MalformedPoint, UnsupportedLiquid
from arenaforge.schema import (
    ArenaConfig,
    LoopConfig,
    PitConfig,
    Point,
    WallConfig,
    WallWidths,
    WaterBodyConfig,
    arena_from_dict,
    arena_to_dict,
    as_point,
    make_charge_points,
)


def _minimal_doc(**overrides) -> dict:
    """Return a minimal arena document, with optional overrides."""
    base = {"name": "doc_arena", "width": 50, "height": 50, "shape": "circle"}
    base.update(overrides)
    return base


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------

class TestPoints:
    @pytest.mark.parametrize("value", [Point(1, 2), (1, 2), [1, 2], {"x": 1, "y": 2}])
    def test_accepted_forms(self, value):
        assert as_point(value) == Point(1.0, 2.0)

    @pytest.mark.parametrize("value", [None, "1,2", (1, 2, 3), {"x": 1}, ("a", 2), (float("inf"), 0)])
    def test_malformed(self, value):
        with pytest.raises(MalformedPoint):
            as_point(value)


# ---------------------------------------------------------------------------
# Loops and charge points
# ---------------------------------------------------------------------------

class TestChargePoints:
    def test_even_spacing(self):
        points = make_charge_points(4)
        assert [p.angle for p in points] == [0, 90, 180, 270]
        assert all(p.recharge_rate == 5 for p in points)
        assert all(p.color == "#fbbf24" for p in points)
        assert all(p.radius == 1 for p in points)

    def test_zero_count(self):
        assert make_charge_points(0) == ()

    def test_with_charge_points_sets_count_and_rate(self):
        loop = LoopConfig(radius=10).with_charge_points(3, recharge_rate=8)
        assert loop.charge_point_count == 3
        assert [p.angle for p in loop.charge_points] == pytest.approx([0, 120, 240])
        assert {p.recharge_rate for p in loop.charge_points} == {8}

    def test_recount_keeps_rate(self):
        loop = LoopConfig(radius=10).with_charge_points(3, recharge_rate=8).with_charge_points(2)
        assert [p.recharge_rate for p in loop.charge_points] == [8, 8]
        assert [p.angle for p in loop.charge_points] == [0, 180]

    def test_with_recharge_rate_is_uniform(self):
        loop = LoopConfig(radius=10).with_charge_points(4).with_recharge_rate(12)
        assert {p.recharge_rate for p in loop.charge_points} == {12}
        assert loop.charge_point_count == 4


class TestLoopExtents:
    def test_radius_only(self):
        assert LoopConfig(radius=10).extents() == (10, 10)

    def test_sized(self):
        assert LoopConfig(radius=10, shape="oval", width=40, height=20).extents() == (20, 10)

    def test_ring_thickness(self):
        assert LoopConfig(radius=10, shape="ring", ring_thickness=4).extents() == (12, 12)


# ---------------------------------------------------------------------------
# Boundary and hazards
# ---------------------------------------------------------------------------

class TestWall:
    @pytest.mark.parametrize(
        "shape,expected",
        [("pentagon", 5), ("hexagon", 6), ("octagon", 8), ("star", 10), ("rectangle", 4), ("circle", 8)],
    )
    def test_resolved_wall_count(self, shape, expected):
        assert WallConfig().resolved_wall_count(shape) == expected

    def test_explicit_count_wins(self):
        assert WallConfig(wall_count=12).resolved_wall_count("hexagon") == 12

    def test_width_falls_back_to_uniform(self):
        widths = WallWidths(top=0, uniform=2)
        assert widths.width_for("top") == 0
        assert widths.width_for("left") == 2


class TestHazards:
    def test_pit_escape_chance_is_fixed(self):
        assert PitConfig(x=0, y=0, radius=1).escape_chance == 0.5

    def test_liquid_default_colours(self):
        assert WaterBodyConfig(liquid_type="lava").resolved_color == "#ef4444"
        assert WaterBodyConfig(liquid_type="water").resolved_color == "#3b82f6"

    def test_explicit_colour_wins(self):
        assert WaterBodyConfig(liquid_type="lava", color="#4fc3f7").resolved_color == "#4fc3f7"

    def test_unknown_liquid(self):
        with pytest.raises(UnsupportedLiquid, match="mercury"):
            WaterBodyConfig(liquid_type="mercury").resolved_color


# ---------------------------------------------------------------------------
# Pure transforms
# ---------------------------------------------------------------------------

class TestTransforms:
    def test_with_loop_leaves_original(self):
        config = ArenaConfig(name="a")
        updated = config.with_loop(LoopConfig(radius=10))
        assert config.loops == ()
        assert len(updated.loops) == 1

    def test_without_loop(self):
        config = ArenaConfig(name="a", loops=(LoopConfig(radius=10), LoopConfig(radius=15)))
        assert [lp.radius for lp in config.without_loop(0).loops] == [15]

    def test_with_updated_loop(self):
        config = ArenaConfig(name="a", loops=(LoopConfig(radius=10),))
        updated = config.with_updated_loop(0, speed_boost=2.0)
        assert updated.loops[0].speed_boost == 2.0
        assert config.loops[0].speed_boost == 1.0

    def test_with_wall(self):
        config = ArenaConfig(name="a").with_wall(has_spikes=True)
        assert config.wall.has_spikes
        assert config.wall.enabled

    def test_frozen(self):
        config = ArenaConfig(name="a")
        with pytest.raises(AttributeError):
            config.name = "b"

    def test_merged_overlays_document(self):
        config = ArenaConfig(name="a", width=60)
        merged = config.merged({"shape": "hexagon", "loops": [{"radius": 12}]})
        assert merged.shape == "hexagon"
        assert merged.width == 60
        assert merged.loops == (LoopConfig(radius=12.0),)


# ---------------------------------------------------------------------------
# Document codec
# ---------------------------------------------------------------------------

class TestArenaFromDict:
    def test_minimal_defaults(self):
        config = arena_from_dict({"name": "x"})
        assert config.width == 50
        assert config.shape == "circle"
        assert config.theme == "metrocity"
        assert config.wall == WallConfig()
        assert config.water_body is None

    def test_camel_case_fields(self):
        doc = _minimal_doc(
            loops=[{"radius": 15, "speedBoost": 1.5, "chargePointCount": 1,
                    "chargePoints": [{"angle": 0, "rechargeRate": 7}]}],
            waterBody={"type": "moat", "loopIndex": 0, "ringThickness": 2, "liquidType": "acid"},
            portals=[{"id": "p", "inPoint": {"x": -5, "y": 0}, "outPoint": [5, 0], "radius": 1}],
            requireAllGoalsDestroyed=True,
        )
        config = arena_from_dict(doc)
        assert config.loops[0].speed_boost == 1.5
        assert config.loops[0].charge_points[0].recharge_rate == 7
        assert config.water_body.loop_index == 0
        assert config.water_body.liquid_type == "acid"
        assert config.portals[0].out_point == Point(5, 0)
        assert config.require_all_goals_destroyed

    def test_missing_name(self):
        with pytest.raises(ValueError, match="name"):
            arena_from_dict({"width": 50})

    def test_non_number(self):
        with pytest.raises(ValueError, match="width"):
            arena_from_dict(_minimal_doc(width="wide"))

    def test_bool_is_not_a_number(self):
        with pytest.raises(ValueError, match="radius"):
            arena_from_dict(_minimal_doc(loops=[{"radius": True}]))

    def test_collection_must_be_list(self):
        with pytest.raises(ValueError, match="obstacles"):
            arena_from_dict(_minimal_doc(obstacles={"x": 1}))

    def test_missing_loop_radius_names_location(self):
        with pytest.raises(ValueError, match=r"loops\[1\]"):
            arena_from_dict(_minimal_doc(loops=[{"radius": 5}, {"shape": "circle"}]))

    def test_portal_needs_endpoints(self):
        with pytest.raises(ValueError, match="inPoint"):
            arena_from_dict(_minimal_doc(portals=[{"radius": 1}]))

    def test_wall_must_be_mapping(self):
        with pytest.raises(ValueError, match="wall must be a mapping, got list"):
            arena_from_dict(_minimal_doc(wall=[1, 2]))

    def test_loop_entry_must_be_mapping(self):
        with pytest.raises(ValueError, match=r"loops\[0\] must be a mapping, got int"):
            arena_from_dict(_minimal_doc(loops=[5]))

    def test_nested_entries_must_be_mappings(self):
        with pytest.raises(ValueError, match=r"loops\[0\]\.chargePoints\[0\] must be a mapping"):
            arena_from_dict(_minimal_doc(loops=[{"radius": 5, "chargePoints": [90]}]))
        with pytest.raises(ValueError, match="wall.wallWidths must be a mapping"):
            arena_from_dict(_minimal_doc(wall={"wallWidths": 0}))

    def test_tag_must_be_string(self):
        with pytest.raises(ValueError, match="'shape' must be a string"):
            arena_from_dict(_minimal_doc(shape=[1]))
        with pytest.raises(ValueError, match=r"waterBody: 'type' must be a string"):
            arena_from_dict(_minimal_doc(waterBody={"type": 3}))

    def test_unknown_tags_pass_through(self):
        config = arena_from_dict(_minimal_doc(shape="triangle", theme="moon"))
        assert config.shape == "triangle"
        assert config.theme == "moon"


class TestArenaToDict:
    def test_camel_case_and_none_omitted(self):
        config = ArenaConfig(name="a", loops=(LoopConfig(radius=10, speed_boost=1.2),))
        doc = arena_to_dict(config)
        assert doc["loops"][0]["speedBoost"] == 1.2
        assert "spinBoost" not in doc["loops"][0]
        assert "waterBody" not in doc
        assert doc["wall"]["baseDamage"] == 5.0

    def test_points_become_mappings(self):
        doc = arena_to_dict(arena_from_dict(_minimal_doc(
            portals=[{"id": "p", "inPoint": [1, 2], "outPoint": [3, 4], "radius": 1}],
        )))
        assert doc["portals"][0]["inPoint"] == {"x": 1.0, "y": 2.0}

    def test_document_reloads_to_same_config(self):
        config = ArenaConfig(
            name="a",
            shape="hexagon",
            loops=(LoopConfig(radius=12).with_charge_points(3),),
            water_body=WaterBodyConfig(type="ring", ring_thickness=2, liquid_type="ice"),
            wall=WallConfig(wall_widths=WallWidths(top=0, uniform=1)),
        )
        assert arena_from_dict(arena_to_dict(config)) == config

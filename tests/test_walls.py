"""Tests for arenaforge.walls - wall segments, exits, and edge gaps."""

from __future__ import annotations

import pytest

from arenaforge.geometry import arena_outline
from arenaforge.schema import ArenaConfig, ExitConfig, WallConfig, WallWidths
from arenaforge.walls import (
    edge_gaps,
    exit_arcs,
    exit_edges,
    exit_spans,
    wall_arcs,
    wall_edges,
    wall_spans,
)


def _arena(**overrides) -> ArenaConfig:
    base = {"name": "walls", "width": 50.0, "height": 50.0, "shape": "circle"}
    base.update(overrides)
    return ArenaConfig(**base)


def _four_exits(width: float = 30.0) -> tuple[ExitConfig, ...]:
    return tuple(ExitConfig(angle=a, width=width) for a in (0, 90, 180, 270))


# ---------------------------------------------------------------------------
# Wall segments
# ---------------------------------------------------------------------------

class TestWallSpans:
    def test_closed_circle_has_eight_segments(self):
        segments = wall_spans(_arena())
        assert len(segments) == 8
        assert [s.index for s in segments] == list(range(8))
        assert sum(s.end_angle - s.start_angle for s in segments) == pytest.approx(360)

    def test_segment_count_follows_shape(self):
        assert len(wall_spans(_arena(shape="pentagon"))) == 5
        assert len(wall_spans(_arena(shape="rectangle"))) == 4
        assert len(wall_spans(_arena(shape="star"))) == 10

    def test_explicit_wall_count(self):
        config = _arena(wall=WallConfig(wall_count=12))
        assert len(wall_spans(config)) == 12

    def test_thickness_carried(self):
        config = _arena(wall=WallConfig(thickness=1.5))
        assert all(s.thickness == 1.5 for s in wall_spans(config))

    def test_exit_across_zero_is_cut_from_both_ends(self):
        config = _arena(exits=(ExitConfig(angle=0, width=30),))
        segments = wall_spans(config)
        assert segments[0].start_angle == pytest.approx(15)
        assert segments[-1].end_angle == pytest.approx(345)

    def test_four_exits_leave_two_thirds_walled(self):
        config = _arena(shape="octagon", exits=_four_exits())
        total = sum(s.end_angle - s.start_angle for s in wall_spans(config))
        assert total == pytest.approx(240)

    def test_disabled_exit_ignored(self):
        config = _arena(exits=(ExitConfig(angle=0, width=30, enabled=False),))
        assert exit_spans(config) == []
        assert len(wall_spans(config)) == 8

    def test_disabled_wall_has_no_segments(self):
        config = _arena(wall=WallConfig(enabled=False))
        assert wall_spans(config) == []


# ---------------------------------------------------------------------------
# Exits
# ---------------------------------------------------------------------------

class TestExits:
    def test_disabled_wall_closed_boundary(self):
        config = _arena(wall=WallConfig(enabled=False, all_exits=False))
        assert exit_spans(config) == []
        assert exit_arcs(config, 25) == []

    def test_disabled_wall_all_exits(self):
        config = _arena(wall=WallConfig(enabled=False, all_exits=True))
        assert exit_spans(config) == [(0.0, 360.0)]
        arcs = exit_arcs(config, 25)
        assert len(arcs) == 2
        assert sum(a.sweep for a in arcs) == pytest.approx(360)

    def test_wrapping_exit_is_one_arc(self):
        config = _arena(exits=(ExitConfig(angle=0, width=30),))
        arcs = exit_arcs(config, 25)
        assert len(arcs) == 1
        assert arcs[0].start_angle == pytest.approx(345)
        assert arcs[0].end_angle == pytest.approx(15)
        assert arcs[0].sweep == pytest.approx(30)

    def test_overlapping_exits_merge(self):
        config = _arena(exits=(ExitConfig(angle=90, width=30), ExitConfig(angle=100, width=30)))
        assert exit_spans(config) == [pytest.approx((75, 115))]

    def test_four_exits_four_arcs(self):
        config = _arena(shape="octagon", exits=_four_exits())
        arcs = exit_arcs(config, 25)
        assert len(arcs) == 4
        assert all(a.sweep == pytest.approx(30) for a in arcs)
        assert all(a.radius == 25 for a in arcs)


# ---------------------------------------------------------------------------
# Per-edge widths
# ---------------------------------------------------------------------------

class TestEdgeGaps:
    def test_no_widths_no_gaps(self):
        assert edge_gaps(WallConfig()) == []

    def test_zero_top_opens_top_quadrant(self):
        wall = WallConfig(wall_widths=WallWidths(top=0))
        assert edge_gaps(wall) == [pytest.approx((225, 315))]
        segments = wall_spans(_arena(wall=wall))
        assert len(segments) == 6

    def test_uniform_zero_with_right_override(self):
        wall = WallConfig(wall_widths=WallWidths(uniform=0, right=1))
        config = _arena(wall=wall)
        assert exit_spans(config) == [pytest.approx((45, 315))]
        assert len(wall_spans(config)) == 2

    def test_positive_widths_stay_closed(self):
        wall = WallConfig(wall_widths=WallWidths(uniform=1.0))
        assert edge_gaps(wall) == []


class TestWallArcs:
    def test_arcs_on_radius(self):
        arcs = wall_arcs(_arena(), 25)
        assert len(arcs) == 8
        for arc in arcs:
            assert arc.radius == 25
            assert arc.sweep == pytest.approx(45)
            assert arc.clockwise


class TestWallEdges:
    def test_racetrack_walls_trace_the_floor(self):
        config = _arena(shape="racetrack", width=60, height=36, wall=WallConfig(wall_count=12))
        floor = arena_outline("racetrack", 60, 36)
        edges = wall_edges(config, floor)
        assert len(edges) == 12
        assert sum(e.sweep for e in edges) == pytest.approx(360)
        for edge in edges:
            for p in edge.points:
                assert floor.edge_distance(p) == pytest.approx(0, abs=1e-6)
        assert edges[0].start.x == pytest.approx(30)

    def test_exit_edges_reach_the_caps(self):
        config = _arena(
            shape="racetrack", width=60, height=36,
            exits=(ExitConfig(angle=0, width=20), ExitConfig(angle=180, width=20)),
        )
        floor = arena_outline("racetrack", 60, 36)
        first, second = exit_edges(config, floor)
        assert first.start_angle == pytest.approx(350)
        assert first.sweep == pytest.approx(20)
        assert max(p.x for p in first.points) == pytest.approx(30)
        assert min(p.x for p in second.points) == pytest.approx(-30)

    def test_open_boundary_is_one_edge(self):
        config = _arena(wall=WallConfig(enabled=False, all_exits=True))
        floor = arena_outline("circle", 50, 50)
        assert wall_edges(config, floor) == []
        (edge,) = exit_edges(config, floor)
        assert edge.sweep == pytest.approx(360)

"""arenaforge/walls.py - Boundary wall segments and exit gaps.

Resolves WallConfig + ExitConfig into angular spans around the arena
boundary and turns them into arcs or stretches of the floor outline. Spans
are ``(start, end)`` degree pairs with ``0 <= start < end <= 360``; an exit
crossing 0 degrees is split in two internally and rejoined when arcs and
edges are produced.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from arenaforge.geometry import (
    ArcDescriptor,
    EdgeDescriptor,
    PathDescriptor,
    generate_arc,
    outline_edge,
)
from arenaforge.schema import ORIGIN, ArenaConfig, WallConfig

Span = tuple[float, float]

MIN_SPAN = 0.1  # degrees; slivers narrower than this are dropped

EDGE_CENTERS: dict[str, float] = {
    "right": 0.0,
    "bottom": 90.0,
    "left": 180.0,
    "top": 270.0,
}
EDGE_SPAN = 90.0


@dataclass(frozen=True)
class WallSegment:
    index: int  # which of the wall_count evenly spaced segments this piece belongs to
    start_angle: float
    end_angle: float
    thickness: float


# ---------------------------------------------------------------------------
# Span arithmetic
# ---------------------------------------------------------------------------

def _unwrap(center: float, width: float) -> list[Span]:
    """Spans covering ``width`` degrees centred on ``center``."""
    if width >= 360.0:
        return [(0.0, 360.0)]
    start = (center - width / 2) % 360.0
    end = start + width
    if end <= 360.0:
        return [(start, end)]
    return [(start, 360.0), (0.0, end - 360.0)]


def _merge(spans: list[Span]) -> list[Span]:
    merged: list[Span] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def _subtract(span: Span, cuts: list[Span]) -> list[Span]:
    pieces = [span]
    for cut_start, cut_end in cuts:
        remaining: list[Span] = []
        for start, end in pieces:
            if cut_end <= start or cut_start >= end:
                remaining.append((start, end))
                continue
            if cut_start > start:
                remaining.append((start, cut_start))
            if cut_end < end:
                remaining.append((cut_end, end))
        pieces = remaining
    return [(s, e) for s, e in pieces if e - s >= MIN_SPAN]


def _rejoin(spans: list[Span]) -> list[Span]:
    """Fuse a span ending at 360 with one starting at 0 into one wrapping span."""
    if len(spans) > 1 and spans[0][0] <= 0.0 and spans[-1][1] >= 360.0:
        first, last = spans[0], spans[-1]
        return [(last[0], first[1] + 360.0)] + spans[1:-1]
    return spans


def _arcs(spans: list[Span], radius: float, center: Any) -> list[ArcDescriptor]:
    """Arcs for spans that may exceed 180 degrees or end past 360."""
    arcs: list[ArcDescriptor] = []
    for start, end in spans:
        width = end - start
        chunks = max(1, math.ceil(width / 180.0 - 1e-9))
        step = width / chunks
        for k in range(chunks):
            a = start + k * step
            arcs.append(generate_arc(center, radius, a, a + step))
    return arcs


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def edge_gaps(wall: WallConfig) -> list[Span]:
    """Exit spans opened by per-edge wall widths of 0."""
    if wall.wall_widths is None:
        return []
    gaps: list[Span] = []
    for edge, center in EDGE_CENTERS.items():
        width = wall.wall_widths.width_for(edge)
        if width is not None and width <= 0:
            gaps.extend(_unwrap(center, EDGE_SPAN))
    return gaps


def exit_spans(config: ArenaConfig) -> list[Span]:
    """Merged exit spans of the boundary.

    A disabled wall is either entirely open (``all_exits``) or entirely
    closed. An enabled wall opens at every enabled ExitConfig and at edges
    whose width resolves to 0.
    """
    wall = config.wall
    if not wall.enabled:
        return [(0.0, 360.0)] if wall.all_exits else []
    spans: list[Span] = []
    for exit_cfg in config.exits:
        if exit_cfg.enabled and exit_cfg.width > 0:
            spans.extend(_unwrap(exit_cfg.angle, exit_cfg.width))
    spans.extend(edge_gaps(wall))
    return _merge(spans)


def wall_spans(config: ArenaConfig) -> list[WallSegment]:
    """Evenly spaced wall segments with the exit spans cut out."""
    wall = config.wall
    if not wall.enabled:
        return []
    count = wall.resolved_wall_count(config.shape)
    if count <= 0:
        return []
    step = 360.0 / count
    cuts = exit_spans(config)
    segments: list[WallSegment] = []
    for i in range(count):
        for start, end in _subtract((i * step, (i + 1) * step), cuts):
            segments.append(WallSegment(i, start, end, wall.thickness))
    return segments


def wall_arcs(config: ArenaConfig, radius: float, center: Any = ORIGIN) -> list[ArcDescriptor]:
    return _arcs([(s.start_angle, s.end_angle) for s in wall_spans(config)], radius, center)


def exit_arcs(config: ArenaConfig, radius: float, center: Any = ORIGIN) -> list[ArcDescriptor]:
    return _arcs(_rejoin(exit_spans(config)), radius, center)


def wall_edges(config: ArenaConfig, floor: PathDescriptor) -> list[EdgeDescriptor]:
    """Wall segments traced along the floor outline."""
    return [outline_edge(floor, s.start_angle, s.end_angle) for s in wall_spans(config)]


def exit_edges(config: ArenaConfig, floor: PathDescriptor) -> list[EdgeDescriptor]:
    """Exit gaps traced along the floor outline, one per merged exit span."""
    return [outline_edge(floor, start, end) for start, end in _rejoin(exit_spans(config))]

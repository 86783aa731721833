"""arenaforge/layout.py - Whole-arena geometry assembly.

Runs the shape and arc generators against every geometric field of an
ArenaConfig and returns the outlines a renderer or physics layer needs, in
arena units around the origin. Canvas scale and translation stay with the
caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from arenaforge.constants import LOOP_SHAPES
from arenaforge.errors import UnsupportedShape
from arenaforge.geometry import (
    EdgeDescriptor,
    PathDescriptor,
    RingDescriptor,
    arena_outline,
    generate_ring_path,
    generate_shape_path,
    polygon_path,
)
from arenaforge.schema import ORIGIN, ArenaConfig, LoopConfig, Point, RotationBodyConfig, WaterBodyConfig
from arenaforge.walls import exit_edges, wall_edges

Outline = Union[PathDescriptor, RingDescriptor]


@dataclass(frozen=True)
class ChargePointMarker:
    loop_index: int
    position: Point
    radius: float
    recharge_rate: float
    color: str


@dataclass(frozen=True)
class ArenaLayout:
    floor: PathDescriptor
    loops: tuple[Outline, ...]
    charge_points: tuple[ChargePointMarker, ...]
    water: Optional[Outline]
    wall_edges: tuple[EdgeDescriptor, ...]
    exit_edges: tuple[EdgeDescriptor, ...]
    rotation_bodies: tuple[PathDescriptor, ...]

    def to_svg(self) -> dict:
        """SVG path strings keyed by feature, for quick previews and export."""
        return {
            "floor": self.floor.to_svg(),
            "loops": [outline.to_svg() for outline in self.loops],
            "water": self.water.to_svg() if self.water is not None else None,
            "walls": [edge.to_svg() for edge in self.wall_edges],
            "exits": [edge.to_svg() for edge in self.exit_edges],
            "rotationBodies": [path.to_svg() for path in self.rotation_bodies],
        }


# ---------------------------------------------------------------------------
# Per-feature builders
# ---------------------------------------------------------------------------

def loop_line(loop: LoopConfig) -> PathDescriptor:
    """The line a top rides along; a ring loop's line is its centre circle."""
    rotation = loop.rotation or 0.0
    if loop.shape == "ring":
        return generate_shape_path("circle", ORIGIN, loop.radius, rotation=rotation)
    return generate_shape_path(
        loop.shape, ORIGIN, loop.radius, loop.width, loop.height, rotation=rotation,
    )


def loop_outline(loop: LoopConfig) -> Outline:
    """Path of a loop, or a ring pair when the loop is ring-shaped."""
    if loop.shape == "ring":
        half = (loop.ring_thickness or 1.0) / 2
        return generate_ring_path(
            "ring", ORIGIN, max(loop.radius - half, 0.0), loop.radius + half,
            rotation=loop.rotation or 0.0,
        )
    return loop_line(loop)


def _charge_markers(index: int, loop: LoopConfig) -> list[ChargePointMarker]:
    # Charge point angles are relative to the loop, so they turn with it.
    line = loop_line(loop)
    rotation = loop.rotation or 0.0
    return [
        ChargePointMarker(
            loop_index=index,
            position=line.point_at_angle(point.angle + rotation),
            radius=point.radius,
            recharge_rate=point.recharge_rate,
            color=point.color,
        )
        for point in loop.charge_points
    ]


def _grow(value: Optional[float], delta: float) -> Optional[float]:
    return None if value is None else max(value + delta, 0.0)


def water_outline(config: ArenaConfig, water: WaterBodyConfig) -> Outline:
    """Outline of the water body.

    center: the water's own shape at the origin.
    moat: a band of ``ring_thickness`` centred on ``loops[loop_index]``.
    ring: a band of ``ring_thickness`` inside the arena boundary.

    Raises:
        ValueError: If a moat references a loop that does not exist.
    """
    rotation = water.rotation or 0.0
    thickness = water.ring_thickness or 1.0

    if water.type == "moat":
        index = water.loop_index
        if index is None or not 0 <= index < len(config.loops):
            raise ValueError(f"Moat loopIndex {index!r} does not reference an existing loop")
        loop = config.loops[index]
        shape = loop.shape if loop.shape in LOOP_SHAPES else water.shape
        outer_radius = loop.radius + thickness / 2
        inner_radius = max(loop.radius - thickness / 2, 0.0)
        return generate_ring_path(
            shape,
            ORIGIN,
            inner_radius,
            outer_radius,
            _grow(loop.width, thickness),
            _grow(loop.height, thickness),
            rotation=loop.rotation or rotation,
        )

    if water.type == "ring":
        rotation = config.rotation or 0.0
        return RingDescriptor(
            outer=arena_outline(config.shape, config.width, config.height, rotation),
            inner=arena_outline(
                config.shape,
                max(config.width - 2 * thickness, 0.0),
                max(config.height - 2 * thickness, 0.0),
                rotation,
            ),
        )

    if water.type == "center":
        if water.shape == "ring":
            radius = water.radius or 10.0
            return generate_ring_path(
                "ring", ORIGIN, max(radius - thickness, 0.0), radius, rotation=rotation,
            )
        radius = water.radius
        if radius is None:
            radius = max(water.width or 0.0, water.height or 0.0) / 2
        return generate_shape_path(
            water.shape, ORIGIN, radius, water.width, water.height, rotation=rotation,
        )

    raise ValueError(f"Unknown water body type: {water.type!r}")


def rotation_body_outline(body: RotationBodyConfig) -> PathDescriptor:
    if body.shape == "polygon":
        return polygon_path(body.sides, body.position, body.radius or 0.0)
    if body.shape == "rectangle":
        return generate_shape_path(
            "rectangle", body.position, 0.0, body.width or 0.0, body.height or 0.0,
        )
    if body.shape in ("circle", "star"):
        return generate_shape_path(body.shape, body.position, body.radius or 0.0)
    raise UnsupportedShape(body.shape, ("circle", "rectangle", "star", "polygon"))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_layout(config: ArenaConfig) -> ArenaLayout:
    """Assemble every outline of ``config``.

    The floor is the arena shape filling ``width x height`` with the
    whole-arena rotation applied; walls and exits are traced along it.

    Raises:
        UnsupportedShape: For shape tags outside the vocabularies.
        ValueError: For a moat without a valid loop.
    """
    floor = arena_outline(config.shape, config.width, config.height, config.rotation or 0.0)

    markers: list[ChargePointMarker] = []
    for i, loop in enumerate(config.loops):
        markers.extend(_charge_markers(i, loop))

    water = config.water_body
    return ArenaLayout(
        floor=floor,
        loops=tuple(loop_outline(loop) for loop in config.loops),
        charge_points=tuple(markers),
        water=water_outline(config, water) if water is not None and water.enabled else None,
        wall_edges=tuple(wall_edges(config, floor)),
        exit_edges=tuple(exit_edges(config, floor)),
        rotation_bodies=tuple(rotation_body_outline(b) for b in config.rotation_bodies),
    )

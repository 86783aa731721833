"""arenaforge/geometry.py - Shape Geometry Generator.

Turns a shape tag plus centre and size parameters into closed boundary
geometry, and boundary angles into circular arcs or stretches of an outline.
Renderer-agnostic: every descriptor exposes its points and an SVG path
string; scaling to a canvas belongs to the caller.

Angle convention: degrees, 0 along +x, increasing toward +y. With a y-down
screen (SVG, canvas) increasing angles run clockwise and -90 points up.
No randomness, no I/O.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any, Callable, Optional

import numpy as np

from arenaforge.constants import (
    ARENA_SHAPES,
    CURVE_SEGMENTS,
    EPSILON,
    LOOP_SHAPES,
    POLYGON_SIDES,
    STAR_INNER_RATIO,
    STAR_POINTS,
)
from arenaforge.errors import GeometryError, UnsupportedShape
from arenaforge.schema import ORIGIN, Point, as_point


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

def _fmt(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _xy(p: Point) -> str:
    return f"{_fmt(p.x)} {_fmt(p.y)}"


@dataclass(frozen=True)
class PathDescriptor:
    """A closed outline. ``vertices`` close implicitly back to vertex 0.

    ``kind`` tells renderers whether the outline is exact (``polygon``) or a
    sampled curve (``ellipse``, ``racetrack``); curved kinds render with true
    SVG arcs from ``rx``/``ry``.
    """

    shape: str
    center: Point
    vertices: tuple[Point, ...]
    kind: str = "polygon"
    rx: float = 0.0
    ry: float = 0.0
    rotation: float = 0.0

    def to_svg(self) -> str:
        if self.kind == "ellipse":
            rot = _fmt(self.rotation)
            a = _rotate_about(Point(self.center.x + self.rx, self.center.y), self.center, self.rotation)
            b = _rotate_about(Point(self.center.x - self.rx, self.center.y), self.center, self.rotation)
            arc = f"A {_fmt(self.rx)} {_fmt(self.ry)} {rot} 0 1"
            return f"M {_xy(a)} {arc} {_xy(b)} {arc} {_xy(a)} Z"
        if self.kind == "racetrack":
            half = self.rx - self.ry  # half the straight length
            local = [
                Point(-half, -self.ry),
                Point(half, -self.ry),
                Point(half, self.ry),
                Point(-half, self.ry),
            ]
            tl, tr, br, bl = (
                _rotate_about(Point(self.center.x + p.x, self.center.y + p.y), self.center, self.rotation)
                for p in local
            )
            cap = f"A {_fmt(self.ry)} {_fmt(self.ry)} 0 0 1"
            return f"M {_xy(tl)} L {_xy(tr)} {cap} {_xy(br)} L {_xy(bl)} {cap} {_xy(tl)} Z"
        if not self.vertices:
            return ""
        head, *rest = self.vertices
        return " ".join([f"M {_xy(head)}"] + [f"L {_xy(p)}" for p in rest] + ["Z"])

    def bounds(self) -> tuple[float, float, float, float]:
        """Axis-aligned ``(min_x, min_y, max_x, max_y)`` of the vertex ring."""
        xs = [p.x for p in self.vertices]
        ys = [p.y for p in self.vertices]
        return min(xs), min(ys), max(xs), max(ys)

    def contains(self, point: Any) -> bool:
        """Even-odd point-in-polygon test against the vertex ring.

        Ellipses test against the true curve rather than the sampled ring.
        """
        p = as_point(point)
        if self.kind == "ellipse" and self.rx > 0 and self.ry > 0:
            local = _rotate_about(p, self.center, -self.rotation)
            dx, dy = local.x - self.center.x, local.y - self.center.y
            return (dx / self.rx) ** 2 + (dy / self.ry) ** 2 <= 1.0 + EPSILON
        inside = False
        verts = self.vertices
        j = len(verts) - 1
        for i in range(len(verts)):
            a, b = verts[i], verts[j]
            if (a.y > p.y) != (b.y > p.y):
                x_cross = a.x + (p.y - a.y) * (b.x - a.x) / (b.y - a.y)
                if p.x < x_cross:
                    inside = not inside
            j = i
        return inside

    def point_at_angle(self, angle: float) -> Point:
        """Where the ray from ``center`` at ``angle`` degrees leaves the outline.

        Every shape this module builds is star-shaped about its centre, so
        the ray crosses the outline exactly once.
        """
        if self.kind == "ellipse":
            local = math.radians(angle - self.rotation)
            c, s = math.cos(local), math.sin(local)
            denom = math.hypot(c * self.ry, s * self.rx)
            dist = 0.0 if denom == 0 else self.rx * self.ry / denom
            return polar_point(self.center, dist, angle)

        rad = math.radians(angle)
        dx, dy = math.cos(rad), math.sin(rad)
        best: Optional[float] = None
        verts = self.vertices
        for i in range(len(verts)):
            a, b = verts[i], verts[(i + 1) % len(verts)]
            ex, ey = b.x - a.x, b.y - a.y
            denom = dx * ey - dy * ex
            if abs(denom) < 1e-12:
                continue
            wx, wy = a.x - self.center.x, a.y - self.center.y
            t = (wx * ey - wy * ex) / denom
            u = (wx * dy - wy * dx) / denom
            if t >= -EPSILON and -EPSILON <= u <= 1.0 + EPSILON and (best is None or t < best):
                best = max(t, 0.0)
        if best is None:
            raise GeometryError(f"Ray at {angle} degrees does not meet the {self.shape} outline")
        return Point(self.center.x + best * dx, self.center.y + best * dy)

    def edge_distance(self, point: Any) -> float:
        """Shortest distance from ``point`` to the vertex ring."""
        p = as_point(point)
        verts = self.vertices
        return min(
            _segment_distance(p, verts[i], verts[(i + 1) % len(verts)])
            for i in range(len(verts))
        )


@dataclass(frozen=True)
class EdgeDescriptor:
    """An open stretch of an outline, swept toward increasing angles.

    ``start_angle`` is normalised to [0, 360); ``sweep`` is in (0, 360].
    """

    start_angle: float
    sweep: float
    points: tuple[Point, ...]

    @property
    def end_angle(self) -> float:
        return (self.start_angle + self.sweep) % 360.0

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    @property
    def length(self) -> float:
        return sum(
            math.hypot(b.x - a.x, b.y - a.y) for a, b in zip(self.points, self.points[1:])
        )

    def to_svg(self) -> str:
        head, *rest = self.points
        return " ".join([f"M {_xy(head)}"] + [f"L {_xy(p)}" for p in rest])


@dataclass(frozen=True)
class RingDescriptor:
    """Outer and inner boundary of a band (moat, ring water, ring loop)."""

    outer: PathDescriptor
    inner: PathDescriptor

    def to_svg(self) -> str:
        # Two subpaths; render with fill-rule="evenodd".
        return f"{self.outer.to_svg()} {self.inner.to_svg()}"

    def contains(self, point: Any) -> bool:
        return self.outer.contains(point) and not self.inner.contains(point)


@dataclass(frozen=True)
class ArcDescriptor:
    """The shorter circular arc from ``start_angle`` to ``end_angle``.

    Angles are normalised to [0, 360). ``clockwise`` is True when the arc
    runs toward increasing angles (clockwise on a y-down screen).
    """

    center: Point
    radius: float
    start_angle: float
    end_angle: float
    sweep: float
    clockwise: bool

    @property
    def start(self) -> Point:
        return polar_point(self.center, self.radius, self.start_angle)

    @property
    def end(self) -> Point:
        return polar_point(self.center, self.radius, self.end_angle)

    @property
    def mid_angle(self) -> float:
        step = self.sweep / 2 if self.clockwise else -self.sweep / 2
        return (self.start_angle + step) % 360.0

    @property
    def length(self) -> float:
        return math.radians(self.sweep) * self.radius

    def sample(self, n: int = 16) -> tuple[Point, ...]:
        """``n + 1`` points from start to end along the arc."""
        direction = 1.0 if self.clockwise else -1.0
        angles = self.start_angle + direction * np.linspace(0.0, self.sweep, n + 1)
        return _ellipse_points(self.center, self.radius, self.radius, angles, 0.0)

    def to_svg(self) -> str:
        if self.sweep <= EPSILON:
            return f"M {_xy(self.start)}"
        flag = 1 if self.clockwise else 0
        r = _fmt(self.radius)
        return f"M {_xy(self.start)} A {r} {r} 0 0 {flag} {_xy(self.end)}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def polar_point(center: Any, radius: float, angle: float) -> Point:
    """Point at ``angle`` degrees and distance ``radius`` from ``center``."""
    c = as_point(center)
    rad = math.radians(angle)
    return Point(c.x + radius * math.cos(rad), c.y + radius * math.sin(rad))


def _rotate_about(p: Point, center: Point, rotation: float) -> Point:
    if not rotation:
        return p
    rad = math.radians(rotation)
    c, s = math.cos(rad), math.sin(rad)
    dx, dy = p.x - center.x, p.y - center.y
    return Point(center.x + dx * c - dy * s, center.y + dx * s + dy * c)


def _segment_distance(p: Point, a: Point, b: Point) -> float:
    ex, ey = b.x - a.x, b.y - a.y
    length_sq = ex * ex + ey * ey
    if length_sq == 0:
        return math.hypot(p.x - a.x, p.y - a.y)
    t = max(0.0, min(1.0, ((p.x - a.x) * ex + (p.y - a.y) * ey) / length_sq))
    return math.hypot(p.x - (a.x + t * ex), p.y - (a.y + t * ey))


def _place(xs: np.ndarray, ys: np.ndarray, center: Point, rotation: float) -> tuple[Point, ...]:
    """Rotate local coordinates about the origin, then translate to ``center``."""
    if rotation:
        rad = math.radians(rotation)
        c, s = math.cos(rad), math.sin(rad)
        xs, ys = xs * c - ys * s, xs * s + ys * c
    xs = xs + center.x
    ys = ys + center.y
    return tuple(Point(float(x), float(y)) for x, y in zip(xs, ys))


def _ellipse_points(
    center: Point, rx: float, ry: float, angles_deg: np.ndarray, rotation: float,
) -> tuple[Point, ...]:
    theta = np.deg2rad(np.asarray(angles_deg, dtype=float))
    return _place(rx * np.cos(theta), ry * np.sin(theta), center, rotation)


def _dedupe(points: list[Point]) -> tuple[Point, ...]:
    """Drop consecutive duplicates, including a last point equal to the first."""
    out: list[Point] = []
    for p in points:
        if out and math.isclose(p.x, out[-1].x, abs_tol=EPSILON) and math.isclose(
            p.y, out[-1].y, abs_tol=EPSILON
        ):
            continue
        out.append(p)
    if len(out) > 1 and math.isclose(out[0].x, out[-1].x, abs_tol=EPSILON) and math.isclose(
        out[0].y, out[-1].y, abs_tol=EPSILON
    ):
        out.pop()
    return tuple(out)


def _size(name: str, value: Any) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise GeometryError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(value) or value < 0:
        raise GeometryError(f"{name} must be a finite non-negative number, got {value!r}")
    return value


def _optional_size(name: str, value: Any, default: float) -> float:
    return default if value is None else _size(name, value)


def _angle(name: str, value: Any) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise GeometryError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(value):
        raise GeometryError(f"{name} must be finite, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Per-shape builders
# ---------------------------------------------------------------------------

ShapeBuilder = Callable[[Point, float, Optional[float], Optional[float], float, int], PathDescriptor]


def _regular_polygon(
    shape: str, sides: int, center: Point, radius: float, rotation: float,
) -> PathDescriptor:
    angles = -90.0 + np.arange(sides) * (360.0 / sides)
    return PathDescriptor(
        shape=shape,
        center=center,
        vertices=_ellipse_points(center, radius, radius, angles, rotation),
        rotation=rotation,
    )


def _build_circle(center, radius, width, height, rotation, segments) -> PathDescriptor:
    angles = np.arange(segments) * (360.0 / segments)
    return PathDescriptor(
        shape="circle",
        center=center,
        vertices=_ellipse_points(center, radius, radius, angles, rotation),
        kind="ellipse",
        rx=radius,
        ry=radius,
        rotation=rotation,
    )


def _build_rectangle(center, radius, width, height, rotation, segments) -> PathDescriptor:
    w = _optional_size("width", width, radius * 2)
    h = _optional_size("height", height, radius * 2)
    xs = np.array([-w / 2, w / 2, w / 2, -w / 2])
    ys = np.array([-h / 2, -h / 2, h / 2, h / 2])
    return PathDescriptor(
        shape="rectangle",
        center=center,
        vertices=_place(xs, ys, center, rotation),
        rotation=rotation,
    )


def _polygon_builder(shape: str) -> ShapeBuilder:
    sides = POLYGON_SIDES[shape]

    def build(center, radius, width, height, rotation, segments) -> PathDescriptor:
        return _regular_polygon(shape, sides, center, radius, rotation)

    return build


def _build_star(center, radius, width, height, rotation, segments) -> PathDescriptor:
    step = 360.0 / STAR_POINTS
    index = np.arange(STAR_POINTS)
    radii = np.where(index % 2 == 0, radius, radius * STAR_INNER_RATIO)
    theta = np.deg2rad(index * step)
    return PathDescriptor(
        shape="star",
        center=center,
        vertices=_place(radii * np.cos(theta), radii * np.sin(theta), center, rotation),
        rotation=rotation,
    )


def _build_oval(center, radius, width, height, rotation, segments) -> PathDescriptor:
    rx = _optional_size("width", width, radius * 2) / 2
    ry = _optional_size("height", height, radius * 2) / 2
    angles = np.arange(segments) * (360.0 / segments)
    return PathDescriptor(
        shape="oval",
        center=center,
        vertices=_ellipse_points(center, rx, ry, angles, rotation),
        kind="ellipse",
        rx=rx,
        ry=ry,
        rotation=rotation,
    )


def _build_racetrack(center, radius, width, height, rotation, segments) -> PathDescriptor:
    w = _optional_size("width", width, radius * 2)
    h = _optional_size("height", height, radius)
    cap = h / 2
    half = max(w - h, 0.0) / 2
    n = max(segments // 2, 2)
    right = np.linspace(-90.0, 90.0, n + 1)
    left = np.linspace(90.0, 270.0, n + 1)
    xs = np.concatenate([half + cap * np.cos(np.deg2rad(right)), -half + cap * np.cos(np.deg2rad(left))])
    ys = np.concatenate([cap * np.sin(np.deg2rad(right)), cap * np.sin(np.deg2rad(left))])
    return PathDescriptor(
        shape="racetrack",
        center=center,
        vertices=_dedupe(list(_place(xs, ys, center, rotation))),
        kind="racetrack",
        rx=half + cap,
        ry=cap,
        rotation=rotation,
    )


SHAPE_BUILDERS: dict[str, ShapeBuilder] = {
    "circle": _build_circle,
    "rectangle": _build_rectangle,
    "pentagon": _polygon_builder("pentagon"),
    "hexagon": _polygon_builder("hexagon"),
    "octagon": _polygon_builder("octagon"),
    "star": _build_star,
    "oval": _build_oval,
    "racetrack": _build_racetrack,
}

# Shapes whose size comes from width and height rather than a radius.
EXTENT_SHAPES = ("rectangle", "oval", "racetrack")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def generate_shape_path(
    shape: str,
    center: Any,
    radius: float,
    width: Optional[float] = None,
    height: Optional[float] = None,
    *,
    rotation: float = 0.0,
    segments: int = CURVE_SEGMENTS,
) -> PathDescriptor:
    """Build the closed outline of ``shape`` around ``center``.

    Args:
        shape: One of ARENA_SHAPES.
        center: Point, ``(x, y)`` pair or ``{"x", "y"}`` mapping.
        radius: Circumscribing radius (polygons, star, circle).
        width: Full width for rectangle, oval and racetrack.
        height: Full height for rectangle, oval and racetrack.
        rotation: Degrees to rotate the outline about its centre.
        segments: Sampling density for curved outlines.

    Returns:
        PathDescriptor with the vertex ring and SVG rendering.

    Raises:
        UnsupportedShape: If ``shape`` is not in ARENA_SHAPES.
        MalformedPoint: If ``center`` is not a finite point.
        GeometryError: If a size is negative or non-finite.
    """
    if not isinstance(shape, str) or shape not in SHAPE_BUILDERS:
        raise UnsupportedShape(shape, ARENA_SHAPES)
    c = as_point(center)
    r = _size("radius", radius)
    rot = _angle("rotation", rotation or 0.0)
    if segments < 3:
        raise GeometryError(f"segments must be at least 3, got {segments}")
    return SHAPE_BUILDERS[shape](c, r, width, height, rot, segments)


def polygon_path(sides: int, center: Any, radius: float, *, rotation: float = 0.0) -> PathDescriptor:
    """Regular ``sides``-gon with vertex 0 pointing up (-90 degrees)."""
    if isinstance(sides, bool) or not isinstance(sides, int) or sides < 3:
        raise GeometryError(f"A polygon needs an integer number of sides >= 3, got {sides!r}")
    return _regular_polygon(
        "polygon", sides, as_point(center), _size("radius", radius), _angle("rotation", rotation),
    )


def generate_ring_path(
    shape: str,
    center: Any,
    inner_radius: float,
    outer_radius: float,
    width: Optional[float] = None,
    height: Optional[float] = None,
    *,
    rotation: float = 0.0,
) -> RingDescriptor:
    """Outer/inner boundary pair of a band following ``shape``.

    ``width``/``height`` size the outer boundary; the inner boundary is scaled
    by ``inner_radius / outer_radius``. The ``ring`` tag draws circles.

    Raises:
        UnsupportedShape: If ``shape`` is not in LOOP_SHAPES.
        GeometryError: If the radii do not describe a band.
    """
    if not isinstance(shape, str) or shape not in LOOP_SHAPES:
        raise UnsupportedShape(shape, LOOP_SHAPES)
    inner = _size("inner_radius", inner_radius)
    outer = _size("outer_radius", outer_radius)
    if inner >= outer:
        raise GeometryError(
            f"inner_radius ({inner}) must be smaller than outer_radius ({outer})"
        )
    base = "circle" if shape == "ring" else shape
    ratio = inner / outer
    inner_w = None if width is None else width * ratio
    inner_h = None if height is None else height * ratio
    return RingDescriptor(
        outer=generate_shape_path(base, center, outer, width, height, rotation=rotation),
        inner=generate_shape_path(base, center, inner, inner_w, inner_h, rotation=rotation),
    )


def generate_arc(center: Any, radius: float, start_angle: float, end_angle: float) -> ArcDescriptor:
    """The shorter arc between two boundary angles, wrapping through 0.

    ``generate_arc(c, r, 350, 10)`` is a 20 degree arc; equal angles give a
    zero-length arc. At exactly 180 degrees the increasing direction wins.
    """
    c = as_point(center)
    r = _size("radius", radius)
    start = _angle("start_angle", start_angle) % 360.0
    end = _angle("end_angle", end_angle) % 360.0
    delta = (end - start) % 360.0
    if delta <= 180.0:
        return ArcDescriptor(c, r, start, end, sweep=delta, clockwise=True)
    return ArcDescriptor(c, r, start, end, sweep=360.0 - delta, clockwise=False)


@lru_cache(maxsize=64)
def arena_outline(
    shape: str,
    width: float,
    height: float,
    rotation: float = 0.0,
    segments: int = CURVE_SEGMENTS,
) -> PathDescriptor:
    """Floor outline of an arena: ``shape`` filling ``width x height``.

    Rectangle, oval and racetrack take the extents directly. Circle, the
    regular polygons and the star are built on the unit circle and stretched
    by ``width/2`` and ``height/2``, so a square arena gets the regular shape
    of radius ``width/2`` and a wide one a stretched copy.
    """
    if not isinstance(shape, str) or shape not in SHAPE_BUILDERS:
        raise UnsupportedShape(shape, ARENA_SHAPES)
    w = _size("width", width)
    h = _size("height", height)
    rot = _angle("rotation", rotation or 0.0)
    if shape in EXTENT_SHAPES:
        return generate_shape_path(
            shape, ORIGIN, min(w, h) / 2, w, h, rotation=rot, segments=segments,
        )
    unit = SHAPE_BUILDERS[shape](ORIGIN, 1.0, None, None, 0.0, segments)
    sx, sy = w / 2, h / 2
    xs = np.array([p.x for p in unit.vertices]) * sx
    ys = np.array([p.y for p in unit.vertices]) * sy
    return replace(
        unit,
        vertices=_place(xs, ys, ORIGIN, rot),
        rx=unit.rx * sx,
        ry=unit.ry * sy,
        rotation=rot,
    )


def outline_edge(
    outline: PathDescriptor, start_angle: float, end_angle: float, *, step: float = 5.0,
) -> EdgeDescriptor:
    """The stretch of ``outline`` from ``start_angle`` toward increasing angles.

    ``end_angle`` may exceed 360 for stretches that wrap through 0. Points are
    taken where rays from the outline's centre meet it, at most ``step``
    degrees apart, plus every vertex inside the stretch so corners survive.
    """
    start = _angle("start_angle", start_angle)
    sweep = _angle("end_angle", end_angle) - start
    if not 0 < sweep <= 360.0:
        raise GeometryError(f"An outline edge needs a sweep in (0, 360], got {sweep}")
    n = max(1, math.ceil(sweep / step - 1e-9))
    offsets = set(np.linspace(0.0, sweep, n + 1).tolist())
    if outline.kind != "ellipse":
        for v in outline.vertices:
            angle = math.degrees(math.atan2(v.y - outline.center.y, v.x - outline.center.x))
            offset = (angle - start) % 360.0
            if EPSILON < offset < sweep - EPSILON:
                offsets.add(offset)
    points = tuple(outline.point_at_angle(start + off) for off in sorted(offsets))
    return EdgeDescriptor(start_angle=start % 360.0, sweep=sweep, points=points)


def circle_inside_bounds(
    shape: str,
    width: float,
    height: float,
    x: float,
    y: float,
    radius: float,
    rotation: float = 0.0,
) -> bool:
    """Whether a circle lies fully inside the arena floor.

    The floor is ``arena_outline(shape, width, height, rotation)``.
    Rectangles use their box, racetracks their straight section plus caps
    and circular floors the disc, all exactly. Other floors require the
    centre inside the outline and at least ``radius`` from every edge of its
    vertex ring.
    """
    if shape not in ARENA_SHAPES:
        raise UnsupportedShape(shape, ARENA_SHAPES)
    if rotation:
        local = _rotate_about(Point(x, y), ORIGIN, -rotation)
        x, y = local.x, local.y
    half_w, half_h = width / 2, height / 2
    if shape == "rectangle":
        return abs(x) + radius <= half_w + EPSILON and abs(y) + radius <= half_h + EPSILON
    if shape == "racetrack":
        half = max(width - height, 0.0) / 2
        dx = max(abs(x) - half, 0.0)
        return math.hypot(dx, y) + radius <= half_h + EPSILON
    if radius >= min(half_w, half_h):
        return False
    if shape in ("circle", "oval") and math.isclose(width, height):
        return math.hypot(x, y) + radius <= half_w + EPSILON
    outline = arena_outline(shape, width, height)
    return outline.contains((x, y)) and outline.edge_distance((x, y)) >= radius - EPSILON

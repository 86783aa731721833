"""arenaforge/schema.py - ArenaConfig value model and document codec.

Every entity is a frozen dataclass owned by exactly one ArenaConfig. Editors
compose the ``with_*`` transforms instead of mutating fields; each returns a
new config and leaves the original untouched.

The on-disk / wire form is the camelCase JSON-shaped document the editor
produces. ``arena_from_dict`` raises ValueError only for structurally broken
documents; tag vocabularies and ranges are left to the validator so that
every problem can be reported together.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional

from arenaforge.constants import (
    DEFAULT_CHARGE_POINT_COLOR,
    DEFAULT_CHARGE_POINT_RADIUS,
    DEFAULT_RECHARGE_RATE,
    LIQUID_COLORS,
    PIT_DAMAGE_PER_SECOND,
    PIT_ESCAPE_CHANCE,
    POLYGON_SIDES,
)
from arenaforge.errors import MalformedPoint, UnsupportedLiquid


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Point:
    x: float
    y: float


def as_point(value: Any) -> Point:
    """Coerce a Point, ``(x, y)`` pair or ``{"x", "y"}`` mapping to a Point.

    Raises:
        MalformedPoint: For any other shape of value or non-finite coordinates.
    """
    if isinstance(value, Point):
        x, y = value.x, value.y
    elif isinstance(value, Mapping):
        if "x" not in value or "y" not in value:
            raise MalformedPoint(value)
        x, y = value["x"], value["y"]
    elif isinstance(value, (tuple, list)) and len(value) == 2:
        x, y = value
    else:
        raise MalformedPoint(value)
    try:
        x, y = float(x), float(y)
    except (TypeError, ValueError):
        raise MalformedPoint(value) from None
    if not (math.isfinite(x) and math.isfinite(y)):
        raise MalformedPoint(value)
    return Point(x, y)


ORIGIN = Point(0.0, 0.0)


# ---------------------------------------------------------------------------
# Loops
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChargePointConfig:
    """A spin-recharge station fixed on a loop."""

    angle: float
    recharge_rate: float = DEFAULT_RECHARGE_RATE  # % spin per second
    radius: float = DEFAULT_CHARGE_POINT_RADIUS
    color: str = DEFAULT_CHARGE_POINT_COLOR


def make_charge_points(
    count: int,
    recharge_rate: float = DEFAULT_RECHARGE_RATE,
    radius: float = DEFAULT_CHARGE_POINT_RADIUS,
    color: str = DEFAULT_CHARGE_POINT_COLOR,
) -> tuple[ChargePointConfig, ...]:
    """Evenly spaced charge points: point i sits at ``360 / count * i`` degrees."""
    if count <= 0:
        return ()
    step = 360.0 / count
    return tuple(
        ChargePointConfig(angle=step * i, recharge_rate=recharge_rate, radius=radius, color=color)
        for i in range(count)
    )


@dataclass(frozen=True)
class LoopConfig:
    """A closed speed-boost path on the arena floor, centred on the origin."""

    radius: float
    shape: str = "circle"
    speed_boost: float = 1.0
    spin_boost: Optional[float] = None
    friction_multiplier: float = 1.0
    width: Optional[float] = None
    height: Optional[float] = None
    rotation: Optional[float] = None
    color: Optional[str] = None
    ring_thickness: Optional[float] = None
    charge_point_count: int = 0
    charge_points: tuple[ChargePointConfig, ...] = ()

    def with_charge_points(
        self, count: int, recharge_rate: Optional[float] = None,
    ) -> LoopConfig:
        """Rebuild the derived charge point array for ``count`` points.

        The recharge rate is uniform across the loop; when not given, the rate
        of the existing points is kept.
        """
        if recharge_rate is None:
            recharge_rate = (
                self.charge_points[0].recharge_rate if self.charge_points else DEFAULT_RECHARGE_RATE
            )
        return replace(
            self,
            charge_point_count=count,
            charge_points=make_charge_points(count, recharge_rate),
        )

    def with_recharge_rate(self, rate: float) -> LoopConfig:
        return replace(
            self,
            charge_points=tuple(replace(p, recharge_rate=rate) for p in self.charge_points),
        )

    def extents(self) -> tuple[float, float]:
        """Half-width and half-height of the loop's outline."""
        half_w = self.width / 2 if self.width else self.radius
        half_h = self.height / 2 if self.height else self.radius
        if self.shape == "ring" and self.ring_thickness:
            half_w += self.ring_thickness / 2
            half_h += self.ring_thickness / 2
        return half_w, half_h


# ---------------------------------------------------------------------------
# Boundary
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExitConfig:
    """An opening in the boundary wall, ``width`` degrees centred on ``angle``."""

    angle: float
    width: float
    enabled: bool = True


EDGES: tuple[str, ...] = ("top", "right", "bottom", "left")


@dataclass(frozen=True)
class WallWidths:
    """Per-edge wall widths. A resolved width of 0 leaves that edge open."""

    top: Optional[float] = None
    right: Optional[float] = None
    bottom: Optional[float] = None
    left: Optional[float] = None
    uniform: Optional[float] = None

    def width_for(self, edge: str) -> Optional[float]:
        value = getattr(self, edge)
        return self.uniform if value is None else value


@dataclass(frozen=True)
class WallConfig:
    enabled: bool = True
    all_exits: bool = False  # only meaningful while disabled: open vs closed boundary
    wall_count: Optional[int] = None
    base_damage: float = 5.0
    recoil_distance: float = 2.0
    has_spikes: bool = False
    spike_damage_multiplier: float = 1.0
    has_springs: bool = False
    spring_recoil_multiplier: float = 1.0
    thickness: float = 0.5
    wall_widths: Optional[WallWidths] = None

    def resolved_wall_count(self, shape: str) -> int:
        """Explicit segment count, else one segment per edge of the arena shape."""
        if self.wall_count is not None:
            return self.wall_count
        if shape in POLYGON_SIDES:
            return POLYGON_SIDES[shape]
        if shape == "star":
            return 10
        if shape == "rectangle":
            return 4
        return 8


# ---------------------------------------------------------------------------
# Hazards and features
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ObstacleConfig:
    type: str
    x: float
    y: float
    radius: float
    rotation: float = 0.0
    damage: float = 10.0
    recoil: float = 2.0
    destructible: bool = False
    health: Optional[float] = None


@dataclass(frozen=True)
class PitConfig:
    """A spin-draining hole. Escape odds are an engine constant."""

    x: float
    y: float
    radius: float
    damage_per_second: float = PIT_DAMAGE_PER_SECOND
    visual_depth: Optional[int] = None

    @property
    def escape_chance(self) -> float:
        return PIT_ESCAPE_CHANCE


@dataclass(frozen=True)
class WaterBodyConfig:
    enabled: bool = True
    type: str = "center"  # "center" | "moat" | "ring"
    shape: str = "circle"
    radius: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    ring_thickness: Optional[float] = None
    rotation: Optional[float] = None
    loop_index: Optional[int] = None  # moat only
    liquid_type: str = "water"
    spin_drain_rate: float = 2.0
    speed_multiplier: float = 0.6
    viscosity: float = 0.5
    color: Optional[str] = None

    @property
    def resolved_color(self) -> str:
        """Explicit colour, else the default colour of the liquid."""
        if self.color:
            return self.color
        try:
            return LIQUID_COLORS[self.liquid_type]
        except KeyError:
            raise UnsupportedLiquid(self.liquid_type, tuple(LIQUID_COLORS)) from None


@dataclass(frozen=True)
class PortalConfig:
    id: str
    in_point: Point
    out_point: Point
    radius: float
    cooldown: Optional[float] = None
    color: Optional[str] = None
    bidirectional: bool = True


@dataclass(frozen=True)
class LaserGunConfig:
    x: float
    y: float
    angle: float = 0.0
    fire_interval: float = 3.0
    damage: float = 50.0
    bullet_speed: float = 20.0
    target_mode: str = "nearest"
    warmup_time: float = 0.5
    cooldown: float = 1.0
    range: float = 40.0
    laser_color: Optional[str] = None


@dataclass(frozen=True)
class GoalObjectConfig:
    """A destructible or collectible objective."""

    id: str
    type: str
    x: float
    y: float
    radius: float
    health: float = 100.0
    score_value: float = 10.0
    color: Optional[str] = None
    shield_health: Optional[float] = None
    is_collectible: bool = False


@dataclass(frozen=True)
class RotationBodyConfig:
    """A floor region that spins tops caught in it."""

    id: str
    position: Point
    shape: str = "circle"
    radius: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    sides: int = 6
    rotation_force: float = 1.0
    direction: str = "clockwise"
    falloff: float = 0.5
    color: Optional[str] = None
    opacity: Optional[float] = None


# ---------------------------------------------------------------------------
# ArenaConfig
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ArenaConfig:
    name: str
    width: float = 50.0
    height: float = 50.0
    shape: str = "circle"
    theme: str = "metrocity"
    description: str = ""
    rotation: Optional[float] = None
    loops: tuple[LoopConfig, ...] = ()
    exits: tuple[ExitConfig, ...] = ()
    wall: WallConfig = field(default_factory=WallConfig)
    obstacles: tuple[ObstacleConfig, ...] = ()
    pits: tuple[PitConfig, ...] = ()
    water_body: Optional[WaterBodyConfig] = None
    portals: tuple[PortalConfig, ...] = ()
    laser_guns: tuple[LaserGunConfig, ...] = ()
    goal_objects: tuple[GoalObjectConfig, ...] = ()
    require_all_goals_destroyed: bool = False
    rotation_bodies: tuple[RotationBodyConfig, ...] = ()
    gravity: float = 0.0
    air_resistance: float = 0.01
    surface_friction: float = 0.02
    floor_color: Optional[str] = None
    floor_texture: Optional[str] = None
    difficulty: Optional[str] = None

    # -- pure transforms ---------------------------------------------------

    def with_loop(self, loop: LoopConfig) -> ArenaConfig:
        return replace(self, loops=self.loops + (loop,))

    def without_loop(self, index: int) -> ArenaConfig:
        return replace(self, loops=tuple(lp for i, lp in enumerate(self.loops) if i != index))

    def with_updated_loop(self, index: int, **updates: Any) -> ArenaConfig:
        loops = list(self.loops)
        loops[index] = replace(loops[index], **updates)
        return replace(self, loops=tuple(loops))

    def with_exits(self, exits) -> ArenaConfig:
        return replace(self, exits=tuple(exits))

    def with_wall(self, **updates: Any) -> ArenaConfig:
        return replace(self, wall=replace(self.wall, **updates))

    def with_obstacles(self, obstacles) -> ArenaConfig:
        return replace(self, obstacles=tuple(obstacles))

    def with_pits(self, pits) -> ArenaConfig:
        return replace(self, pits=tuple(pits))

    def with_portal(self, portal: PortalConfig) -> ArenaConfig:
        return replace(self, portals=self.portals + (portal,))

    def with_water_body(self, water_body: Optional[WaterBodyConfig]) -> ArenaConfig:
        return replace(self, water_body=water_body)

    def with_goal_objects(self, goals) -> ArenaConfig:
        return replace(self, goal_objects=tuple(goals))

    def merged(self, overrides: Mapping[str, Any]) -> ArenaConfig:
        """Overlay a partial camelCase document onto this config."""
        base = arena_to_dict(self)
        base.update(overrides)
        return arena_from_dict(base)


# ---------------------------------------------------------------------------
# Document parsing
# ---------------------------------------------------------------------------

def _num(data: Mapping, key: str, default: Any = ..., *, where: str = "arena") -> Any:
    if key not in data or data[key] is None:
        if default is ...:
            raise ValueError(f"{where}: missing required field {key!r}")
        return default
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}: {key!r} must be a number, got {value!r}")
    return float(value)


def _int(data: Mapping, key: str, default: Any = ..., *, where: str = "arena") -> Any:
    value = _num(data, key, default, where=where)
    return value if value is None else int(value)


def _list(data: Mapping, key: str, *, where: str = "arena") -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{where}: {key!r} must be a list")
    return value


def _mapping(value: Any, where: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise ValueError(f"{where} must be a mapping, got {type(value).__name__}")
    return value


def _tag(data: Mapping, key: str, default: Any, *, where: str = "arena") -> Any:
    """A vocabulary tag. Unknown strings pass through to the validator."""
    value = data.get(key, default)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{where}: {key!r} must be a string, got {value!r}")
    return value


def _point(value: Any, where: str) -> Point:
    try:
        return as_point(value)
    except MalformedPoint as exc:
        raise ValueError(f"{where}: {exc}") from None


def _parse_charge_point(data: dict, where: str) -> ChargePointConfig:
    data = _mapping(data, where)
    return ChargePointConfig(
        angle=_num(data, "angle", where=where),
        recharge_rate=_num(data, "rechargeRate", DEFAULT_RECHARGE_RATE, where=where),
        radius=_num(data, "radius", DEFAULT_CHARGE_POINT_RADIUS, where=where),
        color=data.get("color", DEFAULT_CHARGE_POINT_COLOR),
    )


def _parse_loop(data: dict, i: int) -> LoopConfig:
    where = f"loops[{i}]"
    data = _mapping(data, where)
    return LoopConfig(
        radius=_num(data, "radius", where=where),
        shape=_tag(data, "shape", "circle", where=where),
        speed_boost=_num(data, "speedBoost", 1.0, where=where),
        spin_boost=_num(data, "spinBoost", None, where=where),
        friction_multiplier=_num(data, "frictionMultiplier", 1.0, where=where),
        width=_num(data, "width", None, where=where),
        height=_num(data, "height", None, where=where),
        rotation=_num(data, "rotation", None, where=where),
        color=data.get("color"),
        ring_thickness=_num(data, "ringThickness", None, where=where),
        charge_point_count=_int(data, "chargePointCount", 0, where=where),
        charge_points=tuple(
            _parse_charge_point(cp, f"{where}.chargePoints[{j}]")
            for j, cp in enumerate(_list(data, "chargePoints", where=where))
        ),
    )


def _parse_exit(data: dict, i: int) -> ExitConfig:
    where = f"exits[{i}]"
    data = _mapping(data, where)
    return ExitConfig(
        angle=_num(data, "angle", where=where),
        width=_num(data, "width", where=where),
        enabled=bool(data.get("enabled", True)),
    )


def _parse_wall(data: dict | None) -> WallConfig:
    if data is None:
        return WallConfig()
    where = "wall"
    data = _mapping(data, where)
    widths = data.get("wallWidths")
    wall_widths = None
    if widths is not None:
        widths = _mapping(widths, "wall.wallWidths")
        wall_widths = WallWidths(**{
            name: _num(widths, name, None, where="wall.wallWidths")
            for name in EDGES + ("uniform",)
        })
    return WallConfig(
        enabled=bool(data.get("enabled", True)),
        all_exits=bool(data.get("allExits", False)),
        wall_count=_int(data, "wallCount", None, where=where),
        base_damage=_num(data, "baseDamage", 5.0, where=where),
        recoil_distance=_num(data, "recoilDistance", 2.0, where=where),
        has_spikes=bool(data.get("hasSpikes", False)),
        spike_damage_multiplier=_num(data, "spikeDamageMultiplier", 1.0, where=where),
        has_springs=bool(data.get("hasSprings", False)),
        spring_recoil_multiplier=_num(data, "springRecoilMultiplier", 1.0, where=where),
        thickness=_num(data, "thickness", 0.5, where=where),
        wall_widths=wall_widths,
    )


def _parse_obstacle(data: dict, i: int) -> ObstacleConfig:
    where = f"obstacles[{i}]"
    data = _mapping(data, where)
    return ObstacleConfig(
        type=_tag(data, "type", "rock", where=where),
        x=_num(data, "x", where=where),
        y=_num(data, "y", where=where),
        radius=_num(data, "radius", where=where),
        rotation=_num(data, "rotation", 0.0, where=where),
        damage=_num(data, "damage", 10.0, where=where),
        recoil=_num(data, "recoil", 2.0, where=where),
        destructible=bool(data.get("destructible", False)),
        health=_num(data, "health", None, where=where),
    )


def _parse_pit(data: dict, i: int) -> PitConfig:
    where = f"pits[{i}]"
    data = _mapping(data, where)
    return PitConfig(
        x=_num(data, "x", where=where),
        y=_num(data, "y", where=where),
        radius=_num(data, "radius", where=where),
        damage_per_second=_num(data, "damagePerSecond", PIT_DAMAGE_PER_SECOND, where=where),
        visual_depth=_int(data, "visualDepth", None, where=where),
    )


def _parse_water_body(data: dict | None) -> WaterBodyConfig | None:
    if data is None:
        return None
    where = "waterBody"
    data = _mapping(data, where)
    return WaterBodyConfig(
        enabled=bool(data.get("enabled", True)),
        type=_tag(data, "type", "center", where=where),
        shape=_tag(data, "shape", "circle", where=where),
        radius=_num(data, "radius", None, where=where),
        width=_num(data, "width", None, where=where),
        height=_num(data, "height", None, where=where),
        ring_thickness=_num(data, "ringThickness", None, where=where),
        rotation=_num(data, "rotation", None, where=where),
        loop_index=_int(data, "loopIndex", None, where=where),
        liquid_type=_tag(data, "liquidType", "water", where=where),
        spin_drain_rate=_num(data, "spinDrainRate", 2.0, where=where),
        speed_multiplier=_num(data, "speedMultiplier", 0.6, where=where),
        viscosity=_num(data, "viscosity", 0.5, where=where),
        color=data.get("color"),
    )


def _parse_portal(data: dict, i: int) -> PortalConfig:
    where = f"portals[{i}]"
    data = _mapping(data, where)
    if "inPoint" not in data or "outPoint" not in data:
        raise ValueError(f"{where}: portal requires 'inPoint' and 'outPoint'")
    return PortalConfig(
        id=str(data.get("id", f"portal{i + 1}")),
        in_point=_point(data["inPoint"], f"{where}.inPoint"),
        out_point=_point(data["outPoint"], f"{where}.outPoint"),
        radius=_num(data, "radius", where=where),
        cooldown=_num(data, "cooldown", None, where=where),
        color=data.get("color"),
        bidirectional=bool(data.get("bidirectional", True)),
    )


def _parse_laser_gun(data: dict, i: int) -> LaserGunConfig:
    where = f"laserGuns[{i}]"
    data = _mapping(data, where)
    return LaserGunConfig(
        x=_num(data, "x", where=where),
        y=_num(data, "y", where=where),
        angle=_num(data, "angle", 0.0, where=where),
        fire_interval=_num(data, "fireInterval", 3.0, where=where),
        damage=_num(data, "damage", 50.0, where=where),
        bullet_speed=_num(data, "bulletSpeed", 20.0, where=where),
        target_mode=_tag(data, "targetMode", "nearest", where=where),
        warmup_time=_num(data, "warmupTime", 0.5, where=where),
        cooldown=_num(data, "cooldown", 1.0, where=where),
        range=_num(data, "range", 40.0, where=where),
        laser_color=data.get("laserColor"),
    )


def _parse_goal_object(data: dict, i: int) -> GoalObjectConfig:
    where = f"goalObjects[{i}]"
    data = _mapping(data, where)
    return GoalObjectConfig(
        id=str(data.get("id", f"goal{i + 1}")),
        type=_tag(data, "type", "star", where=where),
        x=_num(data, "x", where=where),
        y=_num(data, "y", where=where),
        radius=_num(data, "radius", where=where),
        health=_num(data, "health", 100.0, where=where),
        score_value=_num(data, "scoreValue", 10.0, where=where),
        color=data.get("color"),
        shield_health=_num(data, "shieldHealth", None, where=where),
        is_collectible=bool(data.get("isCollectible", False)),
    )


def _parse_rotation_body(data: dict, i: int) -> RotationBodyConfig:
    where = f"rotationBodies[{i}]"
    data = _mapping(data, where)
    return RotationBodyConfig(
        id=str(data.get("id", f"rotation{i + 1}")),
        position=_point(data.get("position", {"x": 0, "y": 0}), f"{where}.position"),
        shape=_tag(data, "shape", "circle", where=where),
        radius=_num(data, "radius", None, where=where),
        width=_num(data, "width", None, where=where),
        height=_num(data, "height", None, where=where),
        sides=_int(data, "sides", 6, where=where),
        rotation_force=_num(data, "rotationForce", 1.0, where=where),
        direction=_tag(data, "direction", "clockwise", where=where),
        falloff=_num(data, "falloff", 0.5, where=where),
        color=data.get("color"),
        opacity=_num(data, "opacity", None, where=where),
    )


def arena_from_dict(data: Mapping[str, Any]) -> ArenaConfig:
    """Parse a camelCase arena document into an ArenaConfig.

    Raises:
        ValueError: If a required field is missing, a number or tag field
            holds the wrong type, a nested block is not a mapping, or a
            collection field is not a list.
    """
    if not isinstance(data, Mapping):
        raise ValueError("Arena document must be a mapping")
    if "name" not in data:
        raise ValueError("arena: missing required field 'name'")
    return ArenaConfig(
        name=str(data["name"]),
        description=data.get("description") or "",
        width=_num(data, "width", 50.0),
        height=_num(data, "height", 50.0),
        shape=_tag(data, "shape", "circle"),
        theme=_tag(data, "theme", "metrocity"),
        rotation=_num(data, "rotation", None),
        loops=tuple(_parse_loop(d, i) for i, d in enumerate(_list(data, "loops"))),
        exits=tuple(_parse_exit(d, i) for i, d in enumerate(_list(data, "exits"))),
        wall=_parse_wall(data.get("wall")),
        obstacles=tuple(_parse_obstacle(d, i) for i, d in enumerate(_list(data, "obstacles"))),
        pits=tuple(_parse_pit(d, i) for i, d in enumerate(_list(data, "pits"))),
        water_body=_parse_water_body(data.get("waterBody")),
        portals=tuple(_parse_portal(d, i) for i, d in enumerate(_list(data, "portals"))),
        laser_guns=tuple(_parse_laser_gun(d, i) for i, d in enumerate(_list(data, "laserGuns"))),
        goal_objects=tuple(
            _parse_goal_object(d, i) for i, d in enumerate(_list(data, "goalObjects"))
        ),
        require_all_goals_destroyed=bool(data.get("requireAllGoalsDestroyed", False)),
        rotation_bodies=tuple(
            _parse_rotation_body(d, i) for i, d in enumerate(_list(data, "rotationBodies"))
        ),
        gravity=_num(data, "gravity", 0.0),
        air_resistance=_num(data, "airResistance", 0.01),
        surface_friction=_num(data, "surfaceFriction", 0.02),
        floor_color=data.get("floorColor"),
        floor_texture=data.get("floorTexture"),
        difficulty=_tag(data, "difficulty", None),
    )


# ---------------------------------------------------------------------------
# Document serialisation
# ---------------------------------------------------------------------------

def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _to_doc(value: Any) -> Any:
    if isinstance(value, Point):
        return {"x": value.x, "y": value.y}
    if isinstance(value, tuple):
        return [_to_doc(v) for v in value]
    if hasattr(value, "__dataclass_fields__"):
        doc = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            doc[_camel(f.name)] = _to_doc(item)
        return doc
    return value


def arena_to_dict(config: ArenaConfig) -> dict[str, Any]:
    """Serialise to the camelCase document form; ``None`` fields are omitted."""
    return _to_doc(config)

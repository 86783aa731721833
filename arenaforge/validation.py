"""arenaforge/validation.py - Config Validator.

Checks an ArenaConfig against the schema limits and returns every violation
as a human-readable message. Never raises for bad configuration content and
never mutates its input; the editor shows the full list and the user fixes
the config and re-validates.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Union

from arenaforge.constants import (
    ANGLE_TOLERANCE,
    ARENA_SHAPES,
    ARENA_THEMES,
    DIFFICULTIES,
    GOAL_OBJECT_TYPES,
    LASER_TARGET_MODES,
    LIQUID_COLORS,
    LOOP_SHAPES,
    MAX_ARENA_SIZE,
    MAX_CHARGE_POINTS,
    MAX_GOAL_OBJECTS,
    MAX_LASER_GUNS,
    MAX_LOOPS,
    MAX_OBSTACLES,
    MAX_PORTALS,
    MAX_WALL_COUNT,
    MIN_ARENA_SIZE,
    MIN_LOOP_SEPARATION,
    MIN_WALL_COUNT,
    OBSTACLE_TYPES,
    ROTATION_BODY_SHAPES,
    ROTATION_DIRECTIONS,
    WATER_BODY_TYPES,
)
from arenaforge.geometry import circle_inside_bounds
from arenaforge.schema import EDGES, ArenaConfig, arena_from_dict


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _positive(value: Any) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


def _in_range(value: Any, low: float, high: float) -> bool:
    return isinstance(value, (int, float)) and low <= value <= high


def _bounds_checkable(config: ArenaConfig) -> bool:
    return (
        config.shape in ARENA_SHAPES
        and _positive(config.width)
        and _positive(config.height)
    )


def _inside(config: ArenaConfig, x: float, y: float, radius: float) -> bool:
    return circle_inside_bounds(
        config.shape, config.width, config.height, x, y, radius, config.rotation or 0.0,
    )


# ---------------------------------------------------------------------------
# Individual checkers
# ---------------------------------------------------------------------------

def _check_basics(config: ArenaConfig) -> list[str]:
    errors: list[str] = []
    if not isinstance(config.name, str) or not config.name.strip():
        errors.append("Arena name must not be empty")
    if not (_positive(config.width) and _positive(config.height)):
        errors.append("Arena dimensions must be positive")
    else:
        for label, value in (("width", config.width), ("height", config.height)):
            if not MIN_ARENA_SIZE <= value <= MAX_ARENA_SIZE:
                errors.append(
                    f"Arena {label} {value:g} outside supported range "
                    f"[{MIN_ARENA_SIZE:g}, {MAX_ARENA_SIZE:g}]"
                )
    if config.shape not in ARENA_SHAPES:
        errors.append(f"Unknown arena shape: {config.shape!r}")
    if config.theme not in ARENA_THEMES:
        errors.append(f"Unknown theme: {config.theme!r}")
    if config.rotation is not None and not _in_range(config.rotation, 0, 360):
        errors.append(f"Arena rotation must be between 0 and 360 degrees (got {config.rotation:g})")
    if config.difficulty is not None and config.difficulty not in DIFFICULTIES:
        errors.append(f"Unknown difficulty: {config.difficulty!r}")
    return errors


def _check_charge_point_angles(index: int, points) -> list[str]:
    """Charge points must sit evenly spaced from 0 degrees, in order."""
    errors: list[str] = []
    for j, point in enumerate(points):
        expected = 360.0 * j / len(points)
        if abs((point.angle - expected + 180.0) % 360.0 - 180.0) > ANGLE_TOLERANCE:
            errors.append(
                f"Loop {index}: charge point {j} angle {point.angle:g} should be {expected:g}"
            )
    return errors


def _check_loops(config: ArenaConfig) -> list[str]:
    errors: list[str] = []
    if len(config.loops) > MAX_LOOPS:
        errors.append(f"Maximum {MAX_LOOPS} loops allowed (got {len(config.loops)})")

    checkable = _bounds_checkable(config)
    for i, loop in enumerate(config.loops):
        if not _positive(loop.radius):
            errors.append(f"Loop {i}: radius must be positive")
        if loop.shape not in LOOP_SHAPES:
            errors.append(f"Loop {i}: unknown shape {loop.shape!r}")
        if loop.ring_thickness is not None and not _positive(loop.ring_thickness):
            errors.append(f"Loop {i}: ring thickness must be positive")
        if checkable and _positive(loop.radius):
            half_w, half_h = loop.extents()
            if half_w > config.width / 2 or half_h > config.height / 2:
                errors.append(f"Loop {i}: does not fit inside the arena")
        count = loop.charge_point_count
        if not _in_range(count, 0, MAX_CHARGE_POINTS):
            errors.append(
                f"Loop {i}: chargePointCount must be between 0 and {MAX_CHARGE_POINTS} (got {count})"
            )
        if len(loop.charge_points) != count:
            errors.append(
                f"Loop {i}: has {len(loop.charge_points)} charge points "
                f"but chargePointCount is {count}"
            )
        else:
            errors.extend(_check_charge_point_angles(i, loop.charge_points))

    for i in range(len(config.loops)):
        for j in range(i + 1, len(config.loops)):
            if abs(config.loops[i].radius - config.loops[j].radius) < MIN_LOOP_SEPARATION:
                errors.append(f"Loops {i} and {j} are too close together")
    return errors


def _check_boundary(config: ArenaConfig) -> list[str]:
    errors: list[str] = []
    for i, exit_cfg in enumerate(config.exits):
        if not (exit_cfg.width > 0 and exit_cfg.width <= 360):
            errors.append(f"Exit {i}: width must be between 0 and 360 degrees (got {exit_cfg.width:g})")

    wall = config.wall
    if not wall.enabled:
        return errors
    count = wall.resolved_wall_count(config.shape)
    if not _in_range(count, MIN_WALL_COUNT, MAX_WALL_COUNT):
        errors.append(
            f"Wall count must be between {MIN_WALL_COUNT} and {MAX_WALL_COUNT} (got {count})"
        )
    if not _positive(wall.thickness):
        errors.append("Wall thickness must be positive")
    if wall.wall_widths is not None:
        for edge in EDGES + ("uniform",):
            value = getattr(wall.wall_widths, edge)
            if value is not None and value < 0:
                errors.append(f"Wall width for {edge} edge must not be negative")
    return errors


def _check_portals(config: ArenaConfig) -> list[str]:
    errors: list[str] = []
    if len(config.portals) > MAX_PORTALS:
        errors.append(f"Maximum {MAX_PORTALS} portals allowed (got {len(config.portals)})")
    seen: set[str] = set()
    checkable = _bounds_checkable(config)
    for portal in config.portals:
        if portal.id in seen:
            errors.append(f"Duplicate portal id: {portal.id!r}")
        seen.add(portal.id)
        if not _positive(portal.radius):
            errors.append(f"Portal {portal.id}: radius must be positive")
            continue
        if checkable:
            for label, point in (("entry", portal.in_point), ("exit", portal.out_point)):
                if not _inside(config, point.x, point.y, portal.radius):
                    errors.append(f"Portal {portal.id}: {label} point lies outside the arena")
    return errors


def _check_water_body(config: ArenaConfig) -> list[str]:
    water = config.water_body
    if water is None:
        return []
    errors: list[str] = []
    # The moat loop reference must hold whether or not the water is enabled.
    if water.type == "moat":
        index = water.loop_index
        if index is None or not 0 <= index < len(config.loops):
            errors.append("Water body: moat requires loopIndex referencing an existing loop")
    if not water.enabled:
        return errors

    if water.type not in WATER_BODY_TYPES:
        errors.append(f"Water body: unknown type {water.type!r}")
    if water.shape not in LOOP_SHAPES:
        errors.append(f"Water body: unknown shape {water.shape!r}")
    if water.liquid_type not in LIQUID_COLORS:
        errors.append(f"Water body: unknown liquid type {water.liquid_type!r}")

    if water.type == "moat":
        if not _positive(water.ring_thickness):
            errors.append("Water body: moat needs a positive ring thickness")
    elif water.type == "ring":
        if not _positive(water.ring_thickness):
            errors.append("Water body: ring needs a positive ring thickness")
    elif water.type == "center":
        sized = _positive(water.radius) or (_positive(water.width) and _positive(water.height))
        if not sized:
            errors.append("Water body: center water needs a positive radius or width and height")

    if not _in_range(water.viscosity, 0, 1):
        errors.append("Water body: viscosity must be between 0 and 1")
    if water.speed_multiplier < 0:
        errors.append("Water body: speed multiplier must not be negative")
    if water.spin_drain_rate < 0:
        errors.append("Water body: spin drain rate must not be negative")
    return errors


def _check_hazards(config: ArenaConfig) -> list[str]:
    errors: list[str] = []
    if len(config.obstacles) > MAX_OBSTACLES:
        errors.append(f"Maximum {MAX_OBSTACLES} obstacles allowed for performance")
    if len(config.laser_guns) > MAX_LASER_GUNS:
        errors.append(f"Maximum {MAX_LASER_GUNS} laser guns allowed")
    if len(config.goal_objects) > MAX_GOAL_OBJECTS:
        errors.append(f"Maximum {MAX_GOAL_OBJECTS} goal objects allowed")

    checkable = _bounds_checkable(config)
    placed = (
        [("Obstacle", i, o) for i, o in enumerate(config.obstacles)]
        + [("Pit", i, p) for i, p in enumerate(config.pits)]
        + [("Goal object", i, g) for i, g in enumerate(config.goal_objects)]
    )
    for label, i, item in placed:
        if not _positive(item.radius):
            errors.append(f"{label} {i}: radius must be positive")
        elif checkable and not _inside(config, item.x, item.y, item.radius):
            errors.append(f"{label} {i}: extends outside the arena")

    for i, obstacle in enumerate(config.obstacles):
        if obstacle.type not in OBSTACLE_TYPES:
            errors.append(f"Obstacle {i}: unknown type {obstacle.type!r}")
    for i, pit in enumerate(config.pits):
        if pit.damage_per_second < 0:
            errors.append(f"Pit {i}: damage per second must not be negative")
    for i, goal in enumerate(config.goal_objects):
        if goal.type not in GOAL_OBJECT_TYPES:
            errors.append(f"Goal object {i}: unknown type {goal.type!r}")
    if config.require_all_goals_destroyed and not config.goal_objects:
        errors.append("requireAllGoalsDestroyed is set but there are no goal objects")

    for i, gun in enumerate(config.laser_guns):
        if not _positive(gun.fire_interval):
            errors.append(f"Laser gun {i}: fire interval must be positive")
        if not _positive(gun.range):
            errors.append(f"Laser gun {i}: range must be positive")
        if gun.target_mode not in LASER_TARGET_MODES:
            errors.append(f"Laser gun {i}: unknown target mode {gun.target_mode!r}")
    return errors


def _check_rotation_bodies(config: ArenaConfig) -> list[str]:
    errors: list[str] = []
    for body in config.rotation_bodies:
        if body.shape not in ROTATION_BODY_SHAPES:
            errors.append(f"Rotation body {body.id}: unknown shape {body.shape!r}")
        if body.direction not in ROTATION_DIRECTIONS:
            errors.append(f"Rotation body {body.id}: unknown direction {body.direction!r}")
        if body.shape == "rectangle":
            if not (_positive(body.width) and _positive(body.height)):
                errors.append(f"Rotation body {body.id}: rectangle needs positive width and height")
        elif not _positive(body.radius):
            errors.append(f"Rotation body {body.id}: radius must be positive")
        if body.shape == "polygon" and body.sides < 3:
            errors.append(f"Rotation body {body.id}: polygon needs at least 3 sides")
        if not _in_range(body.falloff, 0, 1):
            errors.append(f"Rotation body {body.id}: falloff must be between 0 and 1")
    return errors


def _check_physics(config: ArenaConfig) -> list[str]:
    errors: list[str] = []
    if config.gravity < 0:
        errors.append("Gravity must not be negative")
    if not _in_range(config.air_resistance, 0, 1):
        errors.append("Air resistance must be between 0 and 1")
    if not _in_range(config.surface_friction, 0, 1):
        errors.append("Surface friction must be between 0 and 1")
    return errors


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_arena_config(config: Union[ArenaConfig, Mapping[str, Any]]) -> ValidationResult:
    """Collect every violated constraint of an arena configuration.

    Args:
        config: An ArenaConfig, or a camelCase document that is parsed first.
            A document that cannot be parsed is reported as a single error.

    Returns:
        ValidationResult with ``valid`` and the complete error list.
    """
    if not isinstance(config, ArenaConfig):
        try:
            config = arena_from_dict(config)
        except ValueError as exc:
            return ValidationResult(valid=False, errors=(str(exc),))

    errors: list[str] = []
    errors.extend(_check_basics(config))
    errors.extend(_check_loops(config))
    errors.extend(_check_boundary(config))
    errors.extend(_check_portals(config))
    errors.extend(_check_water_body(config))
    errors.extend(_check_hazards(config))
    errors.extend(_check_rotation_bodies(config))
    errors.extend(_check_physics(config))
    return ValidationResult(valid=not errors, errors=tuple(errors))

"""arenaforge/placement.py - Procedural Placement Generator.

Randomised scatterers for obstacles and pits. Positions come from an
injectable ``numpy.random.Generator`` so runs are reproducible; each element
gets a bounded number of attempts (PlacementPolicy). An element that cannot
be placed is dropped and logged, so a short result list is the caller's
signal that the arena is too crowded. No element is ever returned
overlapping an exclude zone or a previously placed element.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional

import numpy as np

from arenaforge.constants import (
    ARENA_SHAPES,
    DEFAULT_MAX_ATTEMPTS,
    EPSILON,
    EXCLUDE_BUFFER,
    LOOP_LINE_CLEARANCE,
    OBSTACLE_MAX_RADIUS,
    OBSTACLE_MIN_RADIUS,
    PIT_CENTER_FRACTION,
    PIT_DAMAGE_PER_SECOND,
    PIT_EDGE_MARGIN,
    PIT_PLACEMENTS,
    SCAN_RINGS,
    SCAN_STEPS,
    SCATTER_OBSTACLE_TYPES,
)
from arenaforge.geometry import circle_inside_bounds
from arenaforge.schema import ArenaConfig, ObstacleConfig, PitConfig

log = logging.getLogger(__name__)

ON_EXHAUSTED = ("skip", "scan")

# Containment test for a circle: bounds(x, y, radius) -> bool.
Bounds = Callable[[float, float, float], bool]


# ---------------------------------------------------------------------------
# Zones and policy
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExcludeZone:
    """A circular keep-out region.

    ``kind="zone"`` excludes the whole disc. ``kind="line"`` excludes only a
    band of LOOP_LINE_CLEARANCE either side of the circle's line, so
    elements may sit inside or outside a loop but not on it.
    """

    x: float
    y: float
    radius: float
    kind: str = "zone"

    def clearance(self, x: float, y: float, radius: float) -> float:
        """Gap between a circle and this zone; negative means they overlap."""
        dist = math.hypot(x - self.x, y - self.y)
        if self.kind == "line":
            return abs(dist - self.radius) - radius - LOOP_LINE_CLEARANCE
        return dist - self.radius - radius


def as_zone(value: Any) -> ExcludeZone:
    """Accept an ExcludeZone or a ``{x, y, radius[, type]}`` mapping."""
    if isinstance(value, ExcludeZone):
        return value
    if isinstance(value, Mapping):
        kind = value.get("kind", value.get("type", "zone")) or "zone"
        if kind not in ("zone", "line"):
            raise ValueError(f"Unknown exclude zone kind: {kind!r}")
        return ExcludeZone(float(value["x"]), float(value["y"]), float(value["radius"]), kind)
    raise ValueError(f"Malformed exclude zone: {value!r}")


@dataclass(frozen=True)
class PlacementPolicy:
    """Bounded-retry policy for one placement call.

    Attributes:
        max_attempts: Random candidates tried per element.
        on_exhausted: ``"skip"`` drops the element; ``"scan"`` first sweeps a
            deterministic polar grid for the first valid spot, then drops.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    on_exhausted: str = "skip"

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.on_exhausted not in ON_EXHAUSTED:
            raise ValueError(
                f"on_exhausted must be one of {ON_EXHAUSTED}, got {self.on_exhausted!r}"
            )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _sample_ellipse(rng: np.random.Generator, a: float, b: float) -> tuple[float, float]:
    """Uniform sample inside the ellipse with semi-axes ``a``, ``b``."""
    theta = rng.uniform(0.0, 2.0 * math.pi)
    rho = math.sqrt(rng.uniform(0.0, 1.0))
    return a * rho * math.cos(theta), b * rho * math.sin(theta)


def _polar_grid(a: float, b: float) -> Iterator[tuple[float, float]]:
    """Deterministic sweep of the ellipse, centre first, then outward rings."""
    yield 0.0, 0.0
    for ring in range(1, SCAN_RINGS + 1):
        rho = ring / SCAN_RINGS
        for step in range(SCAN_STEPS):
            theta = 2.0 * math.pi * step / SCAN_STEPS
            yield a * rho * math.cos(theta), b * rho * math.sin(theta)


def _find_position(
    sample: Callable[[], tuple[float, float]],
    fits: Callable[[float, float], bool],
    policy: PlacementPolicy,
    scan: Callable[[], Iterable[tuple[float, float]]],
) -> Optional[tuple[float, float]]:
    for _ in range(policy.max_attempts):
        x, y = sample()
        if fits(x, y):
            return x, y
    if policy.on_exhausted == "scan":
        for x, y in scan():
            if fits(x, y):
                return x, y
    return None


def _clear_of(
    zones: list[ExcludeZone],
    placed: list[tuple[float, float, float]],
    x: float,
    y: float,
    radius: float,
    min_gap: float = 0.0,
) -> bool:
    for zone in zones:
        if zone.clearance(x, y, radius) < -EPSILON:
            return False
    for px, py, pr in placed:
        if math.hypot(x - px, y - py) < pr + radius + min_gap - EPSILON:
            return False
    return True


def _inside(bounds: Optional[Bounds], x: float, y: float, radius: float) -> bool:
    return bounds is None or bounds(x, y, radius)


def _check_count(count: int) -> None:
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise ValueError(f"count must be a non-negative integer, got {count!r}")


# ---------------------------------------------------------------------------
# Obstacles
# ---------------------------------------------------------------------------

def generate_random_obstacles(
    count: int,
    arena_width: float,
    arena_height: float,
    exclude_zones: Iterable[Any] = (),
    *,
    rng: Optional[np.random.Generator] = None,
    policy: Optional[PlacementPolicy] = None,
    bounds: Optional[Bounds] = None,
) -> list[ObstacleConfig]:
    """Scatter up to ``count`` obstacles inside the arena extents.

    Each obstacle keeps ``|x| + r <= w/2`` and ``|y| + r <= h/2`` (centres
    are drawn from the ellipse of semi-axes ``w/2 - r``, ``h/2 - r``, which
    also keeps square arenas' obstacles inside the inscribed circle), and
    overlaps neither an exclude zone nor an earlier obstacle. ``bounds``, when
    given, must also accept every obstacle circle; ``scatter`` passes the
    arena floor test so obstacles stay on polygon and star floors.

    Returns:
        The placed obstacles; fewer than ``count`` when retries ran out.
    """
    _check_count(count)
    if arena_width <= 0 or arena_height <= 0:
        raise ValueError(f"Arena extents must be positive, got {arena_width} x {arena_height}")
    rng = rng if rng is not None else np.random.default_rng()
    policy = policy or PlacementPolicy()
    zones = [as_zone(z) for z in exclude_zones]

    half_w, half_h = arena_width / 2, arena_height / 2
    largest = min(OBSTACLE_MAX_RADIUS, min(half_w, half_h) / 2)
    smallest = min(OBSTACLE_MIN_RADIUS, largest)

    obstacles: list[ObstacleConfig] = []
    placed: list[tuple[float, float, float]] = []
    for i in range(count):
        radius = float(rng.uniform(smallest, largest))
        a, b = half_w - radius, half_h - radius

        position = _find_position(
            sample=lambda: _sample_ellipse(rng, a, b),
            fits=lambda x, y: (
                _inside(bounds, x, y, radius) and _clear_of(zones, placed, x, y, radius)
            ),
            policy=policy,
            scan=lambda: _polar_grid(a, b),
        )
        if position is None:
            log.warning(
                "Obstacle %d/%d skipped: no free position after %d attempts",
                i + 1, count, policy.max_attempts,
            )
            continue

        x, y = position
        destructible = bool(rng.random() > 0.5)
        obstacles.append(ObstacleConfig(
            type=SCATTER_OBSTACLE_TYPES[int(rng.integers(len(SCATTER_OBSTACLE_TYPES)))],
            x=x,
            y=y,
            radius=radius,
            rotation=float(rng.uniform(0.0, 360.0)),
            damage=float(rng.uniform(5.0, 15.0)),
            recoil=float(rng.uniform(2.0, 5.0)),
            destructible=destructible,
            health=float(rng.uniform(100.0, 300.0)) if destructible else None,
        ))
        placed.append((x, y, radius))

    log.debug("Placed %d of %d obstacles", len(obstacles), count)
    return obstacles


# ---------------------------------------------------------------------------
# Pits
# ---------------------------------------------------------------------------

def generate_random_pits(
    count: int,
    arena_radius: float,
    placement: str = "random",
    pit_radius: float = 1.5,
    exclude_zones: Iterable[Any] = (),
    *,
    rng: Optional[np.random.Generator] = None,
    policy: Optional[PlacementPolicy] = None,
    bounds: Optional[Bounds] = None,
) -> list[PitConfig]:
    """Produce up to ``count`` pits of radius ``pit_radius``.

    Placements:
        edges: ``count`` fixed slots every ``360 / count`` degrees (from 0),
            at ``arena_radius - pit_radius - PIT_EDGE_MARGIN`` from centre.
        center: uniform within ``arena_radius * PIT_CENTER_FRACTION``.
        random: uniform within the arena disc.

    Pits stay at least ``2 * pit_radius`` apart (centre to centre) and clear
    of exclude zones and, when ``bounds`` is given, accepted by it; a slot
    that cannot be satisfied is dropped. Every pit drains
    PIT_DAMAGE_PER_SECOND regardless of input.
    """
    _check_count(count)
    if placement not in PIT_PLACEMENTS:
        raise ValueError(f"Unknown pit placement: {placement!r}. Expected one of {PIT_PLACEMENTS}")
    if arena_radius <= 0 or pit_radius <= 0:
        raise ValueError(
            f"arena_radius and pit_radius must be positive, got {arena_radius}, {pit_radius}"
        )
    rng = rng if rng is not None else np.random.default_rng()
    policy = policy or PlacementPolicy()
    zones = [as_zone(z) for z in exclude_zones]

    placed: list[tuple[float, float, float]] = []

    def fits(x: float, y: float) -> bool:
        return _inside(bounds, x, y, pit_radius) and _clear_of(zones, placed, x, y, pit_radius)

    positions: list[tuple[float, float]] = []
    if placement == "edges":
        distance = max(arena_radius - pit_radius - PIT_EDGE_MARGIN, 0.0)
        for i in range(count):
            angle = math.radians(360.0 * i / count)
            x, y = distance * math.cos(angle), distance * math.sin(angle)
            if not fits(x, y):
                log.warning(
                    "Edge pit %d/%d skipped: slot overlaps another feature or leaves the floor",
                    i + 1, count,
                )
                continue
            positions.append((x, y))
            placed.append((x, y, pit_radius))
    else:
        usable = max(arena_radius - pit_radius, 0.0)
        spread = min(arena_radius * PIT_CENTER_FRACTION, usable) if placement == "center" else usable
        for i in range(count):
            position = _find_position(
                sample=lambda: _sample_ellipse(rng, spread, spread),
                fits=fits,
                policy=policy,
                scan=lambda: _polar_grid(spread, spread),
            )
            if position is None:
                log.warning(
                    "Pit %d/%d skipped: no free %s position after %d attempts",
                    i + 1, count, placement, policy.max_attempts,
                )
                continue
            positions.append(position)
            placed.append((position[0], position[1], pit_radius))

    return [
        PitConfig(
            x=x,
            y=y,
            radius=pit_radius,
            damage_per_second=PIT_DAMAGE_PER_SECOND,
            visual_depth=int(rng.integers(2, 5)),
        )
        for x, y in positions
    ]


# ---------------------------------------------------------------------------
# Exclude zones from a config
# ---------------------------------------------------------------------------

def build_exclude_zones(config: ArenaConfig, include_water: bool = True) -> list[ExcludeZone]:
    """Keep-out zones for the features already present in ``config``.

    Loops contribute their line only. A centre water body contributes its
    disc when ``include_water`` is set. Obstacles, pits, portal endpoints and
    goal objects contribute their disc plus EXCLUDE_BUFFER.
    """
    zones = [ExcludeZone(0.0, 0.0, loop.radius, "line") for loop in config.loops]

    water = config.water_body
    if include_water and water is not None and water.enabled and water.type == "center":
        zones.append(ExcludeZone(0.0, 0.0, water.radius or 10.0))

    for obs in config.obstacles:
        zones.append(ExcludeZone(obs.x, obs.y, obs.radius + EXCLUDE_BUFFER))
    for pit in config.pits:
        zones.append(ExcludeZone(pit.x, pit.y, pit.radius + EXCLUDE_BUFFER))
    for portal in config.portals:
        zones.append(ExcludeZone(portal.in_point.x, portal.in_point.y, portal.radius + EXCLUDE_BUFFER))
        zones.append(ExcludeZone(portal.out_point.x, portal.out_point.y, portal.radius + EXCLUDE_BUFFER))
    for goal in config.goal_objects:
        zones.append(ExcludeZone(goal.x, goal.y, goal.radius + EXCLUDE_BUFFER))
    return zones


def scatter(
    config: ArenaConfig,
    obstacle_count: int = 0,
    pit_count: int = 0,
    placement: str = "edges",
    pit_radius: float = 1.5,
    *,
    rng: Optional[np.random.Generator] = None,
    policy: Optional[PlacementPolicy] = None,
) -> ArenaConfig:
    """Return ``config`` with freshly scattered obstacles and pits.

    Existing obstacles and pits are replaced. New pits also avoid the new
    obstacles, and everything placed lies on the arena floor.
    """
    rng = rng if rng is not None else np.random.default_rng()
    bounds = None
    if config.shape in ARENA_SHAPES:
        bounds = partial(
            circle_inside_bounds, config.shape, config.width, config.height,
            rotation=config.rotation or 0.0,
        )
    base = config.with_obstacles(()).with_pits(())
    obstacles = generate_random_obstacles(
        obstacle_count, config.width, config.height, build_exclude_zones(base),
        rng=rng, policy=policy, bounds=bounds,
    )
    with_obstacles = base.with_obstacles(obstacles)
    pits = generate_random_pits(
        pit_count, min(config.width, config.height) / 2, placement, pit_radius,
        build_exclude_zones(with_obstacles), rng=rng, policy=policy, bounds=bounds,
    )
    return with_obstacles.with_pits(pits)

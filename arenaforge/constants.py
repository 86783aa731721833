"""arenaforge/constants.py - Engine constants shared by every component.

Vocabularies, schema limits, and the tunables of the placement generator.
All distances are in arena units centred on the arena origin.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Shape vocabularies
# ---------------------------------------------------------------------------

ARENA_SHAPES: tuple[str, ...] = (
    "circle",
    "rectangle",
    "pentagon",
    "hexagon",
    "octagon",
    "star",
    "oval",
    "racetrack",
)

# Loops and water bodies may also be drawn as a ring (pair of circles).
LOOP_SHAPES: tuple[str, ...] = ARENA_SHAPES + ("ring",)

POLYGON_SIDES: dict[str, int] = {
    "pentagon": 5,
    "hexagon": 6,
    "octagon": 8,
}

ARENA_THEMES: tuple[str, ...] = (
    "forest",
    "mountains",
    "grasslands",
    "metrocity",
    "safari",
    "prehistoric",
    "futuristic",
    "desert",
    "sea",
    "riverbank",
)

DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard", "extreme", "custom")

# ---------------------------------------------------------------------------
# Feature vocabularies
# ---------------------------------------------------------------------------

WATER_BODY_TYPES: tuple[str, ...] = ("center", "moat", "ring")

LIQUID_COLORS: dict[str, str] = {
    "water": "#3b82f6",
    "blood": "#991b1b",
    "lava": "#ef4444",
    "acid": "#84cc16",
    "oil": "#374151",
    "ice": "#60a5fa",
}

OBSTACLE_TYPES: tuple[str, ...] = ("rock", "pillar", "barrier", "wall")
SCATTER_OBSTACLE_TYPES: tuple[str, ...] = ("rock", "pillar", "barrier")

GOAL_OBJECT_TYPES: tuple[str, ...] = ("star", "crystal", "coin", "gem", "relic", "trophy")

LASER_TARGET_MODES: tuple[str, ...] = ("random", "nearest", "strongest")

ROTATION_BODY_SHAPES: tuple[str, ...] = ("circle", "rectangle", "star", "polygon")
ROTATION_DIRECTIONS: tuple[str, ...] = ("clockwise", "counter-clockwise")

PIT_PLACEMENTS: tuple[str, ...] = ("edges", "center", "random")

# ---------------------------------------------------------------------------
# Schema limits
# ---------------------------------------------------------------------------

MIN_ARENA_SIZE = 10.0
MAX_ARENA_SIZE = 200.0
MAX_LOOPS = 10
MAX_CHARGE_POINTS = 12
MAX_PORTALS = 2
MIN_WALL_COUNT = 3
MAX_WALL_COUNT = 20
MAX_OBSTACLES = 50
MAX_LASER_GUNS = 10
MAX_GOAL_OBJECTS = 20
MIN_LOOP_SEPARATION = 2.0  # concentric loops closer than this read as one line

# ---------------------------------------------------------------------------
# Hazards
# ---------------------------------------------------------------------------

PIT_DAMAGE_PER_SECOND = 10.0
"""Spin drained per second while trapped, as a percentage of current spin."""

PIT_ESCAPE_CHANCE = 0.5
"""Chance per second to climb out before the drain is applied."""

PIT_EDGE_MARGIN = 3.0
PIT_CENTER_FRACTION = 0.3

OBSTACLE_MIN_RADIUS = 1.0
OBSTACLE_MAX_RADIUS = 3.0

# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------

DEFAULT_MAX_ATTEMPTS = 50
LOOP_LINE_CLEARANCE = 2.0  # keep-off distance either side of a loop's line
EXCLUDE_BUFFER = 1.0  # added around existing features when deriving zones
SCAN_RINGS = 12
SCAN_STEPS = 36

# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

CURVE_SEGMENTS = 64
STAR_POINTS = 10
STAR_INNER_RATIO = 0.5
EPSILON = 1e-9

# ---------------------------------------------------------------------------
# Loops
# ---------------------------------------------------------------------------

DEFAULT_RECHARGE_RATE = 5.0
DEFAULT_CHARGE_POINT_RADIUS = 1.0
DEFAULT_CHARGE_POINT_COLOR = "#fbbf24"
ANGLE_TOLERANCE = 0.01  # degrees; charge points may drift this far from even spacing

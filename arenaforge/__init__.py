"""arenaforge - Arena schema, shape geometry, procedural placement, and validation."""

from arenaforge.errors import GeometryError, MalformedPoint, UnsupportedLiquid, UnsupportedShape
from arenaforge.geometry import (
    ArcDescriptor,
    EdgeDescriptor,
    PathDescriptor,
    RingDescriptor,
    arena_outline,
    generate_arc,
    generate_ring_path,
    generate_shape_path,
    polygon_path,
)
from arenaforge.layout import ArenaLayout, build_layout
from arenaforge.placement import (
    ExcludeZone,
    PlacementPolicy,
    build_exclude_zones,
    generate_random_obstacles,
    generate_random_pits,
    scatter,
)
from arenaforge.presets import DEFAULT_ARENA, PRESET_NAMES, apply_preset, list_presets, load_preset
from arenaforge.schema import (
    ArenaConfig,
    ChargePointConfig,
    ExitConfig,
    GoalObjectConfig,
    LaserGunConfig,
    LoopConfig,
    ObstacleConfig,
    PitConfig,
    Point,
    PortalConfig,
    RotationBodyConfig,
    WallConfig,
    WallWidths,
    WaterBodyConfig,
    arena_from_dict,
    arena_to_dict,
    make_charge_points,
)
from arenaforge.validation import ValidationResult, validate_arena_config

__all__ = [
    "GeometryError",
    "UnsupportedShape",
    "UnsupportedLiquid",
    "MalformedPoint",
    "PathDescriptor",
    "RingDescriptor",
    "ArcDescriptor",
    "EdgeDescriptor",
    "arena_outline",
    "generate_shape_path",
    "generate_ring_path",
    "generate_arc",
    "polygon_path",
    "ArenaLayout",
    "build_layout",
    "ExcludeZone",
    "PlacementPolicy",
    "generate_random_obstacles",
    "generate_random_pits",
    "build_exclude_zones",
    "scatter",
    "DEFAULT_ARENA",
    "PRESET_NAMES",
    "load_preset",
    "apply_preset",
    "list_presets",
    "Point",
    "ArenaConfig",
    "LoopConfig",
    "ChargePointConfig",
    "ExitConfig",
    "WallConfig",
    "WallWidths",
    "ObstacleConfig",
    "PitConfig",
    "WaterBodyConfig",
    "PortalConfig",
    "LaserGunConfig",
    "GoalObjectConfig",
    "RotationBodyConfig",
    "arena_from_dict",
    "arena_to_dict",
    "make_charge_points",
    "ValidationResult",
    "validate_arena_config",
]

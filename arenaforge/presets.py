"""arenaforge/presets.py - Preset arena library.

Presets are partial arena documents stored as YAML next to this module. A
preset is merged over DEFAULT_ARENA when loaded on its own, or over a working
config (keeping that config's width and height) when applied in the editor.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from arenaforge.schema import ArenaConfig, WallConfig

log = logging.getLogger(__name__)

PRESET_DIR = Path(__file__).parent / "arenas"

PRESET_NAMES: tuple[str, ...] = (
    "classic",
    "hazard_zone",
    "water_world",
    "twin_gates",
    "racetrack_rally",
)

DEFAULT_ARENA = ArenaConfig(
    name="New Arena",
    description="",
    width=50.0,
    height=50.0,
    shape="circle",
    theme="metrocity",
    wall=WallConfig(enabled=True, base_damage=5.0, recoil_distance=2.0, thickness=0.5),
)


def _read_preset(key: str) -> dict[str, Any]:
    if key not in PRESET_NAMES:
        raise KeyError(f"Unknown preset: {key!r}. Available: {sorted(PRESET_NAMES)}")
    path = PRESET_DIR / f"{key}.yaml"
    with open(path) as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Preset {key!r} ({path}) is not a mapping")
    log.debug("Loaded preset %s from %s", key, path)
    return data


def load_preset(key: str) -> ArenaConfig:
    """Load a preset as a complete ArenaConfig.

    Raises:
        KeyError: If ``key`` is not in PRESET_NAMES.
    """
    return DEFAULT_ARENA.merged(_read_preset(key))


def apply_preset(config: ArenaConfig, key: str) -> ArenaConfig:
    """Overlay a preset onto ``config``, keeping its width and height."""
    overrides = _read_preset(key)
    overrides.pop("width", None)
    overrides.pop("height", None)
    return config.merged(overrides)


def list_presets() -> list[tuple[str, str, str]]:
    """``(key, name, description)`` for every preset, in library order."""
    rows = []
    for key in PRESET_NAMES:
        data = _read_preset(key)
        rows.append((key, data.get("name", key), data.get("description", "")))
    return rows

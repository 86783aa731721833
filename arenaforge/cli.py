"""arenaforge/cli.py - CLI entry point for arena documents.

Usage::

    arenaforge validate arenas/my_arena.yaml other.json
    arenaforge presets
    arenaforge scatter my_arena.yaml --obstacles 8 --pits 4 --seed 7 -o out.yaml
    arenaforge layout my_arena.yaml -o layout.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
import yaml

from arenaforge.constants import DEFAULT_MAX_ATTEMPTS, PIT_PLACEMENTS
from arenaforge.layout import build_layout
from arenaforge.output import (
    dump_json,
    dump_yaml,
    print_presets,
    print_summary,
    print_validation,
    write_text,
)
from arenaforge.placement import PlacementPolicy, scatter
from arenaforge.presets import list_presets
from arenaforge.schema import ArenaConfig, arena_from_dict, arena_to_dict
from arenaforge.validation import validate_arena_config

log = logging.getLogger(__name__)


def load_arena(path: Path | str) -> ArenaConfig:
    """Load an arena document from a YAML (or JSON) file."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return arena_from_dict(data)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_validate(args: argparse.Namespace) -> int:
    results = []
    for name in args.files:
        with open(name) as f:
            data = yaml.safe_load(f)
        result = validate_arena_config(data)
        results.append(result)
        print_validation(name, result)
    print_summary(results)
    return 0 if all(r.valid for r in results) else 1


def _cmd_presets(args: argparse.Namespace) -> int:
    print_presets(list_presets())
    return 0


def _cmd_scatter(args: argparse.Namespace) -> int:
    config = load_arena(args.file)
    policy = PlacementPolicy(max_attempts=args.attempts, on_exhausted=args.on_exhausted)
    result = scatter(
        config,
        obstacle_count=args.obstacles,
        pit_count=args.pits,
        placement=args.placement,
        pit_radius=args.pit_radius,
        rng=np.random.default_rng(args.seed),
        policy=policy,
    )
    if len(result.obstacles) < args.obstacles or len(result.pits) < args.pits:
        log.warning(
            "Placed %d/%d obstacles and %d/%d pits",
            len(result.obstacles), args.obstacles, len(result.pits), args.pits,
        )
    write_text(dump_yaml(arena_to_dict(result)), args.output)
    return 0


def _cmd_layout(args: argparse.Namespace) -> int:
    layout = build_layout(load_arena(args.file))
    write_text(dump_json(layout.to_svg()), args.output)
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="arenaforge", description="Arena configuration tools")
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="Validate arena documents")
    p_validate.add_argument("files", nargs="+", help="Arena YAML/JSON files")
    p_validate.set_defaults(func=_cmd_validate)

    p_presets = sub.add_parser("presets", help="List the preset library")
    p_presets.set_defaults(func=_cmd_presets)

    p_scatter = sub.add_parser("scatter", help="Scatter random obstacles and pits")
    p_scatter.add_argument("file", help="Arena YAML/JSON file")
    p_scatter.add_argument("--obstacles", type=int, default=0, help="Obstacle count")
    p_scatter.add_argument("--pits", type=int, default=0, help="Pit count")
    p_scatter.add_argument(
        "--placement", choices=PIT_PLACEMENTS, default="edges", help="Pit placement strategy",
    )
    p_scatter.add_argument("--pit-radius", type=float, default=1.5, help="Pit radius")
    p_scatter.add_argument("--seed", type=int, default=None, help="Random seed")
    p_scatter.add_argument(
        "--attempts", type=int, default=DEFAULT_MAX_ATTEMPTS,
        help="Random attempts per element",
    )
    p_scatter.add_argument(
        "--on-exhausted", choices=["skip", "scan"], default="skip",
        help="What to do when attempts run out",
    )
    p_scatter.add_argument("--output", "-o", help="Output file (default: stdout)")
    p_scatter.set_defaults(func=_cmd_scatter)

    p_layout = sub.add_parser("layout", help="Dump layout outlines as SVG paths")
    p_layout.add_argument("file", help="Arena YAML/JSON file")
    p_layout.add_argument("--output", "-o", help="Output file (default: stdout)")
    p_layout.set_defaults(func=_cmd_layout)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run arena tools from the command line."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()

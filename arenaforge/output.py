"""arenaforge/output.py - Console output and document serialization."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import yaml

from arenaforge.validation import ValidationResult


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------

# ANSI colour per outcome: valid is green, invalid red.
_OUTCOME_COLORS = {True: "\033[32m", False: "\033[31m"}
_RESET = "\033[0m"


def _use_color() -> bool:
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _paint(text: str, ok: bool, color: bool) -> str:
    return f"{_OUTCOME_COLORS[ok]}{text}{_RESET}" if color else text


def print_validation(label: str, result: ValidationResult) -> None:
    """Print a PASS/FAIL line for one arena, then one line per error."""
    status = _paint("PASS" if result.valid else "FAIL", result.valid, _use_color())
    print(f"{status}  {label}")
    for error in result.errors:
        print(f"      - {error}")


def print_summary(results: list[ValidationResult]) -> None:
    """Print a summary line with valid/invalid counts; zero counts stay plain."""
    valid = sum(1 for r in results if r.valid)
    invalid = len(results) - valid
    color = _use_color()
    counts = ", ".join([
        _paint(f"{valid} valid", True, color and valid > 0),
        _paint(f"{invalid} invalid", False, color and invalid > 0),
    ])
    print(f"\n{len(results)} arenas: {counts}")


def print_presets(rows: list[tuple[str, str, str]]) -> None:
    for key, name, description in rows:
        print(f"{key:<18s}{name:<20s}{description}")


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def dump_yaml(document: dict[str, Any]) -> str:
    return yaml.safe_dump(document, sort_keys=False)


def dump_json(document: Any) -> str:
    return json.dumps(document, indent=2) + "\n"


def write_text(text: str, path: Path | str | None) -> None:
    """Write ``text`` to ``path``, or to stdout when no path is given."""
    if path is None:
        sys.stdout.write(text)
        return
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)

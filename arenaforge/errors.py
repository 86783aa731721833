"""arenaforge/errors.py - Programming-error exceptions.

Raised when a caller hands the geometry layer a tag or point outside the
schema. Invalid user data is never raised; the validator reports it.
"""

from __future__ import annotations


class GeometryError(ValueError):
    """Base class for contract violations in geometry construction."""


class UnsupportedShape(GeometryError):
    def __init__(self, shape: object, accepted: tuple[str, ...]) -> None:
        self.shape = shape
        self.accepted = accepted
        super().__init__(f"Unsupported shape: {shape!r}. Accepted: {', '.join(accepted)}")


class UnsupportedLiquid(GeometryError):
    def __init__(self, liquid: object, accepted: tuple[str, ...]) -> None:
        self.liquid = liquid
        self.accepted = accepted
        super().__init__(f"Unsupported liquid type: {liquid!r}. Accepted: {', '.join(accepted)}")


class MalformedPoint(GeometryError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Malformed point: {value!r} (expected finite (x, y))")

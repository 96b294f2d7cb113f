from __future__ import annotations

import math


class GeometryError(ValueError):
    """Raised when a part cannot be built from the supplied dimensions."""


class InvalidParameter(GeometryError):
    """A supplied scalar violates a builder precondition."""


class DegenerateGeometry(GeometryError):
    """A derived quantity would produce a self-intersecting or empty solid."""


def require_positive(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise InvalidParameter(f"{name} must be finite, got {value!r}.")
    if value <= 0:
        raise InvalidParameter(f"{name} must be > 0, got {value:g}.")
    return float(value)


def require_less(name: str, value: float, limit_name: str, limit: float) -> None:
    if not value < limit:
        raise InvalidParameter(f"{name} ({value:g}) must be less than {limit_name} ({limit:g}).")


def require_derived_positive(name: str, value: float) -> float:
    """Check a radius or length computed from other parameters."""

    if not math.isfinite(value) or value <= 0:
        raise DegenerateGeometry(f"derived {name} must be > 0, got {value:g}.")
    return float(value)

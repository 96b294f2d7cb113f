"""icolamp – parametric parts for an icosahedron lamp."""

from __future__ import annotations

from .parameters import NUM_LEDS, LampParameters
from .validation import DegenerateGeometry, GeometryError, InvalidParameter

__all__ = [
    "__version__",
    "NUM_LEDS",
    "LampParameters",
    "GeometryError",
    "InvalidParameter",
    "DegenerateGeometry",
]

__version__ = "0.1.0"

from __future__ import annotations

from typing import Sequence

import numpy as np

from icolamp.validation import InvalidParameter, require_positive

from .csg import Primitive
from .geometry import triangle_outline


def make_pyramid(radius: float, height: float) -> Primitive:
    """Triangular pyramid: base vertices on a circle of `radius` at z=0, apex at (0, 0, height)."""

    require_positive("pyramid radius", radius)
    require_positive("pyramid height", height)
    base = np.column_stack([triangle_outline(radius), np.zeros(3)])
    vertices = np.vstack([base, [[0.0, 0.0, height]]])
    faces = [(2, 1, 0), (0, 1, 3), (1, 2, 3), (2, 0, 3)]
    return Primitive.from_arrays("pyramid", vertices, faces)


def make_extruded_triangle(radius: float, depth: float) -> Primitive:
    """Uniform triangular prism from z=0 to z=depth."""

    require_positive("prism radius", radius)
    require_positive("prism depth", depth)
    return _extrude_outline("extruded_triangle", triangle_outline(radius), 0.0, depth)


def make_cylinder(
    radius: float = 0.5,
    height: float = 1.0,
    center: Sequence[float] = (0.0, 0.0, 0.0),
    segments: int = 64,
) -> Primitive:
    """Z-aligned n-gon prism centred on `center`, vertices on the circle of `radius`."""

    require_positive("cylinder radius", radius)
    require_positive("cylinder height", height)
    if segments < 3:
        raise InvalidParameter(f"cylinder segments must be >= 3, got {segments}.")
    angles = np.linspace(0.0, 2.0 * np.pi, segments, endpoint=False)
    cx, cy, cz = center
    outline = np.column_stack([cx + radius * np.cos(angles), cy + radius * np.sin(angles)])
    return _extrude_outline("cylinder", outline, cz - height / 2.0, cz + height / 2.0)


def make_box(
    size: Sequence[float] = (1.0, 1.0, 1.0),
    center: Sequence[float] = (0.0, 0.0, 0.0),
) -> Primitive:
    """Axis-aligned box specified by size (dx, dy, dz) and center."""

    sx, sy, sz = (require_positive(f"box size[{i}]", s) for i, s in enumerate(size))
    cx, cy, cz = center
    hx, hy = sx / 2.0, sy / 2.0
    outline = np.array(
        [
            (cx - hx, cy - hy),
            (cx + hx, cy - hy),
            (cx + hx, cy + hy),
            (cx - hx, cy + hy),
        ]
    )
    return _extrude_outline("box", outline, cz - sz / 2.0, cz + sz / 2.0)


def _extrude_outline(name: str, outline: np.ndarray, z_bottom: float, z_top: float) -> Primitive:
    # outline must be convex and counter-clockwise seen from +z
    count = outline.shape[0]
    bottom = np.column_stack([outline, np.full(count, z_bottom)])
    top = np.column_stack([outline, np.full(count, z_top)])
    faces: list[tuple[int, ...]] = [
        tuple(range(count - 1, -1, -1)),
        tuple(range(count, 2 * count)),
    ]
    for i in range(count):
        j = (i + 1) % count
        faces.append((i, j, count + j, count + i))
    return Primitive.from_arrays(name, np.vstack([bottom, top]), faces)

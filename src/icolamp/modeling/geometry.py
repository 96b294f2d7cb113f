"""Closed-form relations of the icosahedron face used by every part.

A part is described by its *radius*: the perpendicular distance from the
polyhedron centre to a triangular face. Edge length and the circumradius of
the face follow from it.
"""

from __future__ import annotations

import math

import numpy as np

SQRT3 = math.sqrt(3.0)
SQRT5 = math.sqrt(5.0)


def edge_length_from_radius(radius: float) -> float:
    """Edge length of an icosahedron face lying `radius` from the centre."""

    return radius * 12.0 / (SQRT3 * (3.0 + SQRT5))


def face_circumradius_from_radius(radius: float) -> float:
    """Radius of the circle through the three vertices of that face."""

    return edge_length_from_radius(radius) / SQRT3


def inset_circumradius(radius: float, wall_width: float) -> float:
    """Shrink a vertex circle so the triangle edges move in by about `wall_width`.

    Exact for a vertical prism, approximate on the sloped pyramid walls.
    """

    return radius - 2.0 * wall_width


def face_tilt_deg(radius: float) -> float:
    """Angle between a vertex direction and the normal of an adjacent face."""

    return math.degrees(math.atan(face_circumradius_from_radius(radius) / radius))


def triangle_outline(radius: float) -> np.ndarray:
    angles = np.deg2rad([0.0, 120.0, 240.0])
    return np.column_stack([radius * np.cos(angles), radius * np.sin(angles)])


def polygon_area(radius: float, segments: int) -> float:
    """Area of the regular n-gon inscribed in a circle of `radius`."""

    return 0.5 * segments * radius * radius * math.sin(2.0 * math.pi / segments)

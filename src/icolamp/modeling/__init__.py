"""Modeling utilities: face geometry, primitives, CSG trees, and lamp parts."""

from __future__ import annotations

from .csg import Difference, Primitive, Solid, Transform, Union, boolean_difference, boolean_union, evaluate
from .transform import rotate, translate
from .geometry import (
    edge_length_from_radius,
    face_circumradius_from_radius,
    face_tilt_deg,
    inset_circumradius,
)
from .primitives import make_box, make_cylinder, make_extruded_triangle, make_pyramid
from .sections import ico_lens, ico_lid, ico_section
from .assembly import base, base_lid, icosahedron_quadrant, power_section, quadrant_placements

__all__ = [
    "Primitive",
    "Union",
    "Difference",
    "Transform",
    "Solid",
    "boolean_union",
    "boolean_difference",
    "evaluate",
    "rotate",
    "translate",
    "edge_length_from_radius",
    "face_circumradius_from_radius",
    "face_tilt_deg",
    "inset_circumradius",
    "make_box",
    "make_cylinder",
    "make_extruded_triangle",
    "make_pyramid",
    "ico_section",
    "ico_lens",
    "ico_lid",
    "icosahedron_quadrant",
    "power_section",
    "base",
    "base_lid",
    "quadrant_placements",
]

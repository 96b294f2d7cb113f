"""Truncated-pyramid parts: the section, the lens and the snap-fit lid.

Every part is modelled in its own frame: the outer face of the polyhedron
lies on z=0 and the polyhedron centre (the shared pyramid apex) sits on the
+z axis at the part's depth.
"""

from __future__ import annotations

from icolamp.mesh_quality import MeshQuality, resolve_segments
from icolamp.validation import InvalidParameter, require_derived_positive, require_less, require_positive

from .csg import Solid, boolean_difference, boolean_union
from .geometry import face_circumradius_from_radius, inset_circumradius
from .primitives import make_cylinder, make_extruded_triangle, make_pyramid
from .transform import translate

# cutters overshoot the faces they open so no coplanar skin is left behind
CUT_MARGIN = 1.0


def ico_section(inner_depth: float, outer_depth: float) -> Solid:
    """Pyramid of depth `outer_depth` with the apex cap of depth `inner_depth` removed.

    The result spans z=0 to z=outer_depth - inner_depth; the cap is removed
    by a plane cut at that height.
    """

    require_positive("inner_depth", inner_depth)
    require_positive("outer_depth", outer_depth)
    require_less("inner_depth", inner_depth, "outer_depth", outer_depth)

    rim_radius = face_circumradius_from_radius(outer_depth)
    body = make_pyramid(rim_radius, outer_depth)
    cap = make_extruded_triangle(rim_radius + CUT_MARGIN, inner_depth + CUT_MARGIN)
    return boolean_difference(body, [translate(cap, (0.0, 0.0, outer_depth - inner_depth))])


def ico_lens(inner_depth: float, outer_depth: float, wall_width: float, lens_width: float) -> Solid:
    """Hollow section with a solid floor of `lens_width` and side walls of about `wall_width`."""

    section = ico_section(inner_depth, outer_depth)
    require_positive("wall_width", wall_width)
    require_positive("lens_width", lens_width)
    require_less("lens_width", lens_width, "section height", outer_depth - inner_depth)

    cavity_depth = outer_depth - lens_width
    cavity_radius = require_derived_positive(
        "lens cavity circumradius",
        inset_circumradius(face_circumradius_from_radius(cavity_depth), wall_width),
    )
    cavity = translate(make_pyramid(cavity_radius, cavity_depth), (0.0, 0.0, lens_width))
    return boolean_difference(section, [cavity])


def lip_ring(rim_radius: float, wall_width: float, height: float, tolerance: float) -> Solid:
    """Triangular ring from z=0 to z=height sized to slip inside a wall of `rim_radius`.

    Its outer face sits `tolerance` inside the mating wall and the ring is
    `wall_width` thick.
    """

    require_positive("lip height", height)
    if tolerance < 0:
        raise InvalidParameter(f"tolerance must be >= 0, got {tolerance:g}.")
    outer_radius = require_derived_positive(
        "lip outer circumradius", inset_circumradius(rim_radius, wall_width + tolerance)
    )
    inner_radius = require_derived_positive(
        "lip inner circumradius", inset_circumradius(rim_radius, 2.0 * wall_width + tolerance)
    )
    ring = make_extruded_triangle(outer_radius, height)
    hole = translate(make_extruded_triangle(inner_radius, height + 2.0 * CUT_MARGIN), (0.0, 0.0, -CUT_MARGIN))
    return boolean_difference(ring, [hole])


def ico_lid(
    led_hole_diameter: float,
    inner_depth: float,
    wall_width: float,
    lip_size: float,
    tolerance: float = 0.2,
    quality: MeshQuality | None = None,
) -> Solid:
    """Thin cap closing a lens opening, with a snap-fit lip below and a centred LED bore."""

    require_positive("led_hole_diameter", led_hole_diameter)
    require_positive("wall_width", wall_width)
    require_positive("lip_size", lip_size)
    require_less("wall_width", wall_width, "inner_depth", inner_depth)

    rim_radius = face_circumradius_from_radius(inner_depth)
    cap = ico_section(inner_depth - wall_width, inner_depth)
    # the lip reaches half a wall into the cap so the union is one body
    lip = translate(lip_ring(rim_radius, wall_width, lip_size + wall_width / 2.0, tolerance), (0.0, 0.0, -lip_size))

    lip_inradius = inset_circumradius(rim_radius, 2.0 * wall_width + tolerance) / 2.0
    require_less("LED bore radius", led_hole_diameter / 2.0, "lip inner inradius", lip_inradius)
    bore = make_cylinder(
        radius=led_hole_diameter / 2.0,
        height=wall_width + lip_size + 2.0 * CUT_MARGIN,
        center=(0.0, 0.0, (wall_width - lip_size) / 2.0),
        segments=resolve_segments(quality),
    )
    return boolean_difference(boolean_union([cap, lip]), [bore])

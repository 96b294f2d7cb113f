from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from icolamp.mesh_quality import MeshQuality, resolve_segments
from icolamp.validation import InvalidParameter, require_derived_positive, require_less, require_positive

from .csg import Solid, boolean_difference, boolean_union
from .geometry import edge_length_from_radius, face_circumradius_from_radius, face_tilt_deg, inset_circumradius
from .primitives import make_box, make_cylinder, make_extruded_triangle, make_pyramid
from .sections import CUT_MARGIN, ico_lens, ico_lid, ico_section, lip_ring
from .transform import multmatrix, rotate, rotation_matrix, translate, translation_matrix

MAX_SECTIONS = 5


@dataclass(frozen=True)
class Placement:
    """Where one copy of a part sits in the quadrant jig.

    The part's apex is moved to the origin, the part is flipped to face
    outward, tilted so its vertex at 0 deg lands on the +z axis, then spun
    about z.
    """

    index: int
    spin_deg: float
    tilt_deg: float
    apex_height: float

    def matrix(self) -> np.ndarray:
        mat = translation_matrix((0.0, 0.0, -self.apex_height))
        mat = rotation_matrix((1.0, 0.0, 0.0), 180.0) @ mat
        mat = rotation_matrix((0.0, 1.0, 0.0), -self.tilt_deg) @ mat
        return rotation_matrix((0.0, 0.0, 1.0), self.spin_deg) @ mat


def quadrant_placements(outer_depth: float, apex_height: float, sections: int = MAX_SECTIONS) -> list[Placement]:
    if not 1 <= sections <= MAX_SECTIONS:
        raise InvalidParameter(f"sections must be between 1 and {MAX_SECTIONS}, got {sections}.")
    require_positive("outer_depth", outer_depth)
    require_positive("apex_height", apex_height)
    tilt = face_tilt_deg(outer_depth)
    step = 360.0 / sections
    return [Placement(index=i, spin_deg=step * i, tilt_deg=tilt, apex_height=apex_height) for i in range(sections)]


def icosahedron_quadrant(
    outer_depth: float,
    cavity_depth: float,
    wall_width: float,
    led_hole_size: float,
    sections: int = MAX_SECTIONS,
    *,
    include_lenses: bool = False,
    lid_lip_size: float = 2.0,
    tolerance: float = 0.2,
    lens_thickness: float = 1.0,
    quality: MeshQuality | None = None,
) -> Solid:
    """Lids (and optionally lenses) arranged around one icosahedron vertex.

    Used as a gluing jig and a visual check of the dihedral angles. The
    shared vertex ends up pointing down.
    """

    require_less("cavity_depth", cavity_depth, "outer_depth", outer_depth)
    lid = ico_lid(led_hole_size, cavity_depth, wall_width, lid_lip_size, tolerance, quality)
    copies = [multmatrix(lid, p.matrix()) for p in quadrant_placements(outer_depth, cavity_depth, sections)]
    if include_lenses:
        lens = ico_lens(cavity_depth, outer_depth, wall_width, lens_thickness)
        copies.extend(multmatrix(lens, p.matrix()) for p in quadrant_placements(outer_depth, outer_depth, sections))

    jig = rotate(boolean_union(copies), axis=(1.0, 0.0, 0.0), angle_deg=180.0)
    return translate(jig, (0.0, 0.0, outer_depth))


def power_section(width: float, height: float, depth: float, quality: MeshQuality | None = None) -> Solid:
    """Stadium cutter: two round ends of diameter `width` spanning `height`, extruded z=0..depth.

    The height axis is y. When `height < width` only the two overlapping ends remain.
    """

    require_positive("power section width", width)
    require_positive("power section height", height)
    require_positive("power section depth", depth)

    segments = resolve_segments(quality)
    offset = (height - width) / 2.0
    parts: list[Solid] = [
        make_cylinder(radius=width / 2.0, height=depth, center=(0.0, y, depth / 2.0), segments=segments)
        for y in (-offset, offset)
    ]
    if height > width:
        parts.append(make_box(size=(width, height - width, depth), center=(0.0, 0.0, depth / 2.0)))
    return boolean_union(parts)


def base(
    inner_depth: float,
    outer_depth: float,
    power_outer_diameter: float,
    power_height_from_base: float,
    switch_diameter: float,
    wall_width: float,
    *,
    additional_height: float = 25.0,
    square_height: float = 8.0,
    power_horiz_diameter: float = 7.5,
    power_vert_diameter: float = 9.0,
    quality: MeshQuality | None = None,
) -> Solid:
    """Hollow section standing on a vertical extension that carries the jack and switch.

    The extension runs from z=-additional_height to z=0. The back wall is the
    triangle edge facing -x; the power jack standoff protrudes `square_height`
    behind it and the switch is bored through the slanted face above it.
    """

    for name, value in (
        ("power_outer_diameter", power_outer_diameter),
        ("power_height_from_base", power_height_from_base),
        ("switch_diameter", switch_diameter),
        ("wall_width", wall_width),
        ("additional_height", additional_height),
        ("square_height", square_height),
    ):
        require_positive(name, value)
    section = ico_section(inner_depth, outer_depth)
    segments = resolve_segments(quality)

    rim_radius = face_circumradius_from_radius(outer_depth)
    interior_radius = require_derived_positive("base interior circumradius", inset_circumradius(rim_radius, wall_width))
    standoff_base_start = -rim_radius * math.cos(math.radians(120.0))
    back_x = -standoff_base_start

    # power jack standoff
    half = power_outer_diameter / 2.0
    if not half <= power_height_from_base <= additional_height - half:
        raise InvalidParameter(
            f"power jack standoff ({power_outer_diameter:g} mm) does not fit a {additional_height:g} mm "
            f"extension at power_height_from_base={power_height_from_base:g}."
        )
    require_less("power_outer_diameter", power_outer_diameter, "base edge length", edge_length_from_radius(outer_depth))
    bore_size = require_derived_positive("standoff bore", power_outer_diameter - 2.0 * wall_width)
    require_less("power_vert_diameter", power_vert_diameter, "standoff bore", bore_size)
    require_less("power_horiz_diameter", power_horiz_diameter, "standoff bore", bore_size)

    jack_z = power_height_from_base - additional_height
    standoff = make_box(
        size=(square_height + wall_width, power_outer_diameter, power_outer_diameter),
        center=(back_x - (square_height - wall_width) / 2.0, 0.0, jack_z),
    )
    standoff_bore = make_box(
        size=(square_height + wall_width, bore_size, bore_size),
        center=(back_x - (square_height - 3.0 * wall_width) / 2.0, 0.0, jack_z),
    )
    jack_depth = wall_width + 2.0 * CUT_MARGIN
    jack = translate(
        power_section(power_horiz_diameter, power_vert_diameter, jack_depth, quality),
        (0.0, 0.0, -jack_depth / 2.0),
    )
    jack = rotate(jack, axis=(0.0, 0.0, 1.0), angle_deg=90.0)
    jack = rotate(jack, axis=(0.0, 1.0, 0.0), angle_deg=90.0)
    jack = translate(jack, (back_x - square_height + wall_width / 2.0, 0.0, jack_z))

    # switch, normal to the slanted back face
    face_angle = math.atan(outer_depth / standoff_base_start)
    slant_offset = switch_diameter / 2.0 + wall_width
    face_length = (outer_depth - inner_depth) / math.sin(face_angle)
    require_less("switch reach", slant_offset + switch_diameter / 2.0, "slanted face length", face_length)
    switch = make_cylinder(
        radius=switch_diameter / 2.0,
        height=4.0 * wall_width + 2.0 * CUT_MARGIN,
        segments=segments,
    )
    switch = rotate(switch, axis=(0.0, -1.0, 0.0), angle_deg=math.degrees(face_angle))
    switch = translate(
        switch,
        (back_x + slant_offset * math.cos(face_angle), 0.0, slant_offset * math.sin(face_angle)),
    )

    extension = translate(make_extruded_triangle(rim_radius, additional_height), (0.0, 0.0, -additional_height))
    pyramid_interior = make_pyramid(interior_radius, outer_depth)
    extension_interior = translate(
        make_extruded_triangle(interior_radius, additional_height + CUT_MARGIN),
        (0.0, 0.0, -additional_height - CUT_MARGIN),
    )

    body = boolean_union([extension, section, standoff])
    return boolean_difference(body, [standoff_bore, switch, pyramid_interior, extension_interior, jack])


def base_lid(outer_depth: float, wall_width: float, lip_size: float = 2.0, tolerance: float = 0.2) -> Solid:
    """Flat cap for the bottom of the base with a lip locating it inside the extension."""

    require_positive("outer_depth", outer_depth)
    require_positive("wall_width", wall_width)
    require_positive("lip_size", lip_size)
    rim_radius = face_circumradius_from_radius(outer_depth)
    cap = make_extruded_triangle(rim_radius, wall_width)
    lip = translate(lip_ring(rim_radius, wall_width, lip_size + wall_width / 2.0, tolerance), (0.0, 0.0, wall_width / 2.0))
    return boolean_union([cap, lip])

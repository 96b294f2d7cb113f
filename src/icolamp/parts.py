"""Named parts and the build plan for one finished lamp."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from icolamp.mesh_quality import MeshQuality
from icolamp.modeling import base, base_lid, icosahedron_quadrant, ico_lens, ico_lid
from icolamp.modeling.csg import Solid
from icolamp.parameters import LampParameters


@dataclass(frozen=True)
class BuildOptions:
    quality: MeshQuality = field(default_factory=MeshQuality)
    include_lenses: bool = False


@dataclass(frozen=True)
class PartSpec:
    name: str
    description: str
    builder: Callable[[LampParameters, BuildOptions], Solid]


@dataclass(frozen=True)
class PlanEntry:
    part: str
    quantity: int


def _lens(p: LampParameters, opts: BuildOptions) -> Solid:
    return ico_lens(p.cavity_depth, p.outer_depth, p.wall_width, p.lens_thickness)


def _lid(p: LampParameters, opts: BuildOptions) -> Solid:
    return ico_lid(p.led_hole_size, p.cavity_depth, p.wall_width, p.lid_lip_size, p.tolerance, opts.quality)


def _quadrant(sections: int) -> Callable[[LampParameters, BuildOptions], Solid]:
    def build(p: LampParameters, opts: BuildOptions) -> Solid:
        return icosahedron_quadrant(
            p.outer_depth,
            p.cavity_depth,
            p.wall_width,
            p.led_hole_size,
            sections,
            include_lenses=opts.include_lenses,
            lid_lip_size=p.lid_lip_size,
            tolerance=p.tolerance,
            lens_thickness=p.lens_thickness,
            quality=opts.quality,
        )

    return build


def _base(p: LampParameters, opts: BuildOptions) -> Solid:
    return base(
        p.cavity_depth,
        p.outer_depth,
        p.power_outer_diameter,
        p.power_height_from_base,
        p.switch_diameter,
        p.wall_width,
        additional_height=p.base_additional_height,
        square_height=p.base_square_height,
        power_horiz_diameter=p.power_horiz_diameter,
        power_vert_diameter=p.power_vert_diameter,
        quality=opts.quality,
    )


def _base_cap(p: LampParameters, opts: BuildOptions) -> Solid:
    return base_lid(p.outer_depth, p.wall_width, tolerance=p.tolerance)


PARTS: dict[str, PartSpec] = {
    spec.name: spec
    for spec in (
        PartSpec("lens", "Hollow face section with a thin diffusing floor.", _lens),
        PartSpec("lid", "Cap closing a lens, with snap-fit lip and LED bore.", _lid),
        PartSpec("quadrant-5", "Five lids around one vertex (gluing jig).", _quadrant(5)),
        PartSpec("quadrant-3", "Three lids of the vertex jig.", _quadrant(3)),
        PartSpec("base", "Base face with power jack standoff and switch bore.", _base),
        PartSpec("base-cap", "Bottom cover of the base with locating lip.", _base_cap),
    )
}

BUILD_PLAN: tuple[PlanEntry, ...] = (
    PlanEntry("lid", 1),
    PlanEntry("quadrant-5", 3),
    PlanEntry("quadrant-3", 1),
    PlanEntry("lens", 19),
    PlanEntry("base", 1),
    PlanEntry("base-cap", 1),
)


def get_part(name: str) -> PartSpec:
    try:
        return PARTS[name]
    except KeyError:
        raise KeyError(f"Unknown part '{name}'. Choose from: {', '.join(PARTS)}.") from None


def build_part(name: str, params: LampParameters | None = None, options: BuildOptions | None = None) -> Solid:
    """Build the CSG tree of one part. Meshing is left to `evaluate`."""

    return get_part(name).builder(params or LampParameters(), options or BuildOptions())


def planned_quantity(part: str, plan: tuple[PlanEntry, ...] = BUILD_PLAN) -> int:
    return sum(entry.quantity for entry in plan if entry.part == part)

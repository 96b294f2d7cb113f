from __future__ import annotations

import math

import pyvista as pv

from icolamp.mesh import Mesh, mesh_to_pyvista
from icolamp.modeling import evaluate
from icolamp.modeling.csg import Solid


def is_watertight(mesh: pv.DataSet) -> tuple[bool, int]:
    edges = mesh.extract_feature_edges(boundary_edges=True, feature_edges=False, non_manifold_edges=True, manifold_edges=False)
    open_edges = edges.n_cells
    return open_edges == 0, open_edges


def solid_volume(solid: Solid) -> float:
    mesh = evaluate(solid)
    assert mesh.analysis is not None
    return mesh.analysis.volume


def assert_printable(mesh: Mesh) -> None:
    assert mesh.analysis is not None
    assert mesh.analysis.issues() == []
    watertight, open_edges = is_watertight(mesh_to_pyvista(mesh))
    assert watertight, f"{open_edges} open edges"


def triangle_area(circumradius: float) -> float:
    return 3.0 * math.sqrt(3.0) / 4.0 * circumradius**2


def pyramid_volume(circumradius: float, height: float) -> float:
    return triangle_area(circumradius) * height / 3.0

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np


@dataclass
class MeshAnalysis:
    """Printability report for an evaluated part."""

    n_vertices: int
    n_faces: int
    degenerate_faces: int
    open_edges: int
    nonmanifold_edges: int
    invalid_vertices: int
    volume: float

    @property
    def is_watertight(self) -> bool:
        return self.open_edges == 0 and self.nonmanifold_edges == 0

    def issues(self) -> list[str]:
        checks = (
            (self.invalid_vertices, "invalid vertices (NaN/inf)"),
            (self.degenerate_faces, "degenerate faces"),
            (self.open_edges, "open edges (not watertight)"),
            (self.nonmanifold_edges, "non-manifold edges"),
        )
        issues = [f"{count} {label}" for count, label in checks if count > 0]
        if self.volume <= 0:
            issues.append(f"non-positive volume {self.volume:.4g} (inverted faces?)")
        return issues


@dataclass
class Mesh:
    """Triangle mesh of one part, in millimetres unless rescaled for export."""

    vertices: np.ndarray
    faces: np.ndarray
    metadata: dict[str, object] = field(default_factory=dict)
    analysis: MeshAnalysis | None = None

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=float).reshape(-1, 3).copy()
        self.faces = np.asarray(self.faces, dtype=int).reshape(-1, 3).copy()

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_faces(self) -> int:
        return int(self.faces.shape[0])

    @property
    def bounds(self) -> tuple[float, float, float, float, float, float]:
        """(xmin, xmax, ymin, ymax, zmin, zmax), the pyvista ordering."""

        if self.n_vertices == 0:
            return (0.0,) * 6
        extent = np.stack([self.vertices.min(axis=0), self.vertices.max(axis=0)], axis=1)
        return tuple(float(v) for v in extent.ravel())

    def scaled(self, factor: float) -> "Mesh":
        """Return a uniformly scaled copy with a fresh analysis."""

        mesh = Mesh(self.vertices * factor, self.faces, metadata=dict(self.metadata))
        analyze_mesh(mesh)
        return mesh


def triangulate_faces(face_list: Iterable[Sequence[int]]) -> np.ndarray:
    """Fan-triangulate convex polygons given as vertex index cycles."""

    triangles = [
        (face[0], face[i], face[i + 1])
        for face in face_list
        for i in range(1, len(face) - 1)
    ]
    return np.asarray(triangles, dtype=int).reshape(-1, 3)


def signed_volume(vertices: np.ndarray, faces: np.ndarray) -> float:
    """Divergence-theorem volume; positive when faces wind outward."""

    if faces.size == 0:
        return 0.0
    v0, v1, v2 = (vertices[faces[:, k]] for k in range(3))
    return float(np.einsum("ij,ij->i", v0, np.cross(v1, v2)).sum() / 6.0)


def analyze_mesh(mesh: Mesh, area_epsilon: float = 1e-12) -> MeshAnalysis:
    verts = mesh.vertices
    faces = mesh.faces

    degenerate_faces = 0
    open_edges = 0
    nonmanifold_edges = 0
    if faces.size > 0:
        v0, v1, v2 = (verts[faces[:, k]] for k in range(3))
        areas = 0.5 * np.linalg.norm(np.cross(v1 - v0, v2 - v0), axis=1)
        degenerate_faces = int(np.count_nonzero(areas <= area_epsilon))

        # every edge of a closed 2-manifold is shared by exactly two triangles
        edges = np.sort(faces[:, [0, 1, 1, 2, 2, 0]].reshape(-1, 2), axis=1)
        _, counts = np.unique(edges, axis=0, return_counts=True)
        open_edges = int(np.count_nonzero(counts == 1))
        nonmanifold_edges = int(np.count_nonzero(counts > 2))

    analysis = MeshAnalysis(
        n_vertices=mesh.n_vertices,
        n_faces=mesh.n_faces,
        degenerate_faces=degenerate_faces,
        open_edges=open_edges,
        nonmanifold_edges=nonmanifold_edges,
        invalid_vertices=int(np.count_nonzero(~np.isfinite(verts))),
        volume=signed_volume(verts, faces),
    )
    mesh.analysis = analysis
    return analysis


def mesh_to_pyvista(mesh: Mesh):
    import pyvista as pv

    if mesh.n_faces == 0:
        return pv.PolyData(mesh.vertices, deep=True)
    cells = np.column_stack([np.full(mesh.n_faces, 3, dtype=np.int64), mesh.faces]).ravel()
    return pv.PolyData(mesh.vertices, cells, deep=True)

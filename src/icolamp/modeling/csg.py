"""CSG expression trees and their evaluation into meshes.

Parts are built as immutable trees of :class:`Primitive` leaves combined by
:class:`Union`, :class:`Difference` and rigid :class:`Transform` nodes.
Nothing is meshed until :func:`evaluate` hands the tree to manifold3d.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

import numpy as np

from icolamp.mesh import Mesh, analyze_mesh, triangulate_faces
from icolamp.validation import DegenerateGeometry


@dataclass(frozen=True)
class Primitive:
    """Vertex/face list of a closed polyhedron.

    Faces are cyclic vertex index tuples wound counter-clockwise when seen
    from outside the solid.
    """

    name: str
    vertices: tuple[tuple[float, float, float], ...]
    faces: tuple[tuple[int, ...], ...]

    def __post_init__(self) -> None:
        vertices = tuple(tuple(float(c) for c in vertex) for vertex in self.vertices)
        faces = tuple(tuple(int(i) for i in face) for face in self.faces)
        if any(len(vertex) != 3 for vertex in vertices):
            raise ValueError(f"{self.name}: vertices must be 3D points.")
        for face in faces:
            if len(face) < 3:
                raise ValueError(f"{self.name}: faces need at least three vertices.")
            if min(face) < 0 or max(face) >= len(vertices):
                raise ValueError(f"{self.name}: face {face} references a missing vertex.")
        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "faces", faces)

    @classmethod
    def from_arrays(cls, name: str, vertices: np.ndarray, faces: Iterable[Sequence[int]]) -> "Primitive":
        return cls(name=name, vertices=tuple(map(tuple, np.asarray(vertices, dtype=float))), faces=tuple(map(tuple, faces)))

    @property
    def n_vertices(self) -> int:
        return len(self.vertices)

    @property
    def n_faces(self) -> int:
        return len(self.faces)

    def points(self, matrix: np.ndarray | None = None) -> np.ndarray:
        pts = np.asarray(self.vertices, dtype=float)
        if matrix is None:
            return pts
        homogeneous = np.hstack([pts, np.ones((pts.shape[0], 1))])
        return (matrix @ homogeneous.T).T[:, :3]

    def to_mesh(self, matrix: np.ndarray | None = None) -> Mesh:
        return Mesh(vertices=self.points(matrix), faces=triangulate_faces(self.faces), metadata={"name": self.name})


@dataclass(frozen=True)
class Union:
    children: tuple["Solid", ...]


@dataclass(frozen=True)
class Difference:
    base: "Solid"
    cutters: tuple["Solid", ...]


@dataclass(frozen=True)
class Transform:
    child: "Solid"
    matrix: tuple[tuple[float, ...], ...]

    @classmethod
    def from_array(cls, child: "Solid", matrix: np.ndarray) -> "Transform":
        mat = np.asarray(matrix, dtype=float).reshape(4, 4)
        return cls(child=child, matrix=tuple(tuple(float(v) for v in row) for row in mat))

    def to_array(self) -> np.ndarray:
        return np.asarray(self.matrix, dtype=float)


Solid = Primitive | Union | Difference | Transform


def boolean_union(solids: Iterable[Solid]) -> Solid:
    children = tuple(solids)
    if not children:
        raise ValueError("boolean_union requires at least one solid.")
    if len(children) == 1:
        return children[0]
    return Union(children)


def boolean_difference(base: Solid, cutters: Iterable[Solid]) -> Solid:
    cutters = tuple(cutters)
    if not cutters:
        return base
    return Difference(base, cutters)


def iter_leaves(solid: Solid, matrix: np.ndarray | None = None) -> Iterator[tuple[Primitive, np.ndarray]]:
    """Yield every primitive with the accumulated transform placing it."""

    if matrix is None:
        matrix = np.eye(4)
    if isinstance(solid, Primitive):
        yield solid, matrix
    elif isinstance(solid, Transform):
        yield from iter_leaves(solid.child, matrix @ solid.to_array())
    elif isinstance(solid, Union):
        for child in solid.children:
            yield from iter_leaves(child, matrix)
    elif isinstance(solid, Difference):
        yield from iter_leaves(solid.base, matrix)
        for cutter in solid.cutters:
            yield from iter_leaves(cutter, matrix)
    else:
        raise TypeError(f"Unsupported solid node {type(solid).__name__}.")


def evaluate(solid: Solid) -> Mesh:
    """Mesh the tree with manifold3d and attach a :class:`MeshAnalysis`."""

    manifold = _evaluate(solid, np.eye(4))
    mesh = _mesh_from_manifold(manifold)
    if mesh.n_faces == 0:
        raise DegenerateGeometry("boolean evaluation produced an empty solid.")
    analyze_mesh(mesh)
    return mesh


def _evaluate(solid: Solid, matrix: np.ndarray):
    # Rigid transforms distribute over booleans, so they are applied to leaves.
    if isinstance(solid, Primitive):
        return _manifold_from_mesh(solid.to_mesh(matrix), solid.name)
    if isinstance(solid, Transform):
        return _evaluate(solid.child, matrix @ solid.to_array())
    if isinstance(solid, Union):
        result = _evaluate(solid.children[0], matrix)
        for child in solid.children[1:]:
            result = result + _evaluate(child, matrix)
        return result
    if isinstance(solid, Difference):
        result = _evaluate(solid.base, matrix)
        for cutter in solid.cutters:
            result = result - _evaluate(cutter, matrix)
        return result
    raise TypeError(f"Unsupported solid node {type(solid).__name__}.")


def _manifold_from_mesh(mesh: Mesh, name: str):
    from manifold3d import Manifold, Mesh as ManifoldMesh

    vertices = np.ascontiguousarray(mesh.vertices, dtype=np.float32)
    faces = np.ascontiguousarray(mesh.faces, dtype=np.uint32)
    manifold = Manifold(ManifoldMesh(vert_properties=vertices, tri_verts=faces))
    if manifold.is_empty():
        raise DegenerateGeometry(f"{name} does not form a closed, outward-facing solid.")
    return manifold


def _mesh_from_manifold(manifold) -> Mesh:
    mesh = manifold.to_mesh()
    props = np.asarray(mesh.vert_properties, dtype=float)
    if props.size == 0:
        return Mesh(np.zeros((0, 3)), np.zeros((0, 3), dtype=int))
    faces = np.asarray(mesh.tri_verts, dtype=int)
    return Mesh(props[:, :3], faces)


__all__ = [
    "Primitive",
    "Union",
    "Difference",
    "Transform",
    "Solid",
    "boolean_union",
    "boolean_difference",
    "iter_leaves",
    "evaluate",
]

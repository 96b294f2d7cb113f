from __future__ import annotations

from pathlib import Path

import numpy as np

from icolamp.mesh import Mesh, mesh_to_pyvista

# one binary STL facet: normal, three vertices, attribute byte count
_FACET = np.dtype([("normal", "<f4", (3,)), ("vertices", "<f4", (3, 3)), ("attribute", "<u2")])


def facet_normals(mesh: Mesh) -> np.ndarray:
    """Unit normals per triangle; zero for degenerate triangles."""

    corners = mesh.vertices[mesh.faces]
    normals = np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0])
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    return np.divide(normals, lengths, out=np.zeros_like(normals), where=lengths > 0)


def write_stl(mesh: Mesh, path: Path, ascii: bool = False, name: str = "icolamp") -> None:
    path = Path(path)
    normals = facet_normals(mesh)
    corners = mesh.vertices[mesh.faces]

    if ascii:
        with path.open("w") as handle:
            handle.write(f"solid {name}\n")
            for normal, tri in zip(normals, corners):
                handle.write("  facet normal {:.6e} {:.6e} {:.6e}\n    outer loop\n".format(*normal))
                for vertex in tri:
                    handle.write("      vertex {:.6e} {:.6e} {:.6e}\n".format(*vertex))
                handle.write("    endloop\n  endfacet\n")
            handle.write(f"endsolid {name}\n")
        return

    facets = np.zeros(mesh.n_faces, dtype=_FACET)
    facets["normal"] = normals
    facets["vertices"] = corners
    header = f"icolamp {name}".encode("ascii", "replace")[:80].ljust(80, b"\0")
    with path.open("wb") as handle:
        handle.write(header)
        handle.write(np.uint32(mesh.n_faces).astype("<u4").tobytes())
        handle.write(facets.tobytes())


def write_mesh(mesh: Mesh, path: Path, ascii: bool = False, name: str = "icolamp") -> None:
    """Write STL directly; any other extension pyvista understands goes through it."""

    path = Path(path)
    if path.suffix.lower() == ".stl":
        write_stl(mesh, path, ascii=ascii, name=name)
        return
    mesh_to_pyvista(mesh).save(str(path), binary=not ascii)

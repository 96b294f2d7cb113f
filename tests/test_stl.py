from __future__ import annotations

import numpy as np
import pytest
import pyvista as pv

from icolamp.io.stl import write_mesh, write_stl
from icolamp.mesh import Mesh
from icolamp.modeling import make_box

pytestmark = pytest.mark.stl


@pytest.fixture
def box_mesh() -> Mesh:
    return make_box(size=(2.0, 3.0, 4.0)).to_mesh()


def test_binary_layout(tmp_path, box_mesh: Mesh):
    path = tmp_path / "box.stl"
    write_stl(box_mesh, path, name="box")
    data = path.read_bytes()
    assert box_mesh.n_faces == 12
    assert len(data) == 84 + 50 * 12
    assert data[:11] == b"icolamp box"
    assert int(np.frombuffer(data[80:84], dtype="<u4")[0]) == 12


def test_ascii_layout(tmp_path, box_mesh: Mesh):
    path = tmp_path / "box.stl"
    write_stl(box_mesh, path, ascii=True, name="box")
    text = path.read_text()
    assert text.startswith("solid box\n")
    assert text.rstrip().endswith("endsolid box")
    assert text.count("facet normal") == 12


@pytest.mark.parametrize("ascii", [False, True])
def test_pyvista_reads_stl(tmp_path, box_mesh: Mesh, ascii: bool):
    path = tmp_path / "box.stl"
    write_mesh(box_mesh, path, ascii=ascii)
    loaded = pv.read(str(path))
    assert loaded.n_cells == 12
    assert np.allclose(loaded.bounds, box_mesh.bounds)


def test_other_formats_go_through_pyvista(tmp_path, box_mesh: Mesh):
    path = tmp_path / "box.ply"
    write_mesh(box_mesh, path)
    loaded = pv.read(str(path))
    assert loaded.n_points == box_mesh.n_vertices
    assert loaded.n_cells == 12

from __future__ import annotations

import numpy as np
import pytest

from icolamp.modeling import make_box, make_pyramid, rotate, translate
from icolamp.modeling.csg import Difference, Transform, Union, boolean_difference, boolean_union, evaluate, iter_leaves
from icolamp.modeling.transform import multmatrix
from tests.helpers import assert_printable


def test_translate_folds_into_one_transform():
    box = make_box(size=(1.0, 1.0, 1.0))
    moved = translate(translate(box, (1.0, 0.0, 0.0)), (0.0, 2.0, 3.0))
    assert isinstance(moved, Transform)
    assert moved.child is box
    assert np.allclose(moved.to_array()[:3, 3], [1.0, 2.0, 3.0])


def test_rotate_axis_z_90():
    box = make_box(size=(2.0, 4.0, 1.0))
    turned = rotate(box, axis=(0.0, 0.0, 1.0), angle_deg=90.0)
    ((leaf, matrix),) = list(iter_leaves(turned))
    pts = leaf.points(matrix)
    assert np.allclose([pts[:, 0].min(), pts[:, 0].max()], [-2.0, 2.0])
    assert np.allclose([pts[:, 1].min(), pts[:, 1].max()], [-1.0, 1.0])


def test_multmatrix_rejects_scaling():
    with pytest.raises(ValueError):
        multmatrix(make_box(), np.diag([2.0, 1.0, 1.0, 1.0]))


def test_boolean_helpers_collapse_trivial_cases():
    box = make_box()
    assert boolean_union([box]) is box
    assert boolean_difference(box, []) is box
    with pytest.raises(ValueError):
        boolean_union([])
    assert isinstance(boolean_union([box, translate(box, (3.0, 0.0, 0.0))]), Union)
    assert isinstance(boolean_difference(box, [box]), Difference)


def test_iter_leaves_accumulates_nested_transforms():
    pyramid = make_pyramid(1.0, 1.0)
    tree = translate(boolean_union([pyramid, translate(pyramid, (0.0, 0.0, 5.0))]), (10.0, 0.0, 0.0))
    apexes = sorted(leaf.points(matrix)[3].tolist() for leaf, matrix in iter_leaves(tree))
    assert np.allclose(apexes, [[10.0, 0.0, 1.0], [10.0, 0.0, 6.0]])


@pytest.mark.csg
def test_evaluate_disjoint_union_volume():
    a = make_box(size=(1.0, 1.0, 1.0))
    b = translate(make_box(size=(2.0, 2.0, 2.0)), (5.0, 0.0, 0.0))
    mesh = evaluate(boolean_union([a, b]))
    assert_printable(mesh)
    assert mesh.analysis.volume == pytest.approx(9.0, rel=1e-5)


@pytest.mark.csg
def test_evaluate_difference_through_hole():
    plate = make_box(size=(4.0, 4.0, 1.0))
    cutter = make_box(size=(2.0, 2.0, 3.0))
    mesh = evaluate(boolean_difference(plate, [cutter]))
    assert_printable(mesh)
    assert mesh.analysis.volume == pytest.approx(12.0, rel=1e-5)


@pytest.mark.csg
def test_evaluate_applies_rotation_to_leaves():
    slab = rotate(make_box(size=(4.0, 1.0, 1.0)), axis=(0.0, 1.0, 0.0), angle_deg=90.0)
    mesh = evaluate(slab)
    xmin, xmax, _, _, zmin, zmax = mesh.bounds
    assert (zmax - zmin) == pytest.approx(4.0, abs=1e-5)
    assert (xmax - xmin) == pytest.approx(1.0, abs=1e-5)

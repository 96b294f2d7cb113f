from __future__ import annotations

from typing import Sequence

import numpy as np

from .csg import Solid, Transform


def _normalize_axis(axis: Sequence[float]) -> np.ndarray:
    vec = np.asarray(axis, dtype=float).reshape(3)
    norm = np.linalg.norm(vec)
    if norm == 0:
        raise ValueError("Rotation axis must be non-zero.")
    return vec / norm


def translation_matrix(offset: Sequence[float]) -> np.ndarray:
    dx, dy, dz = np.asarray(offset, dtype=float).reshape(3)
    mat = np.eye(4)
    mat[:3, 3] = [dx, dy, dz]
    return mat


def rotation_matrix(
    axis: Sequence[float],
    angle_deg: float,
    origin: Sequence[float] = (0.0, 0.0, 0.0),
) -> np.ndarray:
    x, y, z = _normalize_axis(axis)
    angle_rad = np.deg2rad(angle_deg)
    c = np.cos(angle_rad)
    s = np.sin(angle_rad)
    C = 1.0 - c
    rot = np.array(
        [
            [x * x * C + c, x * y * C - z * s, x * z * C + y * s, 0.0],
            [y * x * C + z * s, y * y * C + c, y * z * C - x * s, 0.0],
            [z * x * C - y * s, z * y * C + x * s, z * z * C + c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=float,
    )
    origin = np.asarray(origin, dtype=float).reshape(3)
    return translation_matrix(origin) @ rot @ translation_matrix(-origin)


def multmatrix(solid: Solid, matrix: np.ndarray) -> Transform:
    """Apply a rigid 4x4 transform, folding it into an existing Transform node."""

    mat = np.asarray(matrix, dtype=float)
    if mat.shape != (4, 4):
        raise ValueError("multmatrix requires a 4x4 matrix.")
    if not np.allclose(mat[:3, :3] @ mat[:3, :3].T, np.eye(3), atol=1e-9) or np.linalg.det(mat[:3, :3]) < 0:
        raise ValueError("Only rigid (rotation + translation) transforms are supported.")
    if isinstance(solid, Transform):
        return Transform.from_array(solid.child, mat @ solid.to_array())
    return Transform.from_array(solid, mat)


def translate(solid: Solid, offset: Sequence[float]) -> Transform:
    """Return the solid moved by `offset`."""
    return multmatrix(solid, translation_matrix(offset))


def rotate(
    solid: Solid,
    axis: Sequence[float],
    angle_deg: float,
    origin: Sequence[float] = (0.0, 0.0, 0.0),
) -> Transform:
    """Return the solid rotated around an arbitrary axis."""
    return multmatrix(solid, rotation_matrix(axis, angle_deg, origin))

"""NumPy-backed vector helpers used by the mesh operations.

Vectors are plain numpy arrays; point sets are (N, 3) arrays.
"""

from typing import Iterable

import numpy as np
from numpy.typing import NDArray

# Type aliases
Vec3 = NDArray[np.float64]
Points = NDArray[np.float64]


def normalize_rows(points: Points) -> Points:
    """Scale every row to unit length; zero rows stay zero."""
    lengths = np.linalg.norm(points, axis=1, keepdims=True)
    safe = np.where(lengths < 1e-10, 1.0, lengths)
    return np.where(lengths < 1e-10, 0.0, points / safe)


def midpoint(a: Vec3, b: Vec3) -> Vec3:
    return (a + b) * 0.5


def min_max_normalize(values: NDArray) -> NDArray[np.float64]:
    """Map each column linearly onto [0, 1]; constant columns map to 0."""
    values = np.asarray(values, dtype=np.float64)
    lo = values.min(axis=0)
    span = values.max(axis=0) - lo
    out = np.zeros_like(values)
    nonzero = span > 0
    out[:, nonzero] = (values[:, nonzero] - lo[nonzero]) / span[nonzero]
    return out


def area_weighted_normals(
    positions: NDArray,
    triangles: Iterable[tuple[int, int, int]],
) -> Points:
    """Per-vertex unit normals weighted by adjacent triangle area.

    The cross product of two triangle edges has length twice the triangle
    area, so summing unnormalized face normals gives the area weighting.
    """
    pos = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    normals = np.zeros_like(pos)
    tris = np.array(list(triangles), dtype=np.intp).reshape(-1, 3)
    if len(tris):
        v0, v1, v2 = pos[tris[:, 0]], pos[tris[:, 1]], pos[tris[:, 2]]
        face_normals = np.cross(v1 - v0, v2 - v0)
        for k in range(3):
            np.add.at(normals, tris[:, k], face_normals)
    return normalize_rows(normals)

"""Procedural primitive meshes.

All primitives are centered on the origin with a single surface and no
UVs.  Facets are wound counter-clockwise seen from outside, so the normal
``(v1 - v0) x (v2 - v0)`` points outward.
"""

import logging
import math

import numpy as np

from meshforge.core.math_utils import midpoint, normalize_rows
from meshforge.core.mesh import Facet, Mesh, Surface

logger = logging.getLogger(__name__)

# Cube corner i has x, y, z = -1/+1 from bits 0, 1, 2 of i
_CUBE_VERTS = [
    (-1, -1, -1), (1, -1, -1), (-1, 1, -1), (1, 1, -1),
    (-1, -1, 1), (1, -1, 1), (-1, 1, 1), (1, 1, 1),
]
# Order: -Z, +Z, -X, +X, -Y, +Y (the +Y lid is omitted when open)
_CUBE_QUADS = [
    (0, 2, 3, 1),
    (4, 5, 7, 6),
    (0, 4, 6, 2),
    (1, 3, 7, 5),
    (0, 1, 5, 4),
    (2, 6, 7, 3),
]

# Square base in the y=0 plane, apex above
_PYRAMID_VERTS = [(-1, 0, -1), (1, 0, -1), (1, 0, 1), (-1, 0, 1), (0, 1, 0)]
_PYRAMID_TRIS = [(0, 4, 1), (1, 4, 2), (2, 4, 3), (3, 4, 0)]
_PYRAMID_BASE = (0, 1, 2, 3)

# Alternating cube corners
_TETRA_VERTS = [(1, 1, 1), (-1, -1, 1), (-1, 1, -1), (1, -1, -1)]
_TETRA_TRIS = [(0, 2, 1), (0, 1, 3), (0, 3, 2), (1, 2, 3)]

# +X, -X, +Y, -Y, +Z, -Z; one triangle per octant
_OCTA_VERTS = [(1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1)]
_OCTA_TRIS = [
    (0, 2, 4), (1, 4, 2), (0, 4, 3), (1, 3, 4),
    (0, 5, 2), (1, 2, 5), (0, 3, 5), (1, 5, 3),
]


def _mesh(name: str, verts, facets) -> Mesh:
    return Mesh(
        name=name,
        verts=np.array(verts, dtype=np.float32),
        surfaces=[Surface(name=name, facets=[Facet(f) for f in facets])],
    )


def cube(open: bool = False) -> Mesh:
    """Cube with corners at (+-1, +-1, +-1): 8 vertices, 6 quads.

    ``open`` omits the +Y quad, leaving the vertices unchanged.
    """
    quads = _CUBE_QUADS[:-1] if open else _CUBE_QUADS
    return _mesh("cube", _CUBE_VERTS, quads)


def pyramid(open: bool = False) -> Mesh:
    """Square pyramid: 5 vertices, 4 side triangles and a base quad.

    ``open`` omits the base quad.
    """
    facets = list(_PYRAMID_TRIS)
    if not open:
        facets.append(_PYRAMID_BASE)
    return _mesh("pyramid", _PYRAMID_VERTS, facets)


def tetrahedron(open: bool = False) -> Mesh:
    """Regular tetrahedron: 4 vertices, 4 triangles (3 when ``open``)."""
    tris = _TETRA_TRIS[:-1] if open else _TETRA_TRIS
    return _mesh("tetrahedron", _TETRA_VERTS, tris)


def octahedron(open: bool = False) -> Mesh:
    """Regular octahedron: 6 vertices, 8 triangles (7 when ``open``)."""
    tris = _OCTA_TRIS[:-1] if open else _OCTA_TRIS
    return _mesh("octahedron", _OCTA_VERTS, tris)


def n_tent(n: int) -> Mesh:
    """Closed n-sided tent.

    Vertices 0..n-1 lie on the unit circle in the XZ plane, vertex n is the
    apex (0, 1, 0) and vertex n+1 the base centre.  Side triangles are
    ``(apex, i+1, i)`` and base triangles ``(base, i, i+1)``.
    """
    if n < 3:
        raise ValueError(f"n_tent needs at least 3 ring vertices, got {n}")
    verts = []
    for i in range(n):
        theta = (i / n) * 2 * math.pi
        verts.append((math.cos(theta), 0.0, math.sin(theta)))
    apex, base = n, n + 1
    verts.append((0.0, 1.0, 0.0))
    verts.append((0.0, 0.0, 0.0))

    tris = []
    for i in range(n):
        tris.append((apex, (i + 1) % n, i))
    for i in range(n):
        tris.append((base, i, (i + 1) % n))
    return _mesh(f"tent{n}", verts, tris)


def _subdivide(verts: list, tris: list[tuple[int, int, int]]) -> list[tuple[int, int, int]]:
    """Split each triangle into four, appending edge midpoints to ``verts``.

    A midpoint is created once per edge and shared by both neighbours.
    """
    midpoints: dict[tuple[int, int], int] = {}

    def mid(a: int, b: int) -> int:
        key = (a, b) if a < b else (b, a)
        idx = midpoints.get(key)
        if idx is None:
            idx = len(verts)
            verts.append(midpoint(verts[a], verts[b]))
            midpoints[key] = idx
        return idx

    out = []
    for a, b, c in tris:
        ab, bc, ca = mid(a, b), mid(b, c), mid(c, a)
        out.extend([(a, ab, ca), (ab, b, bc), (ca, bc, c), (ab, bc, ca)])
    return out


def create_sphere(radius: float, subdivisions: int) -> Mesh:
    """Sphere by repeated 4:1 subdivision of a tetrahedron.

    After each pass every vertex is pushed back onto the sphere of the
    given radius.  With zero subdivisions the tetrahedron itself is scaled
    to the radius.  Yields ``4 ** (subdivisions + 1)`` triangles.
    """
    if radius <= 0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    if subdivisions < 0:
        raise ValueError(f"Subdivision count must be >= 0, got {subdivisions}")

    verts = list(normalize_rows(np.array(_TETRA_VERTS, dtype=np.float64)) * radius)
    tris = list(_TETRA_TRIS)
    for _ in range(subdivisions):
        tris = _subdivide(verts, tris)
        verts = list(normalize_rows(np.array(verts)) * radius)

    logger.debug(
        "create_sphere: r=%g, %d passes, %d verts, %d tris",
        radius, subdivisions, len(verts), len(tris),
    )
    return _mesh("sphere", verts, tris)

"""Heightfield image to grid mesh conversion."""

import logging

import numpy as np
from numpy.typing import NDArray

from meshforge.core.image import to_greyscale
from meshforge.core.math_utils import min_max_normalize
from meshforge.core.mesh import Facet, Mesh, Surface

logger = logging.getLogger(__name__)


def _axis_uv(count: int) -> NDArray[np.float64]:
    if count < 2:
        return np.zeros(count, dtype=np.float64)
    return np.arange(count, dtype=np.float64) / (count - 1)


def mesh_from_image(img: NDArray) -> Mesh:
    """Build a 2.5D grid mesh from a depth image.

    One vertex per pixel at (column, row, value), each axis rescaled to
    [0, 1] independently.  Each 2x2 pixel block becomes the quad
    ``(a, a+1, a+W+1, a+W)`` in raster order, facing +Z.

    UVs span the image bounds: pixel (c, r) maps to (c/(W-1), r/(H-1)).
    Depth is sampled at pixel centres while UVs reach the image border, so
    for exact correspondence the depth pixel centres should fill the domain
    while a texture's bounds map the domain.
    """
    depth = to_greyscale(img)
    height, width = depth.shape
    if width == 0 or height == 0:
        raise ValueError(f"Depth image must have at least one pixel, got {width}x{height}")

    rows, cols = np.mgrid[0:height, 0:width]
    positions = np.column_stack([cols.ravel(), rows.ravel(), depth.ravel()])
    verts = min_max_normalize(positions)

    u = _axis_uv(width)
    v = _axis_uv(height)
    uvs = np.column_stack([np.tile(u, height), np.repeat(v, width)])

    facets = []
    for r in range(height - 1):
        for c in range(width - 1):
            a = r * width + c
            quad = (a, a + 1, a + width + 1, a + width)
            facets.append(Facet(quad, quad))

    logger.debug("mesh_from_image: %dx%d -> %d quads", width, height, len(facets))
    return Mesh(
        name="heightfield",
        verts=verts,
        uvs=uvs,
        surfaces=[Surface(name="heightfield", facets=facets)],
    )

"""UV-driven displacement along vertex normals."""

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from meshforge.constants import EMBOSS_DEFAULT_RATIO, PATTERN_MAX_VALUE
from meshforge.core.config_loader import get_setting
from meshforge.core.errors import InvalidMeshError
from meshforge.core.image import sample_nearest, to_greyscale
from meshforge.core.math_utils import area_weighted_normals
from meshforge.core.mesh import Mesh

logger = logging.getLogger(__name__)


def vertex_normals(mesh: Mesh) -> NDArray[np.float64]:
    """Area-weighted unit normals; quads are split along the 0-2 diagonal."""
    tris = [t for f in mesh.all_facets() for t in f.triangles()]
    return area_weighted_normals(mesh.verts, tris)


def vertex_uvs(mesh: Mesh) -> tuple[NDArray[np.float64], NDArray[np.bool_]]:
    """UV of the first facet corner referencing each vertex.

    Returns (uvs, has_uv); vertices never paired with a UV have has_uv False.
    """
    uvs = np.zeros((mesh.num_verts, 2), dtype=np.float64)
    has_uv = np.zeros(mesh.num_verts, dtype=bool)
    for facet in mesh.all_facets():
        if facet.uvs is None:
            continue
        for v, u in zip(facet.verts, facet.uvs):
            if not has_uv[v]:
                uvs[v] = mesh.uvs[u]
                has_uv[v] = True
    return uvs, has_uv


def emboss(mesh: Mesh, pattern: NDArray, ratio: Optional[float] = None) -> NDArray[np.float32]:
    """Displace vertices along their normals by a greyscale pattern.

    A pattern value of 255 moves a vertex by ``ratio`` times the largest
    bounding box dimension; 0 leaves it in place.  Normals come from the
    undisplaced geometry.  Vertices without a UV do not move.

    Returns
    -------
    NDArray[np.float32]
        New (V, 3) positions; the mesh itself is not modified.
    """
    if ratio is None:
        ratio = get_setting("emboss_ratio", EMBOSS_DEFAULT_RATIO)
    mesh.validate()
    if not mesh.has_uvs:
        raise InvalidMeshError(f"emboss requires a mesh with UVs ('{mesh.name}' has none)")

    normals = vertex_normals(mesh)
    uvs, has_uv = vertex_uvs(mesh)
    grey = to_greyscale(pattern)
    values = np.zeros(mesh.num_verts, dtype=np.float64)
    values[has_uv] = sample_nearest(grey, uvs[has_uv])

    scale = ratio * mesh.max_dim() / PATTERN_MAX_VALUE
    offsets = normals * (values * scale)[:, np.newaxis]
    logger.debug(
        "emboss: %d/%d vertices sampled, max offset %.4g",
        int(has_uv.sum()), mesh.num_verts,
        float(np.abs(offsets).max()) if len(offsets) else 0.0,
    )
    return (mesh.verts.astype(np.float64) + offsets).astype(np.float32)

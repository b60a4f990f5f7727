"""Surface and mesh merging."""

import logging
from dataclasses import replace
from typing import Sequence

import numpy as np

from meshforge.core.errors import InvalidMeshError, VertexCountMismatchError
from meshforge.core.mesh import Mesh, Surface

logger = logging.getLogger(__name__)


def merge_same_name_surfaces(mesh: Mesh) -> Mesh:
    """Merge surfaces sharing an exact name, in order of first appearance.

    Facets and surface points are concatenated; surface point facet
    indices are offset by the facets already gathered for that name.
    """
    mesh.validate()
    merged: dict[str, Surface] = {}
    for surf in mesh.surfaces:
        target = merged.get(surf.name)
        if target is None:
            target = Surface(name=surf.name)
            merged[surf.name] = target
        offset = target.num_facets
        target.facets.extend(surf.facets)
        target.surf_points.extend(p.moved(p.facet_idx + offset) for p in surf.surf_points)
    logger.debug(
        "merge_same_name_surfaces: %d -> %d surfaces", len(mesh.surfaces), len(merged),
    )
    return replace(mesh, surfaces=list(merged.values()))


def merge_mesh_surfaces(m0: Mesh, m1: Mesh) -> Mesh:
    """Append the surfaces of ``m1`` to ``m0``.

    Both meshes must share a vertex numbering, so their vertex counts must
    match.  The result keeps everything of ``m0`` (vertices, UVs, marked
    vertices, morphs, material); ``m1`` contributes only its surfaces,
    whose facets are used as-is.
    """
    if m0.num_verts != m1.num_verts:
        raise VertexCountMismatchError(m0.num_verts, m1.num_verts)
    for facet in m1.all_facets():
        if facet.uvs is not None and max(facet.uvs) >= m0.num_uvs:
            raise InvalidMeshError(
                f"Surface facet references UV {max(facet.uvs)} but the merged "
                f"mesh keeps only {m0.num_uvs} UVs"
            )
    merged = replace(m0, surfaces=m0.surfaces + m1.surfaces)
    merged.validate()
    return merged


def merge_meshes(meshes: Sequence[Mesh]) -> Mesh:
    """Concatenate meshes in order.

    Vertex and UV lists are concatenated and the indices of each later mesh
    are offset by the running totals.  Surfaces are appended without
    merging by name.  Marked vertices, name and material come from the
    first mesh only.  Every morph target is kept under its original name
    and widened to the merged vertex list.
    """
    meshes = list(meshes)
    if not meshes:
        return Mesh()
    for mesh in meshes:
        mesh.validate()

    total_verts = sum(m.num_verts for m in meshes)
    surfaces: list[Surface] = []
    morphs = []
    vert_offset = 0
    uv_offset = 0
    for mesh in meshes:
        for surf in mesh.surfaces:
            surfaces.append(Surface(
                name=surf.name,
                facets=[f.offset(vert_offset, uv_offset) for f in surf.facets],
                surf_points=[p.moved(p.facet_idx) for p in surf.surf_points],
            ))
        morphs.extend(m.shifted(vert_offset, total_verts) for m in mesh.morphs)
        vert_offset += mesh.num_verts
        uv_offset += mesh.num_uvs

    first = meshes[0]
    logger.debug(
        "merge_meshes: %d meshes, %d vertices, %d surfaces",
        len(meshes), total_verts, len(surfaces),
    )
    return Mesh(
        name=first.name,
        verts=np.concatenate([m.verts for m in meshes]),
        uvs=np.concatenate([m.uvs for m in meshes]),
        surfaces=surfaces,
        marked_verts=first.marked_verts,
        morphs=morphs,
        material=first.material,
    )


def merge_mesh_pair(m0: Mesh, m1: Mesh) -> Mesh:
    """Two-mesh form of :func:`merge_meshes`; ``m1``'s marked vertices and
    material are discarded."""
    return merge_meshes([m0, m1])

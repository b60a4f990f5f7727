"""Canonicalization passes: merge identical vertices/UVs, drop duplicate
facets and unreferenced vertices.

Every pass returns a new :class:`Mesh`; the input is left untouched.
Inputs are validated first, so dangling indices raise
:class:`~meshforge.core.errors.InvalidMeshError` instead of being rewritten.
"""

import logging
from dataclasses import replace
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from meshforge.core.mesh import Facet, MarkedVertex, Mesh, Surface

logger = logging.getLogger(__name__)


def _unify_rows(rows: NDArray) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
    """Group bit-identical rows.

    Returns (kept, old_to_new): ``kept`` lists the lowest original index of
    each group in ascending order, ``old_to_new`` maps every row to its
    group's position in ``kept``.
    """
    rows = np.ascontiguousarray(rows)
    old_to_new = np.empty(len(rows), dtype=np.intp)
    # Hash map: raw row bytes → new index.  Byte keys keep 0.0 and -0.0 apart.
    first_of: dict[bytes, int] = {}
    kept: list[int] = []
    for i in range(len(rows)):
        key = rows[i].tobytes()
        idx = first_of.get(key)
        if idx is None:
            idx = len(kept)
            first_of[key] = idx
            kept.append(i)
        old_to_new[i] = idx
    return np.array(kept, dtype=np.intp), old_to_new


def _remap_surfaces(
    surfaces: list[Surface],
    vert_map: Optional[NDArray[np.intp]] = None,
    uv_map: Optional[NDArray[np.intp]] = None,
) -> list[Surface]:
    return [
        Surface(
            name=s.name,
            facets=[f.remapped(vert_map, uv_map) for f in s.facets],
            surf_points=[p.moved(p.facet_idx) for p in s.surf_points],
        )
        for s in surfaces
    ]


def unify_identical_verts(mesh: Mesh) -> Mesh:
    """Collapse vertices with bit-identical coordinates.

    Each group is represented by its lowest original index and the
    compacted list keeps representatives in ascending order.  Facets,
    marked vertices and morph targets are rewritten to the representative;
    for morphs the representative's own delta is kept.
    """
    mesh.validate()
    kept, old_to_new = _unify_rows(mesh.verts)
    logger.debug("unify_identical_verts: %d -> %d vertices", mesh.num_verts, len(kept))
    return replace(
        mesh,
        verts=mesh.verts[kept],
        surfaces=_remap_surfaces(mesh.surfaces, vert_map=old_to_new),
        marked_verts=[
            MarkedVertex(int(old_to_new[mv.vert_idx]), mv.label) for mv in mesh.marked_verts
        ],
        morphs=[m.remap(old_to_new) for m in mesh.morphs],
    )


def unify_identical_uvs(mesh: Mesh) -> Mesh:
    """Collapse bit-identical UV coordinates onto the lowest original index."""
    mesh.validate()
    kept, old_to_new = _unify_rows(mesh.uvs)
    logger.debug("unify_identical_uvs: %d -> %d uvs", mesh.num_uvs, len(kept))
    return replace(
        mesh,
        uvs=mesh.uvs[kept],
        surfaces=_remap_surfaces(mesh.surfaces, uv_map=old_to_new),
    )


def remove_duplicate_facets(mesh: Mesh) -> Mesh:
    """Drop facets repeating an earlier facet's exact vertex sequence.

    Only identical ordered sequences count: a rotated or reverse-wound
    facet is a different facet.  The first occurrence (with its UVs) is
    kept and order is preserved.  Surface points on a dropped facet move to
    the kept copy.
    """
    mesh.validate()
    surfaces = []
    dropped = 0
    for surf in mesh.surfaces:
        seen: dict[tuple[int, ...], int] = {}
        facets: list[Facet] = []
        facet_map: list[int] = []
        for facet in surf.facets:
            idx = seen.get(facet.verts)
            if idx is None:
                idx = len(facets)
                seen[facet.verts] = idx
                facets.append(facet)
            else:
                dropped += 1
            facet_map.append(idx)
        points = [p.moved(facet_map[p.facet_idx]) for p in surf.surf_points]
        surfaces.append(Surface(surf.name, facets, points))
    logger.debug("remove_duplicate_facets: dropped %d facets", dropped)
    return replace(mesh, surfaces=surfaces)


def _compaction_map(used: NDArray[np.bool_]) -> NDArray[np.intp]:
    old_to_new = np.full(len(used), -1, dtype=np.intp)
    old_to_new[used] = np.arange(int(used.sum()), dtype=np.intp)
    return old_to_new


def remove_unused_verts(mesh: Mesh) -> Mesh:
    """Remove vertices not referenced by a facet or marked vertex, and UVs
    not referenced by a facet.

    Remaining indices are compacted in their original order.  Dense morphs
    are compacted; sparse morph entries on removed vertices are dropped.
    """
    mesh.validate()
    vert_used = np.zeros(mesh.num_verts, dtype=bool)
    uv_used = np.zeros(mesh.num_uvs, dtype=bool)
    for facet in mesh.all_facets():
        vert_used[list(facet.verts)] = True
        if facet.uvs is not None:
            uv_used[list(facet.uvs)] = True
    for mv in mesh.marked_verts:
        vert_used[mv.vert_idx] = True

    vert_map = _compaction_map(vert_used)
    uv_map = _compaction_map(uv_used)
    logger.debug(
        "remove_unused_verts: kept %d/%d vertices, %d/%d uvs",
        int(vert_used.sum()), mesh.num_verts, int(uv_used.sum()), mesh.num_uvs,
    )
    return replace(
        mesh,
        verts=mesh.verts[vert_used],
        uvs=mesh.uvs[uv_used],
        surfaces=_remap_surfaces(mesh.surfaces, vert_map=vert_map, uv_map=uv_map),
        marked_verts=[
            MarkedVertex(int(vert_map[mv.vert_idx]), mv.label) for mv in mesh.marked_verts
        ],
        morphs=[m.remap(vert_map) for m in mesh.morphs],
    )

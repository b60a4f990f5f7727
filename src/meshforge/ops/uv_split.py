"""Split surfaces into UV islands."""

import logging
from dataclasses import replace
from typing import Optional

import numpy as np
from numpy.typing import NDArray
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import connected_components

from meshforge.constants import UV_SPLIT_SEPARATOR
from meshforge.core.config_loader import get_setting
from meshforge.core.mesh import Mesh, Surface

logger = logging.getLogger(__name__)


def uv_islands(surf: Surface, num_uvs: int) -> NDArray[np.intp]:
    """Label each facet of ``surf`` with its UV island.

    Facets sharing a UV index are connected.  The graph is bipartite: node
    ``i < F`` is facet i, node ``F + u`` is UV index u.  Islands are
    numbered by their first facet, so facet 0 is always in island 0.
    Facets without UVs are islands of their own.
    """
    n_facets = surf.num_facets
    if n_facets == 0:
        return np.zeros(0, dtype=np.intp)
    edges: list[tuple[int, int]] = []
    for fi, facet in enumerate(surf.facets):
        if facet.uvs is None:
            continue
        edges.extend((fi, n_facets + u) for u in facet.uvs)
    edge_arr = np.array(edges, dtype=np.intp).reshape(-1, 2)
    n_nodes = n_facets + num_uvs
    graph = csr_matrix(
        (np.ones(len(edge_arr), dtype=np.int8), (edge_arr[:, 0], edge_arr[:, 1])),
        shape=(n_nodes, n_nodes),
    )
    _, labels = connected_components(graph, directed=False)
    facet_labels = labels[:n_facets]

    found, first = np.unique(facet_labels, return_index=True)
    lookup = np.empty(int(labels.max()) + 1, dtype=np.intp)
    lookup[found[np.argsort(first)]] = np.arange(len(found))
    return lookup[facet_labels]


def _split_surface(surf: Surface, num_uvs: int, separator: str) -> list[Surface]:
    if not surf.has_uvs:
        return [surf.copy()]
    labels = uv_islands(surf, num_uvs)
    n_islands = int(labels.max()) + 1
    if n_islands == 1:
        return [surf.copy()]

    islands = [Surface(name=f"{surf.name}{separator}{k}") for k in range(n_islands)]
    position: list[int] = []
    for facet, label in zip(surf.facets, labels):
        island = islands[label]
        position.append(island.num_facets)
        island.facets.append(facet)
    for p in surf.surf_points:
        islands[labels[p.facet_idx]].surf_points.append(p.moved(position[p.facet_idx]))
    return islands


def split_surfs_by_uvs(mesh: Mesh, separator: Optional[str] = None) -> Mesh:
    """Split every surface into its connected UV islands.

    A surface forming a single island keeps its name and content.  A
    surface with k > 1 islands is replaced by surfaces named
    ``name-0`` .. ``name-(k-1)`` (separator configurable), islands ordered
    by their first facet and facet order kept within each island.  A
    surface without any UVs passes through unchanged.
    """
    mesh.validate()
    if separator is None:
        separator = get_setting("uv_split_separator", UV_SPLIT_SEPARATOR)
    surfaces: list[Surface] = []
    for surf in mesh.surfaces:
        surfaces.extend(_split_surface(surf, mesh.num_uvs, separator))
    logger.debug(
        "split_surfs_by_uvs: %d -> %d surfaces", len(mesh.surfaces), len(surfaces),
    )
    return replace(mesh, surfaces=surfaces)

"""Mesh data structures: vertices, UVs, surfaces, landmarks and morph targets."""

from dataclasses import dataclass, field, replace
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from meshforge.core.errors import InvalidMeshError
from meshforge.core.material import Material


def _empty(cols: int) -> NDArray[np.float32]:
    return np.zeros((0, cols), dtype=np.float32)


@dataclass(frozen=True)
class Facet:
    """A triangle or quad.

    verts: ordered vertex indices; winding gives the normal direction
    uvs: optional UV indices parallel to ``verts``
    """
    verts: tuple[int, ...]
    uvs: Optional[tuple[int, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "verts", tuple(int(v) for v in self.verts))
        if len(self.verts) not in (3, 4):
            raise InvalidMeshError(
                f"Facet must have 3 or 4 vertices, got {len(self.verts)}"
            )
        if min(self.verts) < 0:
            raise InvalidMeshError(f"Facet has a negative vertex index: {self.verts}")
        if self.uvs is not None:
            object.__setattr__(self, "uvs", tuple(int(u) for u in self.uvs))
            if len(self.uvs) != len(self.verts):
                raise InvalidMeshError(
                    f"Facet has {len(self.verts)} vertex indices but "
                    f"{len(self.uvs)} UV indices"
                )
            if min(self.uvs) < 0:
                raise InvalidMeshError(f"Facet has a negative UV index: {self.uvs}")

    @property
    def is_quad(self) -> bool:
        return len(self.verts) == 4

    @property
    def has_uvs(self) -> bool:
        return self.uvs is not None

    def remapped(self, vert_map=None, uv_map=None) -> "Facet":
        """Return a copy with indices looked up through the given arrays."""
        verts = self.verts
        if vert_map is not None:
            verts = tuple(int(vert_map[v]) for v in verts)
        uvs = self.uvs
        if uvs is not None and uv_map is not None:
            uvs = tuple(int(uv_map[u]) for u in uvs)
        return Facet(verts, uvs)

    def offset(self, vert_offset: int, uv_offset: int) -> "Facet":
        uvs = None
        if self.uvs is not None:
            uvs = tuple(u + uv_offset for u in self.uvs)
        return Facet(tuple(v + vert_offset for v in self.verts), uvs)

    def triangles(self) -> list[tuple[int, int, int]]:
        """Split into triangles along the 0-2 diagonal, keeping winding."""
        v = self.verts
        if len(v) == 3:
            return [v]
        return [(v[0], v[1], v[2]), (v[0], v[2], v[3])]

    def uv_edges(self) -> list[tuple[int, int]]:
        if self.uvs is None:
            return []
        n = len(self.uvs)
        return [(self.uvs[i], self.uvs[(i + 1) % n]) for i in range(n)]


@dataclass
class SurfacePoint:
    """A labelled barycentric location on one facet of a surface."""
    facet_idx: int
    weights: tuple[float, ...] = (1 / 3, 1 / 3, 1 / 3)
    label: str = ""

    def moved(self, facet_idx: int) -> "SurfacePoint":
        return SurfacePoint(int(facet_idx), tuple(self.weights), self.label)


@dataclass
class Surface:
    """Named group of facets (one logical part or material region)."""
    name: str = ""
    facets: list[Facet] = field(default_factory=list)
    surf_points: list[SurfacePoint] = field(default_factory=list)

    @property
    def num_facets(self) -> int:
        return len(self.facets)

    @property
    def num_tris(self) -> int:
        return sum(1 for f in self.facets if not f.is_quad)

    @property
    def num_quads(self) -> int:
        return sum(1 for f in self.facets if f.is_quad)

    @property
    def has_uvs(self) -> bool:
        return any(f.has_uvs for f in self.facets)

    def copy(self) -> "Surface":
        return Surface(
            self.name,
            list(self.facets),
            [p.moved(p.facet_idx) for p in self.surf_points],
        )


@dataclass
class MarkedVertex:
    """Landmark annotation on a vertex."""
    vert_idx: int
    label: str = ""


def _first_old_per_new(old_to_new: NDArray[np.intp]) -> NDArray[np.intp]:
    """Lowest old index for every new index 0..N-1 (dropped entries are -1)."""
    new_ids, first_old = np.unique(old_to_new, return_index=True)
    return first_old[new_ids >= 0]


@dataclass
class DenseMorph:
    """Morph target storing one delta per base vertex."""
    name: str
    deltas: NDArray[np.float32] = field(default_factory=lambda: _empty(3))

    def __post_init__(self):
        self.deltas = np.array(self.deltas, dtype=np.float32).reshape(-1, 3)

    def accumulate(self, out: NDArray, weight: float) -> None:
        if len(self.deltas) != len(out):
            raise InvalidMeshError(
                f"Dense morph '{self.name}' has {len(self.deltas)} deltas "
                f"for {len(out)} vertices"
            )
        out += weight * self.deltas

    def remap(self, old_to_new: NDArray[np.intp]) -> "DenseMorph":
        """Compact to a new vertex numbering.

        ``old_to_new`` maps every old vertex to its new index (-1 if dropped).
        Where several old vertices land on one new vertex the lowest old
        index supplies the delta.
        """
        return DenseMorph(self.name, self.deltas[_first_old_per_new(old_to_new)])

    def shifted(self, offset: int, total: int) -> "DenseMorph":
        """Embed into a larger vertex list starting at ``offset``, zero elsewhere."""
        deltas = np.zeros((total, 3), dtype=np.float32)
        deltas[offset:offset + len(self.deltas)] = self.deltas
        return DenseMorph(self.name, deltas)

    def validate(self, num_verts: int) -> None:
        if len(self.deltas) != num_verts:
            raise InvalidMeshError(
                f"Dense morph '{self.name}' has {len(self.deltas)} deltas, "
                f"mesh has {num_verts} vertices"
            )


@dataclass
class SparseMorph:
    """Morph target storing deltas for listed vertices only."""
    name: str
    indices: NDArray[np.intp] = field(default_factory=lambda: np.zeros(0, dtype=np.intp))
    deltas: NDArray[np.float32] = field(default_factory=lambda: _empty(3))

    def __post_init__(self):
        self.indices = np.array(self.indices, dtype=np.intp).reshape(-1)
        self.deltas = np.array(self.deltas, dtype=np.float32).reshape(-1, 3)
        if len(self.indices) != len(self.deltas):
            raise InvalidMeshError(
                f"Sparse morph '{self.name}': {len(self.indices)} indices "
                f"but {len(self.deltas)} deltas"
            )

    def accumulate(self, out: NDArray, weight: float) -> None:
        self.validate(len(out))
        # add.at so repeated indices sum instead of overwrite
        np.add.at(out, self.indices, weight * self.deltas)

    def remap(self, old_to_new: NDArray[np.intp]) -> "SparseMorph":
        """Renumber entries; entries on dropped vertices are removed.

        When several entries land on one new vertex only the entry with the
        lowest old vertex index is kept.  Entry order is otherwise preserved.
        """
        new = old_to_new[self.indices]
        valid = np.flatnonzero(new >= 0)
        order = valid[np.argsort(self.indices[valid], kind="stable")]
        _, first = np.unique(new[order], return_index=True)
        keep = np.sort(order[first])
        return SparseMorph(self.name, new[keep], self.deltas[keep])

    def shifted(self, offset: int, total: int) -> "SparseMorph":
        return SparseMorph(self.name, self.indices + offset, self.deltas)

    def validate(self, num_verts: int) -> None:
        if len(self.indices) and (self.indices.min() < 0 or self.indices.max() >= num_verts):
            raise InvalidMeshError(
                f"Sparse morph '{self.name}' references vertex "
                f"{int(self.indices.max())} but mesh has {num_verts} vertices"
            )


MorphTarget = Union[DenseMorph, SparseMorph]


@dataclass
class Mesh:
    """Indexed polygon mesh with named surfaces.

    verts: (V, 3) float32 positions
    uvs: (U, 2) float32 texture coordinates, indexed separately from verts
    surfaces: facet groups referencing ``verts`` and ``uvs``
    marked_verts: landmark annotations
    morphs: named blend shapes (names need not be unique; first match wins)

    Arrays, surfaces, marked vertices, morphs and the material are copied on
    construction so a mesh never aliases another mesh's storage.
    """
    name: str = ""
    verts: NDArray[np.float32] = field(default_factory=lambda: _empty(3))
    uvs: NDArray[np.float32] = field(default_factory=lambda: _empty(2))
    surfaces: list[Surface] = field(default_factory=list)
    marked_verts: list[MarkedVertex] = field(default_factory=list)
    morphs: list[MorphTarget] = field(default_factory=list)
    material: Material = field(default_factory=Material)

    def __post_init__(self):
        self.verts = np.array(self.verts, dtype=np.float32).reshape(-1, 3)
        self.uvs = np.array(self.uvs, dtype=np.float32).reshape(-1, 2)
        self.surfaces = [s.copy() for s in self.surfaces]
        self.marked_verts = [replace(mv) for mv in self.marked_verts]
        # replace() re-runs __post_init__, which copies the delta arrays
        self.morphs = [replace(m) for m in self.morphs]
        self.material = replace(self.material)

    @property
    def num_verts(self) -> int:
        return len(self.verts)

    @property
    def num_uvs(self) -> int:
        return len(self.uvs)

    @property
    def num_facets(self) -> int:
        return sum(s.num_facets for s in self.surfaces)

    @property
    def num_tris(self) -> int:
        return sum(s.num_tris for s in self.surfaces)

    @property
    def num_quads(self) -> int:
        return sum(s.num_quads for s in self.surfaces)

    @property
    def has_uvs(self) -> bool:
        return self.num_uvs > 0 and any(s.has_uvs for s in self.surfaces)

    def all_facets(self) -> list[Facet]:
        return [f for s in self.surfaces for f in s.facets]

    def bounds(self) -> tuple[NDArray[np.float32], NDArray[np.float32]]:
        """Axis-aligned bounding box as (min, max); zeros for an empty mesh."""
        if self.num_verts == 0:
            zero = np.zeros(3, dtype=np.float32)
            return zero, zero.copy()
        return self.verts.min(axis=0), self.verts.max(axis=0)

    def max_dim(self) -> float:
        lo, hi = self.bounds()
        return float((hi - lo).max())

    def find_morph(self, name: str) -> Optional[MorphTarget]:
        for morph in self.morphs:
            if morph.name == name:
                return morph
        return None

    def morph_names(self) -> list[str]:
        return [m.name for m in self.morphs]

    def validate(self) -> None:
        """Raise :class:`InvalidMeshError` if any index invariant is broken."""
        nv, nu = self.num_verts, self.num_uvs
        for surf in self.surfaces:
            for fi, facet in enumerate(surf.facets):
                for v in facet.verts:
                    if not 0 <= v < nv:
                        raise InvalidMeshError(
                            f"Surface '{surf.name}' facet {fi} references vertex {v}, "
                            f"mesh has {nv} vertices"
                        )
                if facet.uvs is not None:
                    for u in facet.uvs:
                        if not 0 <= u < nu:
                            raise InvalidMeshError(
                                f"Surface '{surf.name}' facet {fi} references UV {u}, "
                                f"mesh has {nu} UVs"
                            )
            for pt in surf.surf_points:
                if not 0 <= pt.facet_idx < surf.num_facets:
                    raise InvalidMeshError(
                        f"Surface point '{pt.label}' on '{surf.name}' references facet "
                        f"{pt.facet_idx}, surface has {surf.num_facets} facets"
                    )
        for mv in self.marked_verts:
            if not 0 <= mv.vert_idx < nv:
                raise InvalidMeshError(
                    f"Marked vertex '{mv.label}' references vertex {mv.vert_idx}, "
                    f"mesh has {nv} vertices"
                )
        for morph in self.morphs:
            morph.validate(nv)

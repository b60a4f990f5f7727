"""Mesh operations: canonicalization, merging, splitting, generation,
displacement and morphing."""

from meshforge.ops.canonicalize import (
    remove_duplicate_facets,
    remove_unused_verts,
    unify_identical_uvs,
    unify_identical_verts,
)
from meshforge.ops.emboss import emboss
from meshforge.ops.image_mesh import mesh_from_image
from meshforge.ops.merge import (
    merge_mesh_pair,
    merge_mesh_surfaces,
    merge_meshes,
    merge_same_name_surfaces,
)
from meshforge.ops.morph import MorphVal, apply_expression, apply_morph
from meshforge.ops.primitives import (
    create_sphere,
    cube,
    n_tent,
    octahedron,
    pyramid,
    tetrahedron,
)
from meshforge.ops.uv_mask import mask_from_uvs, uv_image
from meshforge.ops.uv_split import split_surfs_by_uvs

__all__ = [
    "MorphVal",
    "apply_expression",
    "apply_morph",
    "create_sphere",
    "cube",
    "emboss",
    "mask_from_uvs",
    "merge_mesh_pair",
    "merge_mesh_surfaces",
    "merge_meshes",
    "merge_same_name_surfaces",
    "mesh_from_image",
    "n_tent",
    "octahedron",
    "pyramid",
    "remove_duplicate_facets",
    "remove_unused_verts",
    "split_surfs_by_uvs",
    "tetrahedron",
    "unify_identical_uvs",
    "unify_identical_verts",
    "uv_image",
]

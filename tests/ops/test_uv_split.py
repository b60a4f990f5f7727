"""Tests for UV island splitting."""

import numpy as np
import pytest

from meshforge.core.errors import InvalidMeshError
from meshforge.core.mesh import Facet, Mesh, Surface, SurfacePoint
from meshforge.ops.image_mesh import mesh_from_image
from meshforge.ops.uv_split import split_surfs_by_uvs, uv_islands


def _two_island_mesh() -> Mesh:
    """Four triangles interleaving two UV islands: {0, 2} and {1, 3}."""
    facets = [
        Facet((0, 1, 2), (0, 1, 2)),
        Facet((3, 4, 5), (3, 4, 5)),
        Facet((1, 2, 6), (2, 1, 6)),
        Facet((4, 5, 7), (5, 7, 8)),
    ]
    return Mesh(
        name="m",
        verts=np.zeros((8, 3)),
        uvs=np.zeros((9, 2)),
        surfaces=[Surface("skin", facets, [SurfacePoint(2, label="a"), SurfacePoint(3, label="b")])],
    )


def test_uv_islands_labels():
    mesh = _two_island_mesh()
    np.testing.assert_array_equal(uv_islands(mesh.surfaces[0], mesh.num_uvs), [0, 1, 0, 1])


def test_split_into_two_islands():
    mesh = _two_island_mesh()
    out = split_surfs_by_uvs(mesh)
    assert [s.name for s in out.surfaces] == ["skin-0", "skin-1"]
    src = mesh.surfaces[0].facets
    assert out.surfaces[0].facets == [src[0], src[2]]
    assert out.surfaces[1].facets == [src[1], src[3]]
    out.validate()


def test_split_is_a_partition():
    mesh = _two_island_mesh()
    out = split_surfs_by_uvs(mesh)
    parts = [set(s.facets) for s in out.surfaces]
    assert parts[0].isdisjoint(parts[1])
    assert parts[0] | parts[1] == set(mesh.surfaces[0].facets)


def test_surface_points_follow_facets():
    out = split_surfs_by_uvs(_two_island_mesh())
    assert [(p.label, p.facet_idx) for p in out.surfaces[0].surf_points] == [("a", 1)]
    assert [(p.label, p.facet_idx) for p in out.surfaces[1].surf_points] == [("b", 1)]


def test_islands_ordered_by_first_facet():
    mesh = _two_island_mesh()
    facets = mesh.surfaces[0].facets
    mesh.surfaces[0] = Surface("skin", [facets[1], facets[0], facets[3], facets[2]])
    out = split_surfs_by_uvs(mesh)
    assert out.surfaces[0].facets == [facets[1], facets[3]]
    assert out.surfaces[1].facets == [facets[0], facets[2]]


def test_single_island_keeps_name():
    mesh = mesh_from_image(np.zeros((3, 3)))
    out = split_surfs_by_uvs(mesh)
    assert len(out.surfaces) == 1
    assert out.surfaces[0].name == "heightfield"
    assert out.surfaces[0].facets == mesh.surfaces[0].facets


def test_surface_without_uvs_unchanged():
    mesh = Mesh(
        verts=np.zeros((4, 3)),
        surfaces=[Surface("plain", [Facet((0, 1, 2)), Facet((1, 2, 3))])],
    )
    out = split_surfs_by_uvs(mesh)
    assert [s.name for s in out.surfaces] == ["plain"]
    assert out.surfaces[0].num_facets == 2


def test_facet_without_uvs_is_own_island():
    mesh = Mesh(
        verts=np.zeros((4, 3)),
        uvs=np.zeros((3, 2)),
        surfaces=[Surface("mixed", [Facet((0, 1, 2), (0, 1, 2)), Facet((1, 2, 3))])],
    )
    out = split_surfs_by_uvs(mesh)
    assert [s.num_facets for s in out.surfaces] == [1, 1]


def test_custom_separator_and_other_surfaces():
    mesh = _two_island_mesh()
    mesh.surfaces.insert(0, Surface("empty"))
    out = split_surfs_by_uvs(mesh, separator="#")
    assert [s.name for s in out.surfaces] == ["empty", "skin#0", "skin#1"]


def test_input_untouched():
    mesh = _two_island_mesh()
    split_surfs_by_uvs(mesh)
    assert len(mesh.surfaces) == 1
    assert mesh.surfaces[0].num_facets == 4


def test_dangling_uv_rejected():
    mesh = _two_island_mesh()
    mesh.surfaces[0].facets.append(Facet((0, 1, 2), (0, 1, 9)))
    with pytest.raises(InvalidMeshError, match="UV 9"):
        split_surfs_by_uvs(mesh)

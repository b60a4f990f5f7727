"""Tests for procedural primitives."""

import numpy as np
import pytest

from meshforge.core.mesh import Mesh
from meshforge.ops.canonicalize import remove_unused_verts, unify_identical_verts
from meshforge.ops.primitives import (
    create_sphere, cube, n_tent, octahedron, pyramid, tetrahedron,
)


def _assert_outward(mesh: Mesh):
    """Every facet normal points away from the vertex centroid."""
    pos = mesh.verts.astype(np.float64)
    centre = pos.mean(axis=0)
    for facet in mesh.all_facets():
        a, b, c = facet.triangles()[0]
        normal = np.cross(pos[b] - pos[a], pos[c] - pos[a])
        face_centre = pos[list(facet.verts)].mean(axis=0)
        assert np.dot(normal, face_centre - centre) > 0, facet


class TestFixedShapes:
    def test_cube(self):
        m = cube()
        assert m.num_verts == 8
        assert m.num_quads == 6
        assert m.num_tris == 0
        _assert_outward(m)
        m.validate()

    def test_open_cube(self):
        m = cube(open=True)
        assert m.num_verts == 8
        assert m.num_quads == 5
        assert m.all_facets() == cube().all_facets()[:5]

    def test_tetrahedron(self):
        m = tetrahedron()
        assert m.num_verts == 4
        assert m.num_tris == 4
        _assert_outward(m)
        edges = [np.linalg.norm(m.verts[i] - m.verts[j]) for i in range(4) for j in range(i + 1, 4)]
        np.testing.assert_allclose(edges, edges[0])

    def test_open_tetrahedron(self):
        m = tetrahedron(open=True)
        assert m.num_verts == 4
        assert m.num_tris == 3

    def test_pyramid(self):
        m = pyramid()
        assert m.num_verts == 5
        assert m.num_tris == 4
        assert m.num_quads == 1
        _assert_outward(m)
        open_m = pyramid(open=True)
        assert open_m.num_verts == 5
        assert open_m.num_quads == 0

    def test_octahedron(self):
        m = octahedron()
        assert m.num_verts == 6
        assert m.num_tris == 8
        _assert_outward(m)
        assert octahedron(open=True).num_tris == 7

    def test_closed_shapes_have_no_unused_verts(self):
        for m in (cube(), pyramid(), tetrahedron(), octahedron(), n_tent(5)):
            assert remove_unused_verts(m).num_verts == m.num_verts


class TestNTent:
    @pytest.mark.parametrize("n", [3, 4, 7])
    def test_counts_and_winding(self, n):
        m = n_tent(n)
        assert m.num_verts == n + 2
        assert m.num_tris == 2 * n
        _assert_outward(m)
        np.testing.assert_array_almost_equal(m.verts[n], [0, 1, 0])
        np.testing.assert_array_almost_equal(m.verts[n + 1], [0, 0, 0])

    def test_side_winding_is_explicit(self):
        m = n_tent(4)
        assert m.surfaces[0].facets[0].verts == (4, 1, 0)
        assert m.surfaces[0].facets[4].verts == (5, 0, 1)

    def test_rejects_small_n(self):
        with pytest.raises(ValueError):
            n_tent(2)


class TestSphere:
    @pytest.mark.parametrize("n", [0, 1, 2, 3, 4])
    def test_vertices_on_sphere(self, n):
        radius = 2.5
        m = create_sphere(radius, n)
        dist = np.linalg.norm(m.verts.astype(np.float64), axis=1)
        np.testing.assert_allclose(dist, radius, rtol=1e-5)

    @pytest.mark.parametrize("n", [0, 1, 2, 3])
    def test_counts(self, n):
        m = create_sphere(1.0, n)
        assert m.num_tris == 4 ** (n + 1)
        # Closed triangulated sphere: V = 2 + F / 2
        assert m.num_verts == 2 + 2 * 4 ** n

    def test_midpoints_shared(self):
        m = create_sphere(1.0, 3)
        assert unify_identical_verts(m).num_verts == m.num_verts
        assert remove_unused_verts(m).num_verts == m.num_verts

    def test_zero_subdivisions_is_scaled_tetrahedron(self):
        m = create_sphere(3.0, 0)
        assert m.all_facets() == tetrahedron().all_facets()
        expected = tetrahedron().verts / np.sqrt(3.0) * 3.0
        np.testing.assert_allclose(m.verts, expected, rtol=1e-6)

    def test_outward(self):
        _assert_outward(create_sphere(1.0, 2))

    def test_bad_arguments(self):
        with pytest.raises(ValueError):
            create_sphere(0.0, 1)
        with pytest.raises(ValueError):
            create_sphere(1.0, -1)

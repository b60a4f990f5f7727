"""Report topology counts for the built-in primitives.

Builds each primitive and a series of spheres, runs the canonicalization
passes and logs vertex/facet counts before and after, plus the worst
sphere radius error.
"""

import logging
import sys
sys.path.insert(0, "src")

import numpy as np

from meshforge.ops import (
    create_sphere, cube, n_tent, octahedron, pyramid, tetrahedron,
    remove_duplicate_facets, remove_unused_verts, unify_identical_verts,
)

logger = logging.getLogger("mesh_report")


def canonicalize(mesh):
    return remove_unused_verts(remove_duplicate_facets(unify_identical_verts(mesh)))


def report(mesh) -> None:
    clean = canonicalize(mesh)
    logger.info(
        "%12s: %6d verts %6d tris %4d quads -> %6d verts %6d facets",
        mesh.name, mesh.num_verts, mesh.num_tris, mesh.num_quads,
        clean.num_verts, clean.num_facets,
    )


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    for mesh in (cube(), cube(open=True), pyramid(), tetrahedron(), octahedron(), n_tent(6)):
        report(mesh)

    for n in range(6):
        sphere = create_sphere(1.0, n)
        report(sphere)
        err = np.abs(np.linalg.norm(sphere.verts.astype(np.float64), axis=1) - 1.0).max()
        logger.info("%12s  subdivisions=%d max radius error %.2e", "", n, err)


if __name__ == "__main__":
    main()

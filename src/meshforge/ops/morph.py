"""Weighted application of named morph targets."""

import logging
from typing import Iterable, NamedTuple, Union

import numpy as np
from numpy.typing import NDArray

from meshforge.core.mesh import Mesh

logger = logging.getLogger(__name__)


class MorphVal(NamedTuple):
    """A morph name and its weight (0 = no change, 1 = full application)."""
    name: str
    val: float


Expression = Iterable[Union[MorphVal, tuple[str, float]]]


def apply_expression(mesh: Mesh, expression: Expression) -> NDArray[np.float32]:
    """Superpose weighted morph targets onto the base vertices.

    Each name resolves to the mesh's first morph of that name.  Names the
    mesh does not have are skipped, so one expression can drive meshes with
    different morph sets.  Weights are applied linearly and are not
    clamped.

    Returns
    -------
    NDArray[np.float32]
        New (V, 3) positions; the mesh itself is not modified.
    """
    out = mesh.verts.astype(np.float64)
    for name, val in expression:
        morph = mesh.find_morph(name)
        if morph is None:
            logger.debug("apply_expression: '%s' has no morph '%s', skipping", mesh.name, name)
            continue
        morph.accumulate(out, float(val))
    return out.astype(np.float32)


def apply_morph(mesh: Mesh, name: str, val: float = 1.0) -> NDArray[np.float32]:
    """Apply a single named morph (see :func:`apply_expression`)."""
    return apply_expression(mesh, [MorphVal(name, val)])

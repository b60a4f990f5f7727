"""Sparse ``.target`` morph file parser → SparseMorph."""

import logging
from pathlib import Path
from typing import Optional

import numpy as np

from meshforge.core.mesh import SparseMorph

logger = logging.getLogger(__name__)


def parse_target(text: str, name: str) -> SparseMorph:
    """Parse a ``.target`` file into a sparse morph target.

    Target files are sparse ASCII: each data line has
    ``vertex_index dx dy dz``.  Lines starting with ``#`` are comments;
    malformed lines are skipped.

    Parameters
    ----------
    text : str
        The target file contents.
    name : str
        Morph name used for lookup by :func:`apply_expression`.

    Returns
    -------
    SparseMorph
        One entry per data line, in file order.
    """
    indices: list[int] = []
    deltas: list[list[float]] = []
    skipped = 0

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) < 4:
            skipped += 1
            continue
        try:
            idx = int(parts[0])
            dx, dy, dz = float(parts[1]), float(parts[2]), float(parts[3])
        except ValueError:
            skipped += 1
            continue
        if idx < 0:
            skipped += 1
            continue
        indices.append(idx)
        deltas.append([dx, dy, dz])

    if skipped:
        logger.warning("Target '%s': skipped %d malformed lines", name, skipped)
    return SparseMorph(
        name=name,
        indices=np.array(indices, dtype=np.intp),
        deltas=np.array(deltas, dtype=np.float32).reshape(-1, 3),
    )


def load_target_file(path, name: Optional[str] = None) -> SparseMorph:
    """Load a ``.target`` file from disk.

    Parameters
    ----------
    path : str or Path
        Path to the ``.target`` file.
    name : str, optional
        Morph name; defaults to the file stem.

    Returns
    -------
    SparseMorph
    """
    path = Path(path)
    with open(path, "r") as f:
        text = f.read()
    return parse_target(text, name if name is not None else path.stem)

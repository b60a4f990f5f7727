"""UV-space masking and UV layout images."""

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from meshforge.constants import UV_IMAGE_BACKGROUND, UV_IMAGE_LINE_COLOR, UV_IMAGE_SIZE
from meshforge.core.config_loader import get_setting
from meshforge.core.image import image_size, sample_nearest
from meshforge.core.mesh import Facet, Mesh, Surface
from meshforge.ops.canonicalize import remove_unused_verts

logger = logging.getLogger(__name__)


def mask_from_uvs(mesh: Mesh, mask: NDArray) -> Mesh:
    """Keep only facets whose every UV corner falls on a True mask pixel.

    Facets without UVs are dropped.  The result carries no UVs, surface
    points or marked vertices; vertices left unreferenced are removed and
    morph targets compacted to match.
    """
    mesh.validate()
    mask = np.asarray(mask, dtype=bool)
    surfaces = []
    kept = 0
    for surf in mesh.surfaces:
        facets = []
        for facet in surf.facets:
            if facet.uvs is None:
                continue
            if np.all(sample_nearest(mask, mesh.uvs[list(facet.uvs)])):
                facets.append(Facet(facet.verts))
        kept += len(facets)
        surfaces.append(Surface(name=surf.name, facets=facets))
    logger.debug("mask_from_uvs: kept %d/%d facets", kept, mesh.num_facets)
    masked = Mesh(
        name=mesh.name,
        verts=mesh.verts,
        surfaces=surfaces,
        morphs=mesh.morphs,
        material=mesh.material,
    )
    return remove_unused_verts(masked)


def _as_rgba(img: NDArray) -> NDArray[np.uint8]:
    arr = np.array(img, dtype=np.uint8)
    if arr.ndim == 2:
        arr = np.repeat(arr[:, :, np.newaxis], 3, axis=2)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"Expected a greyscale, RGB or RGBA image, got shape {arr.shape}")
    if arr.shape[2] == 3:
        alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
        arr = np.concatenate([arr, alpha], axis=2)
    return arr


def _draw_line(img: NDArray[np.uint8], p0: NDArray, p1: NDArray, color) -> None:
    steps = int(np.ceil(np.abs(p1 - p0).max())) + 1
    t = np.linspace(0.0, 1.0, steps)[:, np.newaxis]
    pts = np.rint(p0 + (p1 - p0) * t).astype(np.intp)
    img[pts[:, 1], pts[:, 0]] = color


def uv_image(mesh: Mesh, img: Optional[NDArray] = None) -> NDArray[np.uint8]:
    """Draw the UV layout of every facet as lines into an RGBA image.

    Draws onto a copy of ``img`` when given, else onto a blank square image
    of the configured size.  UV (0, 0) is the first pixel of the first row.
    """
    if img is None:
        size = get_setting("uv_image_size", UV_IMAGE_SIZE)
        background = get_setting("uv_image_background", UV_IMAGE_BACKGROUND)
        canvas = np.empty((size, size, 4), dtype=np.uint8)
        canvas[:] = background
    else:
        canvas = _as_rgba(img)
    color = np.array(get_setting("uv_image_line_color", UV_IMAGE_LINE_COLOR), dtype=np.uint8)

    width, height = image_size(canvas)
    scale = np.array([width - 1, height - 1], dtype=np.float64)
    pixels = np.clip(mesh.uvs.astype(np.float64), 0.0, 1.0) * scale

    edges: set[tuple[int, int]] = set()
    for facet in mesh.all_facets():
        for a, b in facet.uv_edges():
            edges.add((a, b) if a < b else (b, a))
    for a, b in sorted(edges):
        _draw_line(canvas, pixels[a], pixels[b], color)
    logger.debug("uv_image: drew %d edges on %dx%d image", len(edges), width, height)
    return canvas

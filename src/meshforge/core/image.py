"""Image helpers for heightfields and greyscale patterns.

Images are numpy arrays of shape (H, W) or (H, W, C).  Row 0 is the first
raster row.  Decoding from files is left to the host application.
"""

import numpy as np
from numpy.typing import NDArray


def image_size(img: NDArray) -> tuple[int, int]:
    """Return (width, height)."""
    arr = np.asarray(img)
    if arr.ndim not in (2, 3):
        raise ValueError(f"Expected a 2D or 3D image array, got shape {arr.shape}")
    return arr.shape[1], arr.shape[0]


def to_greyscale(img: NDArray) -> NDArray[np.float64]:
    """Reduce an image to one channel.

    Colour images are averaged over their first three channels (alpha is
    ignored); two-channel images use the first channel.
    """
    arr = np.asarray(img, dtype=np.float64)
    if arr.ndim == 2:
        return arr
    if arr.ndim != 3:
        raise ValueError(f"Expected a 2D or 3D image array, got shape {arr.shape}")
    if arr.shape[2] >= 3:
        return arr[:, :, :3].mean(axis=2)
    return arr[:, :, 0]


def uv_to_pixel(uvs: NDArray, width: int, height: int) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
    """Nearest pixel (col, row) for each UV.

    UV (0, 0) is the first pixel of the first row, (1, 1) the last pixel of
    the last row.  Out-of-range UVs are clamped to the border.
    """
    uvs = np.asarray(uvs, dtype=np.float64).reshape(-1, 2)
    cols = np.rint(uvs[:, 0] * (width - 1)).astype(np.intp)
    rows = np.rint(uvs[:, 1] * (height - 1)).astype(np.intp)
    return np.clip(cols, 0, width - 1), np.clip(rows, 0, height - 1)


def sample_nearest(img: NDArray, uvs: NDArray) -> NDArray:
    """Sample an image at UV coordinates with nearest-pixel lookup."""
    arr = np.asarray(img)
    width, height = image_size(arr)
    if width == 0 or height == 0:
        raise ValueError("Cannot sample an empty image")
    cols, rows = uv_to_pixel(uvs, width, height)
    return arr[rows, cols]

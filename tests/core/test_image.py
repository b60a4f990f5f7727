"""Tests for image helpers."""

import numpy as np
import pytest

from meshforge.core.image import image_size, sample_nearest, to_greyscale, uv_to_pixel


def test_image_size():
    assert image_size(np.zeros((3, 5))) == (5, 3)
    assert image_size(np.zeros((3, 5, 4))) == (5, 3)
    with pytest.raises(ValueError):
        image_size(np.zeros(4))


def test_to_greyscale_rgba_ignores_alpha():
    img = np.zeros((1, 1, 4), dtype=np.uint8)
    img[0, 0] = [30, 60, 90, 0]
    np.testing.assert_array_almost_equal(to_greyscale(img), [[60.0]])


def test_to_greyscale_passthrough():
    img = np.array([[1, 2], [3, 4]])
    np.testing.assert_array_equal(to_greyscale(img), img)


def test_uv_to_pixel_corners_and_clamp():
    cols, rows = uv_to_pixel([[0, 0], [1, 1], [2, -1]], 4, 3)
    np.testing.assert_array_equal(cols, [0, 3, 3])
    np.testing.assert_array_equal(rows, [0, 2, 0])


def test_sample_nearest():
    img = np.arange(6).reshape(2, 3)
    values = sample_nearest(img, [[0, 0], [1, 0], [0.5, 1], [1, 1]])
    np.testing.assert_array_equal(values, [0, 2, 4, 5])


def test_sample_empty_image():
    with pytest.raises(ValueError):
        sample_nearest(np.zeros((0, 0)), [[0, 0]])

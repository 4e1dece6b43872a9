"""
Tests for turning read-back image bytes into PNG files.
"""

import numpy as np
import pytest
from PIL import Image

from vkguide.export import rgba_pixels, save_png


class TestRgbaPixels:

    def test_shape(self):
        pixels = rgba_pixels(np.zeros(4 * 3 * 4, dtype=np.uint8), 4, 3)
        assert pixels.shape == (3, 4, 4)
        assert pixels.dtype == np.uint8

    def test_row_major(self):
        data = np.zeros((2, 2, 4), dtype=np.uint8)
        data[0, 1] = (255, 0, 0, 255)
        pixels = rgba_pixels(data.ravel(), 2, 2)
        assert tuple(pixels[0, 1]) == (255, 0, 0, 255)
        assert tuple(pixels[1, 0]) == (0, 0, 0, 0)

    def test_wrong_size(self):
        with pytest.raises(ValueError):
            rgba_pixels(np.zeros(10, dtype=np.uint8), 2, 2)


class TestSavePng:

    def test_written_file(self, tmp_path):
        data = np.tile(np.array([0, 0, 255, 255], dtype=np.uint8), 8 * 4)
        path = tmp_path / 'image.png'
        save_png(data, 8, 4, path)

        with Image.open(path) as image:
            assert image.size == (8, 4)
            assert image.mode == 'RGBA'
            assert image.getpixel((7, 3)) == (0, 0, 255, 255)

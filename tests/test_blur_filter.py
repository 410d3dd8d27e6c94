"""
Tests for Blur Operations.

Tests cover:
- Gaussian blur on PIL images
- Slider amount to radius scaling
- Buffer blur identity, dimensions and monotonic smoothing
- Error handling
"""

import unittest

import numpy as np
from PIL import Image

from PE_Libs.ImageEditingLib.blur_filter import (
    apply_blur,
    apply_gaussian_blur,
    blur_radius_pixels,
)
from PE_Libs.ImageEditingLib.image_models import PixelBuffer


def checkerboard(size=32, cell=2):
    ys, xs = np.mgrid[0:size, 0:size]
    on = ((xs // cell + ys // cell) % 2) == 0
    pixels = np.zeros((size, size, 4), dtype=np.uint8)
    pixels[on, :3] = 255
    pixels[..., 3] = 255
    return PixelBuffer.from_array(pixels)


def red_spread(buffer):
    return float(buffer.to_array()[..., 0].astype(float).std())


class TestGaussianBlur(unittest.TestCase):
    """Test Gaussian blur operation."""

    def setUp(self):
        """Create test image."""
        self.rgba_image = Image.new("RGBA", (20, 20), (255, 0, 0, 255))

    def test_gaussian_blur_keeps_mode_and_size(self):
        result = apply_gaussian_blur(self.rgba_image, radius=2.0)

        self.assertEqual(result.mode, "RGBA")
        self.assertEqual(result.size, (20, 20))

    def test_gaussian_blur_invalid_radius(self):
        with self.assertRaises(ValueError):
            apply_gaussian_blur(self.rgba_image, radius=0)
        with self.assertRaises(ValueError):
            apply_gaussian_blur(self.rgba_image, radius=101)

    def test_gaussian_blur_invalid_image(self):
        with self.assertRaises(TypeError):
            apply_gaussian_blur("not an image")


class TestApplyBlur(unittest.TestCase):
    """Test blur by slider amount."""

    def test_radius_scaling(self):
        self.assertEqual(blur_radius_pixels(100), 10.0)
        self.assertEqual(blur_radius_pixels(25), 2.5)

    def test_zero_is_identity(self):
        buffer = checkerboard()

        self.assertIs(apply_blur(buffer, 0), buffer)

    def test_dimensions_preserved(self):
        buffer = PixelBuffer.blank(13, 7, (50, 60, 70, 255))

        self.assertEqual(apply_blur(buffer, 40).size, (13, 7))

    def test_uniform_image_unchanged(self):
        buffer = PixelBuffer.blank(10, 10, (50, 60, 70, 255))

        self.assertEqual(apply_blur(buffer, 30), buffer)

    def test_larger_amount_smooths_more(self):
        """Spread of channel values should never grow with the amount."""
        buffer = checkerboard()
        spreads = [red_spread(apply_blur(buffer, amount)) for amount in (5, 20, 60)]

        self.assertLess(spreads[0], red_spread(buffer))
        self.assertGreaterEqual(spreads[0], spreads[1])
        self.assertGreaterEqual(spreads[1], spreads[2])

    def test_out_of_range(self):
        with self.assertRaises(ValueError):
            apply_blur(checkerboard(), 101)
        with self.assertRaises(ValueError):
            apply_blur(checkerboard(), -1)


if __name__ == "__main__":
    unittest.main()

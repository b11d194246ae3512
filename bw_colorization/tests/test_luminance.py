import unittest

import numpy as np

from bw_colorization.luminance import (
    LAB_EPSILON,
    LUMINANCE_WEIGHTS,
    extract_luminance,
    lab_lightness,
)
from bw_colorization.types import RGBABitmap


def _gray_bitmap(value: int, height: int = 2, width: int = 2) -> RGBABitmap:
    return RGBABitmap.from_array(np.full((height, width), value, dtype=np.uint8))


class ExtractLuminanceTest(unittest.TestCase):
    def test_shape_matches_bitmap(self) -> None:
        for height, width in [(1, 1), (3, 5), (7, 2)]:
            with self.subTest(size=(height, width)):
                tensor = extract_luminance(_gray_bitmap(10, height, width))
                self.assertEqual(tensor.shape, (1, 1, height, width))

    def test_black_and_white_levels(self) -> None:
        black = extract_luminance(_gray_bitmap(0))
        white = extract_luminance(_gray_bitmap(255))

        self.assertTrue(np.all(black.numpy() == 0.0))
        # The X-row weighting sums to 0.950456, so white lands below 100.
        self.assertAlmostEqual(white.at(0, 0, 0), 98.05, delta=0.01)

    def test_mid_gray(self) -> None:
        tensor = extract_luminance(_gray_bitmap(128))

        self.assertAlmostEqual(tensor.at(0, 1, 1), 74.64, delta=0.05)

    def test_channel_weighting(self) -> None:
        pixels = np.zeros((1, 3, 3), dtype=np.uint8)
        pixels[0, 0, 0] = 255
        pixels[0, 1, 1] = 255
        pixels[0, 2, 2] = 255

        tensor = extract_luminance(RGBABitmap.from_array(pixels))

        for x, weight in enumerate(LUMINANCE_WEIGHTS):
            expected = 116.0 * weight ** (1.0 / 3.0) - 16.0
            self.assertAlmostEqual(tensor.at(0, 0, x), expected, places=4)

    def test_dark_pixels_use_linear_branch(self) -> None:
        tensor = extract_luminance(_gray_bitmap(1))

        l = 1.0 / 255.0 * LUMINANCE_WEIGHTS.sum()
        self.assertLess(l, LAB_EPSILON)
        self.assertAlmostEqual(tensor.at(0, 0, 0), 903.3 * l, places=4)

    def test_alpha_is_ignored(self) -> None:
        opaque = np.full((2, 2, 4), 90, dtype=np.uint8)
        translucent = opaque.copy()
        opaque[..., 3] = 255
        translucent[..., 3] = 0

        self.assertEqual(
            extract_luminance(RGBABitmap.from_array(opaque)),
            extract_luminance(RGBABitmap.from_array(translucent)),
        )

    def test_nonlinearity_is_continuous_at_threshold(self) -> None:
        below = np.nextafter(LAB_EPSILON, 0.0)
        above = np.nextafter(LAB_EPSILON, 1.0)

        values = lab_lightness(np.array([below, LAB_EPSILON, above]))

        self.assertAlmostEqual(values[0], values[2], places=3)
        self.assertAlmostEqual(values[1], 903.3 * LAB_EPSILON, places=6)

    def test_input_bitmap_is_untouched(self) -> None:
        bitmap = _gray_bitmap(77)
        before = bitmap.pixels.copy()

        extract_luminance(bitmap)

        self.assertTrue(np.array_equal(bitmap.pixels, before))


if __name__ == "__main__":
    unittest.main()

import os
import tempfile
import unittest

import numpy as np

from bw_colorization.errors import DecodeError
from bw_colorization.types import RGBABitmap
from bw_colorization.utils.io import load_bitmap, save_bitmap
from bw_colorization.utils.vision import resize, resize_to_width, to_uint8


class VisionUtilsTest(unittest.TestCase):
    def test_resize_to_square(self) -> None:
        bitmap = RGBABitmap.from_array(np.full((6, 10), 90, dtype=np.uint8))

        for interpolation in ["area", "bilinear", "cubic"]:
            with self.subTest(interpolation=interpolation):
                resized = resize(bitmap, (4, 4), interpolation)
                self.assertEqual(resized.size, (4, 4))
                self.assertTrue(np.all(np.abs(resized.rgb().astype(int) - 90) <= 1))

    def test_resize_same_size_copies(self) -> None:
        bitmap = RGBABitmap.from_array(np.zeros((3, 3), dtype=np.uint8))

        resized = resize(bitmap, (3, 3))

        self.assertEqual(resized, bitmap)
        self.assertIsNot(resized.pixels, bitmap.pixels)

    def test_unknown_interpolation(self) -> None:
        bitmap = RGBABitmap.from_array(np.zeros((3, 3), dtype=np.uint8))

        with self.assertRaises(ValueError):
            resize(bitmap, (2, 2), "lanczos9")

    def test_resize_to_width_keeps_aspect(self) -> None:
        bitmap = RGBABitmap.from_array(np.zeros((300, 400), dtype=np.uint8))

        resized = resize_to_width(bitmap, 512)

        self.assertEqual(resized.size, (384, 512))

    def test_to_uint8_clamps_and_truncates(self) -> None:
        values = np.array([-0.5, 0.0, 0.999, 1.0, 3.0, np.nan])

        packed = to_uint8(values)

        self.assertEqual(packed.tolist(), [0, 0, 254, 255, 255, 0])


class ImageIOTest(unittest.TestCase):
    def test_save_and_load_round_trip(self) -> None:
        pixels = np.zeros((3, 4, 4), dtype=np.uint8)
        pixels[..., 0] = 200
        pixels[..., 1] = np.arange(4, dtype=np.uint8) * 10
        pixels[..., 3] = 255
        bitmap = RGBABitmap(pixels)

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "nested", "out.png")
            save_bitmap(path, bitmap)
            loaded = load_bitmap(path)

        self.assertEqual(loaded, bitmap)

    def test_load_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(DecodeError):
                load_bitmap(os.path.join(tmp, "missing.png"))


if __name__ == "__main__":
    unittest.main()

"""Image file loading and saving."""

import os

import cv2

from bw_colorization.errors import DecodeError
from bw_colorization.types import RGBABitmap


def load_bitmap(path: str) -> RGBABitmap:
    """Read an image file into an RGBA bitmap.

    Raises:
        DecodeError: If the file is missing or cannot be decoded.
    """

    image = cv2.imread(path, cv2.IMREAD_COLOR)
    if image is None:
        raise DecodeError(f"Cannot decode image: {path}")
    return RGBABitmap(cv2.cvtColor(image, cv2.COLOR_BGR2RGBA))


def save_bitmap(path: str, bitmap: RGBABitmap) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    if not cv2.imwrite(path, cv2.cvtColor(bitmap.pixels, cv2.COLOR_RGBA2BGRA)):
        raise OSError(f"Failed to write image: {path}")

"""Utility helpers for image normalization and resizing."""

from typing import Tuple

import cv2
import numpy as np

from bw_colorization.types import RGBABitmap

_INTERPOLATIONS = {
    "area": cv2.INTER_AREA,
    "bilinear": cv2.INTER_LINEAR,
    "cubic": cv2.INTER_CUBIC,
}


def normalize_uint8(image: np.ndarray) -> np.ndarray:
    """Convert uint8 images to float64 in [0, 1].

    Args:
        image: HxWxC array, typically uint8.

    Returns:
        Float array with values scaled to [0, 1].
    """

    if image.dtype == np.uint8:
        return image.astype("float64") / 255.0
    return image.astype("float64")


def to_uint8(image: np.ndarray) -> np.ndarray:
    """Scale float images in [0, 1] to uint8, clamping then truncating."""

    scaled = np.nan_to_num(image * 255.0, nan=0.0)
    return np.clip(scaled, 0.0, 255.0).astype("uint8")


def resolve_interpolation(name: str) -> int:
    try:
        return _INTERPOLATIONS[name]
    except KeyError as exc:
        choices = ", ".join(sorted(_INTERPOLATIONS))
        raise ValueError(f"Unknown interpolation '{name}', expected one of: {choices}.") from exc


def resize(bitmap: RGBABitmap, size: Tuple[int, int], interpolation: str = "area") -> RGBABitmap:
    """Resize a bitmap to ``size`` given as (height, width).

    Area interpolation only applies when shrinking; OpenCV falls back to
    bilinear when enlarging.
    """

    height, width = size
    if height <= 0 or width <= 0:
        raise ValueError(f"Target size must be positive, got {height}x{width}.")
    if bitmap.size == (height, width):
        return RGBABitmap(bitmap.pixels.copy())
    resized = cv2.resize(
        bitmap.pixels, (width, height), interpolation=resolve_interpolation(interpolation)
    )
    return RGBABitmap(np.ascontiguousarray(resized, dtype=np.uint8))


def resize_to_width(bitmap: RGBABitmap, width: int, interpolation: str = "area") -> RGBABitmap:
    """Resize a bitmap to ``width`` keeping its aspect ratio."""

    height = max(1, int(round(bitmap.height * width / float(bitmap.width))))
    return resize(bitmap, (height, width), interpolation)

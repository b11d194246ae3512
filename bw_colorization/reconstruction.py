"""Lab to sRGB reconstruction of colorized bitmaps."""

from __future__ import annotations

import numpy as np

from bw_colorization.errors import ReconstructionError, ShapeMismatch
from bw_colorization.luminance import LAB_EPSILON
from bw_colorization.types import ChrominanceTensor, LuminanceTensor, RGBABitmap
from bw_colorization.utils.vision import to_uint8

D65_WHITE = np.array([0.95047, 1.0, 1.08883])
XYZ_TO_LINEAR_SRGB = np.array(
    [
        [3.2404542, -1.5371385, -0.4985314],
        [-0.9692660, 1.8760108, 0.0415560],
        [0.0556434, -0.2040259, 1.0572252],
    ]
)
SRGB_THRESHOLD = 0.0031308


def merge_lab(l: LuminanceTensor, ab: ChrominanceTensor) -> np.ndarray:
    """Stack L and a/b into an ``(H, W, 3)`` Lab array.

    Raises:
        ShapeMismatch: If the tensors disagree in height or width.
    """

    if l.spatial_shape != ab.spatial_shape:
        raise ShapeMismatch(
            f"Luminance is {l.height}x{l.width} but chrominance is {ab.height}x{ab.width}."
        )
    return np.stack([l.channel(0), ab.a, ab.b], axis=-1).astype(np.float64)


def lab_to_xyz(lab: np.ndarray) -> np.ndarray:
    fy = (lab[..., 0] + 16.0) / 116.0
    fx = lab[..., 1] / 500.0 + fy
    fz = fy - lab[..., 2] / 200.0
    f = np.stack([fx, fy, fz], axis=-1)
    cube = f**3
    linear = np.where(cube > LAB_EPSILON, cube, (f - 16.0 / 116.0) / 7.787)
    return linear * D65_WHITE


def gamma_encode(linear: np.ndarray) -> np.ndarray:
    """Apply the piecewise sRGB transfer function."""

    safe = np.maximum(linear, SRGB_THRESHOLD)
    return np.where(
        linear > SRGB_THRESHOLD, 1.055 * np.power(safe, 1.0 / 2.4) - 0.055, 12.92 * linear
    )


def lab_to_srgb(lab: np.ndarray) -> np.ndarray:
    """Convert Lab pixels to unclamped, gamma-encoded sRGB in nominal [0, 1]."""

    return gamma_encode(lab_to_xyz(lab) @ XYZ_TO_LINEAR_SRGB.T)


def reconstruct(l: LuminanceTensor, ab: ChrominanceTensor) -> RGBABitmap:
    """Combine L and a/b tensors into an opaque RGBA bitmap.

    Raises:
        ShapeMismatch: If ``l`` and ``ab`` differ in spatial shape.
        ReconstructionError: If the output bitmap cannot be materialized.
    """

    lab = merge_lab(l, ab)
    height, width = l.spatial_shape
    if height <= 0 or width <= 0:
        raise ReconstructionError(f"Cannot build a {height}x{width} bitmap.")
    try:
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[..., :3] = to_uint8(lab_to_srgb(lab))
        pixels[..., 3] = 255
        return RGBABitmap(pixels)
    except (MemoryError, ValueError) as exc:
        raise ReconstructionError(f"Failed to materialize a {height}x{width} bitmap.") from exc

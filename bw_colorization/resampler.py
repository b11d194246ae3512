"""Align-corners bilinear resampling of chrominance tensors."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from bw_colorization.types import ChrominanceTensor


def source_coordinates(src: int, dst: int) -> np.ndarray:
    """Map ``dst`` output positions onto a source axis of length ``src``.

    The scale is ``(src - 1) / (dst - 1)``; a single output sample maps to
    source index 0. The division happens last so the final coordinate lands
    exactly on ``src - 1``.
    """

    if dst < 1:
        raise ValueError(f"Destination size must be at least 1, got {dst}.")
    if dst == 1:
        return np.zeros(1, dtype=np.float64)
    return np.arange(dst, dtype=np.float64) * (src - 1) / (dst - 1)


def _neighbours(src: int, dst: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    coords = source_coordinates(src, dst)
    low = np.floor(coords).astype(np.intp)
    high = np.minimum(low + 1, src - 1)
    w_high = coords - low
    return low, high, 1.0 - w_high, w_high


def resample(src: ChrominanceTensor, dst_height: int, dst_width: int) -> ChrominanceTensor:
    """Bilinearly resample ``src`` to ``dst_height x dst_width``.

    Each channel is interpolated independently. Corner samples of the output
    reproduce the source corners, and equal shapes reproduce the input.
    """

    src_height, src_width = src.spatial_shape
    y1, y2, wy1, wy2 = _neighbours(src_height, dst_height)
    x1, x2, wx1, wx2 = _neighbours(src_width, dst_width)

    planes = src.numpy()[0].astype(np.float64)
    q11 = planes[:, y1[:, None], x1[None, :]]
    q12 = planes[:, y1[:, None], x2[None, :]]
    q21 = planes[:, y2[:, None], x1[None, :]]
    q22 = planes[:, y2[:, None], x2[None, :]]

    wy1, wy2 = wy1[:, None], wy2[:, None]
    wx1, wx2 = wx1[None, :], wx2[None, :]
    interpolated = wy1 * (wx1 * q11 + wx2 * q12) + wy2 * (wx1 * q21 + wx2 * q22)
    return ChrominanceTensor(interpolated[None])

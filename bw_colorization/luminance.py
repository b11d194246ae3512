"""RGB to CIE L conversion."""

from __future__ import annotations

import numpy as np

from bw_colorization.types import LuminanceTensor, RGBABitmap
from bw_colorization.utils.vision import normalize_uint8

# X row of the sRGB -> XYZ matrix, kept as the luminance weighting for parity
# with the colorization model's preprocessing.
LUMINANCE_WEIGHTS = np.array([0.412453, 0.357580, 0.180423])
LAB_EPSILON = 0.008856
LAB_KAPPA = 903.3


def lab_lightness(l: np.ndarray) -> np.ndarray:
    """Apply the CIE lightness nonlinearity to a linear luminance proxy."""

    return np.where(l > LAB_EPSILON, 116.0 * np.cbrt(l) - 16.0, LAB_KAPPA * l)


def extract_luminance(bitmap: RGBABitmap) -> LuminanceTensor:
    """Convert an RGBA bitmap to an L tensor of shape ``[1, 1, H, W]``.

    Alpha is ignored.
    """

    rgb = normalize_uint8(bitmap.rgb())
    lightness = lab_lightness(rgb @ LUMINANCE_WEIGHTS)
    return LuminanceTensor(lightness[None, None])

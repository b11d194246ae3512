"""Grayscale photo colorization around an external chrominance predictor.

The package extracts CIE L from an RGBA bitmap, asks an injected oracle for
a/b chrominance at a fixed square resolution, resamples the prediction back
to the source size and rebuilds an sRGB bitmap. The oracle is any callable,
so the numerical core can be exercised without a trained model.
"""

from bw_colorization.pipeline import ColorizationPipeline, PipelineOutputs, PipelineState
from bw_colorization.config import OracleConfig, PipelineConfig
from bw_colorization.errors import (
    ColorizationError,
    DecodeError,
    InferenceError,
    ModelUnavailable,
    ReconstructionError,
    ShapeMismatch,
)
from bw_colorization.luminance import extract_luminance
from bw_colorization.reconstruction import reconstruct
from bw_colorization.resampler import resample
from bw_colorization.types import ChrominanceTensor, LuminanceTensor, RGBABitmap

__all__ = [
    "ColorizationPipeline",
    "PipelineOutputs",
    "PipelineState",
    "OracleConfig",
    "PipelineConfig",
    "ColorizationError",
    "DecodeError",
    "InferenceError",
    "ModelUnavailable",
    "ReconstructionError",
    "ShapeMismatch",
    "extract_luminance",
    "reconstruct",
    "resample",
    "ChrominanceTensor",
    "LuminanceTensor",
    "RGBABitmap",
]

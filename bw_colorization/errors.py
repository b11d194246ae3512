"""Failure taxonomy for the colorization pipeline."""

from __future__ import annotations

from typing import Optional


class ColorizationError(Exception):
    """Base class for failures surfaced by the pipeline.

    Attributes:
        kind: Short identifier of the failure category.
        state: Pipeline state in which the failure occurred, if known.
    """

    kind = "ColorizationError"

    def __init__(self, message: str, state: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.state = state

    def __str__(self) -> str:
        return self.message


class DecodeError(ColorizationError):
    """The source image cannot be rasterized to RGBA pixel data."""

    kind = "DecodeError"


class ModelUnavailable(ColorizationError):
    """The prediction oracle is missing or could not be loaded."""

    kind = "ModelUnavailable"


class InferenceError(ColorizationError):
    """The prediction oracle failed or returned an unusable tensor."""

    kind = "InferenceError"


class ShapeMismatch(ColorizationError):
    """Luminance and chrominance disagree in spatial shape."""

    kind = "ShapeMismatch"


class ReconstructionError(ColorizationError):
    """The output bitmap could not be materialized."""

    kind = "ReconstructionError"

"""End-to-end colorization pipeline."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

import numpy as np

from bw_colorization.config import PipelineConfig
from bw_colorization.errors import (
    ColorizationError,
    DecodeError,
    InferenceError,
    ModelUnavailable,
)
from bw_colorization.luminance import extract_luminance
from bw_colorization.reconstruction import reconstruct
from bw_colorization.resampler import resample
from bw_colorization.types import ChrominanceTensor, LuminanceTensor, RGBABitmap
from bw_colorization.utils.vision import resize, resize_to_width

LOGGER = logging.getLogger(__name__)

# Maps a model-resolution L tensor to a/b predictions. May be a coroutine
# function when used through ``ColorizationPipeline.acolorize``.
ChrominanceOracle = Callable[[LuminanceTensor], Any]


class PipelineState(str, Enum):
    IDLE = "idle"
    RESIZING_INPUT = "resizing_input"
    EXTRACTING_LUMINANCE = "extracting_luminance"
    AWAITING_PREDICTION = "awaiting_prediction"
    RESAMPLING_CHROMINANCE = "resampling_chrominance"
    RECONSTRUCTING = "reconstructing"
    DONE = "done"
    FAILED = "failed"


_IN_FLIGHT = {
    PipelineState.RESIZING_INPUT,
    PipelineState.EXTRACTING_LUMINANCE,
    PipelineState.AWAITING_PREDICTION,
    PipelineState.RESAMPLING_CHROMINANCE,
    PipelineState.RECONSTRUCTING,
}


@dataclass
class PipelineOutputs:
    """Aggregate outputs of one colorization request.

    Attributes:
        colorized: Reconstructed RGBA bitmap at the input resolution.
        luminance: Full-resolution L tensor used for reconstruction.
        chrominance: a/b tensor after resampling to the luminance shape.
        predicted_shape: (height, width) of the oracle's raw prediction.
        resampled: Whether the prediction had to be resampled.
        states: States visited by the request, in order.
    """

    colorized: RGBABitmap
    luminance: LuminanceTensor
    chrominance: ChrominanceTensor
    predicted_shape: Tuple[int, int]
    resampled: bool
    states: List[PipelineState] = field(default_factory=list)


class ColorizationPipeline:
    """Orchestrates luminance extraction, prediction and reconstruction.

    Flow:
        1) Resizing: rasterize the input and make a square copy at the
           oracle's input size.
        2) Luminance: extract L from both the original and the square copy.
        3) Prediction: hand the square L tensor to the oracle. This is the
           only step allowed to block or suspend.
        4) Resampling: bring the predicted a/b back to the original size,
           skipped when the shapes already agree.
        5) Reconstruction: merge original L with the a/b channels and convert
           to sRGB.

    Any failure moves the pipeline to ``FAILED`` and is re-raised; a new call
    starts a fresh request.
    """

    def __init__(
        self,
        oracle: Optional[ChrominanceOracle] = None,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.oracle = oracle
        self.state = PipelineState.IDLE
        self.history: List[PipelineState] = [PipelineState.IDLE]

    @classmethod
    def from_config(cls, config: PipelineConfig) -> "ColorizationPipeline":
        """Build a pipeline backed by the TorchScript oracle in ``config``."""

        from bw_colorization.adapters.torch_adapter import TorchScriptOracle

        return cls(TorchScriptOracle(config.oracle), config)

    def _enter(self, state: PipelineState) -> None:
        LOGGER.debug("Colorization %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _begin(self) -> None:
        if self.state in _IN_FLIGHT:
            raise RuntimeError(
                f"A colorization request is already in flight ({self.state.value})."
            )
        self.state = PipelineState.IDLE
        self.history = [PipelineState.IDLE]

    def _fail(self, exc: BaseException) -> None:
        if isinstance(exc, ColorizationError) and exc.state is None:
            exc.state = self.state.value
        LOGGER.warning("Colorization failed while %s: %s", self.state.value, exc)
        self._enter(PipelineState.FAILED)

    def _prepare(self, image: Any) -> Tuple[LuminanceTensor, LuminanceTensor]:
        self._enter(PipelineState.RESIZING_INPUT)
        if image is None:
            raise DecodeError("No source image was provided.")
        bitmap = RGBABitmap.from_array(image)
        if self.config.working_width:
            bitmap = resize_to_width(
                bitmap, self.config.working_width, self.config.resize_interpolation
            )
        size = self.config.model_input_size
        model_bitmap = resize(bitmap, (size, size), self.config.resize_interpolation)

        self._enter(PipelineState.EXTRACTING_LUMINANCE)
        return extract_luminance(bitmap), extract_luminance(model_bitmap)

    def _require_oracle(self) -> ChrominanceOracle:
        if self.oracle is None:
            raise ModelUnavailable("No prediction oracle is configured.")
        return self.oracle

    def _accept_prediction(self, prediction: Any) -> ChrominanceTensor:
        if isinstance(prediction, ChrominanceTensor):
            return prediction
        try:
            return ChrominanceTensor(np.asarray(prediction))
        except Exception as exc:
            raise InferenceError(f"Oracle returned an unusable prediction: {exc}") from exc

    def _predict(self, model_luminance: LuminanceTensor) -> ChrominanceTensor:
        oracle = self._require_oracle()
        try:
            prediction = oracle(model_luminance)
        except ColorizationError:
            raise
        except Exception as exc:
            raise InferenceError(f"Prediction failed: {exc}") from exc
        if inspect.isawaitable(prediction):
            close = getattr(prediction, "close", None)
            if close is not None:
                close()
            raise InferenceError("Oracle is asynchronous; use acolorize() instead.")
        return self._accept_prediction(prediction)

    async def _apredict(self, model_luminance: LuminanceTensor) -> ChrominanceTensor:
        oracle = self._require_oracle()
        try:
            if inspect.iscoroutinefunction(oracle) or inspect.iscoroutinefunction(
                getattr(oracle, "__call__", None)
            ):
                prediction = await oracle(model_luminance)
            else:
                prediction = await asyncio.to_thread(oracle, model_luminance)
                if inspect.isawaitable(prediction):
                    prediction = await prediction
        except ColorizationError:
            raise
        except Exception as exc:
            raise InferenceError(f"Prediction failed: {exc}") from exc
        return self._accept_prediction(prediction)

    def _finish(
        self, luminance: LuminanceTensor, chrominance: ChrominanceTensor
    ) -> PipelineOutputs:
        self._enter(PipelineState.RESAMPLING_CHROMINANCE)
        predicted_shape = chrominance.spatial_shape
        if LOGGER.isEnabledFor(logging.DEBUG):
            LOGGER.debug(
                "Predicted a range %.3f to %.3f, b range %.3f to %.3f",
                float(chrominance.a.min()),
                float(chrominance.a.max()),
                float(chrominance.b.min()),
                float(chrominance.b.max()),
            )
        resampled = predicted_shape != luminance.spatial_shape
        if resampled:
            LOGGER.debug(
                "Resampling a/b from %dx%d to %dx%d",
                predicted_shape[1],
                predicted_shape[0],
                luminance.width,
                luminance.height,
            )
            chrominance = resample(chrominance, luminance.height, luminance.width)

        self._enter(PipelineState.RECONSTRUCTING)
        colorized = reconstruct(luminance, chrominance)
        self._enter(PipelineState.DONE)
        return PipelineOutputs(
            colorized=colorized,
            luminance=luminance,
            chrominance=chrominance,
            predicted_shape=predicted_shape,
            resampled=resampled,
            states=list(self.history),
        )

    def __call__(self, image: Any) -> PipelineOutputs:
        self._begin()
        try:
            luminance, model_luminance = self._prepare(image)
            self._enter(PipelineState.AWAITING_PREDICTION)
            chrominance = self._predict(model_luminance)
            return self._finish(luminance, chrominance)
        except BaseException as exc:
            self._fail(exc)
            raise

    async def acolorize(self, image: Any) -> PipelineOutputs:
        """Asynchronous variant of ``__call__``.

        Coroutine oracles are awaited, plain callables run in a worker thread.
        Cancelling the task while the prediction is pending leaves the
        pipeline in ``FAILED`` and produces no output.
        """

        self._begin()
        try:
            luminance, model_luminance = self._prepare(image)
            self._enter(PipelineState.AWAITING_PREDICTION)
            chrominance = await self._apredict(model_luminance)
            return self._finish(luminance, chrominance)
        except asyncio.CancelledError:
            LOGGER.info("Colorization cancelled while %s", self.state.value)
            self._enter(PipelineState.FAILED)
            raise
        except BaseException as exc:
            self._fail(exc)
            raise

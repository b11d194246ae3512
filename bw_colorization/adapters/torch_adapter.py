"""TorchScript adapter for a pretrained chrominance predictor."""

from __future__ import annotations

import logging
import os
from typing import Any

import numpy as np

from bw_colorization.config import OracleConfig
from bw_colorization.errors import ModelUnavailable
from bw_colorization.types import ChrominanceTensor, LuminanceTensor

LOGGER = logging.getLogger(__name__)


class TorchScriptOracle:
    """Predict a/b channels from an L tensor with a TorchScript module.

    The module receives the raw ``[1, 1, S, S]`` L channel (values in
    [0, 100]) and must return a ``[1, 2, H', W']`` a/b tensor.
    """

    def __init__(self, config: OracleConfig) -> None:
        self.config = config
        self._loaded = False
        self._module = None
        self._torch = None

    def load(self) -> None:
        """Load the TorchScript module onto the configured device."""

        if self._loaded:
            return
        model_path = self.config.model_path
        if not os.path.isfile(model_path):
            raise ModelUnavailable(f"Model file not found: {model_path}")
        try:
            import torch
        except Exception as exc:  # pragma: no cover - depends on external libs
            raise ModelUnavailable("Failed to import torch.") from exc

        try:
            module = torch.jit.load(model_path, map_location=self.config.device)
        except Exception as exc:  # pragma: no cover - depends on the model file
            raise ModelUnavailable(f"Failed to load TorchScript model: {model_path}") from exc
        module.eval()
        LOGGER.info("Loaded colorization model %s on %s", model_path, self.config.device)

        self._module = module
        self._torch = torch
        self._loaded = True

    def _to_model_input(self, luminance: np.ndarray) -> Any:
        # Tensor buffers are read-only; torch needs a writable copy.
        return self._torch.from_numpy(np.array(luminance, copy=True)).to(self.config.device)

    def _to_numpy(self, output: Any) -> np.ndarray:
        return output.detach().float().cpu().numpy()

    def __call__(self, luminance: LuminanceTensor) -> ChrominanceTensor:
        self.load()
        with self._torch.no_grad():
            output = self._module(self._to_model_input(luminance.numpy()))
        return ChrominanceTensor(self._to_numpy(output))

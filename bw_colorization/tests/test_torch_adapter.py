import contextlib
import os
import tempfile
import unittest
from types import SimpleNamespace

import numpy as np

from bw_colorization.adapters.torch_adapter import TorchScriptOracle
from bw_colorization.config import OracleConfig, PipelineConfig
from bw_colorization.errors import ModelUnavailable
from bw_colorization.pipeline import ColorizationPipeline, PipelineState
from bw_colorization.types import ChrominanceTensor, LuminanceTensor


class _DummyModule:
    def __init__(self, output: np.ndarray) -> None:
        self.output = output
        self.inputs = []

    def __call__(self, tensor):
        self.inputs.append(tensor)
        return self.output


class TorchScriptOracleTest(unittest.TestCase):
    def _make_oracle(self, output: np.ndarray) -> TorchScriptOracle:
        oracle = TorchScriptOracle(OracleConfig(model_path="unused.pt"))
        oracle.load = lambda: None
        oracle._torch = SimpleNamespace(no_grad=contextlib.nullcontext)
        oracle._module = _DummyModule(output)
        oracle._to_model_input = lambda x: x
        oracle._to_numpy = lambda x: x
        return oracle

    def test_call_returns_chrominance(self) -> None:
        output = np.ones((1, 2, 8, 8), dtype=np.float32)
        oracle = self._make_oracle(output)
        luminance = LuminanceTensor(np.full((16, 16), 50.0))

        result = oracle(luminance)

        self.assertIsInstance(result, ChrominanceTensor)
        self.assertEqual(result.shape, (1, 2, 8, 8))
        self.assertEqual(oracle._module.inputs[0].shape, (1, 1, 16, 16))

    def test_missing_model_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            oracle = TorchScriptOracle(OracleConfig(model_path=os.path.join(tmp, "missing.pt")))

            with self.assertRaises(ModelUnavailable):
                oracle.load()

    def test_pipeline_from_config_feeds_model_input_size(self) -> None:
        config = PipelineConfig(model_input_size=32, oracle=OracleConfig(model_path="unused.pt"))
        pipeline = ColorizationPipeline.from_config(config)
        module = _DummyModule(np.zeros((1, 2, 8, 8), dtype=np.float32))
        pipeline.oracle.load = lambda: None
        pipeline.oracle._torch = SimpleNamespace(no_grad=contextlib.nullcontext)
        pipeline.oracle._module = module
        pipeline.oracle._to_model_input = lambda x: x
        pipeline.oracle._to_numpy = lambda x: x

        outputs = pipeline(np.zeros((5, 7), dtype=np.uint8))

        self.assertEqual(module.inputs[0].shape, (1, 1, 32, 32))
        self.assertEqual(outputs.colorized.size, (5, 7))
        self.assertFalse(hasattr(config.oracle, "input_size"))

    def test_pipeline_from_config_reports_missing_model(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = PipelineConfig(oracle=OracleConfig(model_path=os.path.join(tmp, "missing.pt")))
            pipeline = ColorizationPipeline.from_config(config)

            self.assertIsInstance(pipeline.oracle, TorchScriptOracle)
            with self.assertRaises(ModelUnavailable) as ctx:
                pipeline(np.zeros((4, 4), dtype=np.uint8))

        self.assertEqual(ctx.exception.state, PipelineState.AWAITING_PREDICTION.value)


if __name__ == "__main__":
    unittest.main()

"""Adapters for external model integrations."""

from bw_colorization.adapters.torch_adapter import TorchScriptOracle

__all__ = [
    "TorchScriptOracle",
]

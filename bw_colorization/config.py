"""Configuration dataclasses for the colorization pipeline."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class OracleConfig:
    """Settings for the TorchScript chrominance predictor.

    Attributes:
        model_path: Path to the TorchScript export of the colorization network.
        device: Torch device string.
    """

    model_path: str = "models/eccv16_colorize.pt"
    device: str = "cpu"


@dataclass
class PipelineConfig:
    """Top-level configuration for the colorization pipeline.

    Attributes:
        model_input_size: Side of the square image handed to the oracle;
            must match the resolution the model was exported for.
        resize_interpolation: Image resampling used for the model-resolution
            copy ("area", "bilinear" or "cubic").
        working_width: Optional width the input is rescaled to (aspect ratio
            preserved) before any processing. ``None`` keeps the input size.
        oracle: Settings for the bundled TorchScript oracle.
    """

    model_input_size: int = 512
    resize_interpolation: str = "area"
    working_width: Optional[int] = None
    oracle: OracleConfig = field(default_factory=OracleConfig)

"""
Configuration loader with Pydantic validation for the blur classifier.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from plate_inspector.utils.io import load_yaml


class BlurModelConfig(BaseModel):
    """Model configuration.

    Attributes:
        path: Path to classification weights. Relative paths start at the project root.
        blurry_class: Class name whose probability is the blur confidence.
    """

    path: str = "weights/blur/best.pt"
    blurry_class: str = "blurry"


class BlurInferenceConfig(BaseModel):
    """Inference configuration.

    Attributes:
        image_size: Input size of the classifier.
        device: Device for inference ("auto", "cpu", "cuda", "mps").
        verbose: Enable verbose logging during inference.
    """

    image_size: int = Field(default=224, gt=0)
    device: Literal["auto", "cpu", "cuda", "mps"] = "auto"
    verbose: bool = False


class BlurModuleConfig(BaseModel):
    """Complete blur classifier configuration.

    Attributes:
        model: Model configuration.
        inference: Inference configuration.
        threshold: A plate body is blurry when its confidence is above this value.
    """

    model: BlurModelConfig = Field(default_factory=BlurModelConfig)
    inference: BlurInferenceConfig = Field(default_factory=BlurInferenceConfig)
    threshold: float = Field(default=0.5, ge=0.0, le=1.0)


def load_config(config_path: Path) -> BlurModuleConfig:
    """Load and validate a blur classifier configuration from a YAML file.

    Raises:
        FileNotFoundError: If config file does not exist.
        yaml.YAMLError: If YAML parsing fails.
        pydantic.ValidationError: If configuration validation fails.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    return BlurModuleConfig(**load_yaml(config_path))

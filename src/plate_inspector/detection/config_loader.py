"""
Configuration loader with Pydantic validation for the detector models.

The same schema serves the region detector (plate bodies and ID plates) and
the character detector (glyphs of an ID plate).
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from plate_inspector.utils.io import load_yaml


class InferenceConfig(BaseModel):
    """Inference configuration for detection.

    Attributes:
        conf_threshold: Minimum confidence for the model to report a box (0.0-1.0).
        iou_threshold: IoU threshold for NMS (0.0-1.0).
        image_size: Input image size for model inference.
        device: Device for inference ("auto", "cpu", "cuda", "mps").
        verbose: Enable verbose logging during inference.
    """

    conf_threshold: float = Field(default=0.25, ge=0.0, le=1.0)
    iou_threshold: float = Field(default=0.45, ge=0.0, le=1.0)
    image_size: int = Field(default=640, gt=0)
    device: Literal["auto", "cpu", "cuda", "mps"] = "auto"
    verbose: bool = False


class ModelConfig(BaseModel):
    """Model configuration.

    Attributes:
        path: Path to model weights file. Relative paths start at the project root.
        num_classes: Number of classes the model was trained on.
    """

    path: str = "weights/roi/best.pt"
    num_classes: int = Field(default=2, gt=0)


class DetectionModuleConfig(BaseModel):
    """Complete configuration of one detector.

    Attributes:
        inference: Inference configuration.
        model: Model configuration.
    """

    inference: InferenceConfig = Field(default_factory=InferenceConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)


def load_config(config_path: Path) -> DetectionModuleConfig:
    """Load and validate a detector configuration from a YAML file.

    Args:
        config_path: Path to YAML configuration file.

    Returns:
        Validated DetectionModuleConfig.

    Raises:
        FileNotFoundError: If config file does not exist.
        yaml.YAMLError: If YAML parsing fails.
        pydantic.ValidationError: If configuration validation fails.

    Example:
        >>> config = load_config(Path("configs/character_detector.yaml"))
        >>> print(config.model.num_classes)
        23
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    return DetectionModuleConfig(**load_yaml(config_path))

"""Configuration loader with Pydantic validation for the inspection pipeline.

The root configuration gathers the three model sections and the settings of
the orchestrator, the writers and the batch driver. It is loaded from YAML;
the bundled ``config.yaml`` next to this module holds the production defaults.
"""

from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from plate_inspector.blur.config_loader import BlurModuleConfig
from plate_inspector.detection.config_loader import DetectionModuleConfig, ModelConfig
from plate_inspector.utils.io import load_yaml


def _region_detector_defaults() -> DetectionModuleConfig:
    return DetectionModuleConfig(model=ModelConfig(path="weights/roi/best.pt", num_classes=2))


def _character_detector_defaults() -> DetectionModuleConfig:
    return DetectionModuleConfig(model=ModelConfig(path="weights/id/best.pt", num_classes=23))


class ThresholdsConfig(BaseModel):
    """Thresholds applied by the orchestrator.

    Attributes:
        region_confidence: Region detections below this confidence are ignored.
    """

    region_confidence: float = Field(default=0.25, ge=0.0, le=1.0)


class PlateIdConfig(BaseModel):
    """Plate ID acceptance.

    Attributes:
        length: Length of a fully read plate ID.
        unrecognized_dir: Folder receiving ID plate crops whose decoded ID has
            another length, for manual review.
    """

    length: int = Field(default=8, gt=0)
    unrecognized_dir: str = "id_patch"


class AnnotationConfig(BaseModel):
    """Annotation of blurry regions.

    Attributes:
        annotate_all: Annotate every plate body, not only once a blurry one was seen.
        color: BGR color of rectangles and labels.
        thickness: Rectangle line thickness.
        font_scale: Label font scale.
        text_thickness: Label stroke thickness.
        text_offset: Label offset below the region's top edge, in pixels.
    """

    annotate_all: bool = False
    color: Tuple[int, int, int] = (0, 0, 255)
    thickness: int = Field(default=3, gt=0)
    font_scale: float = Field(default=4.0, gt=0.0)
    text_thickness: int = Field(default=4, gt=0)
    text_offset: int = 100


class SummaryConfig(BaseModel):
    """Summary CSV settings.

    Attributes:
        include_empty: Also record images without any detected region.
        date_format: strftime format of the Date column.
    """

    include_empty: bool = False
    date_format: str = "%Y-%m-%d %H:%M:%S"


class BatchConfig(BaseModel):
    """Batch driver settings.

    Attributes:
        exclude_pattern: Images whose file name matches this regex are skipped.
            Empty string disables the exclusion.
        image_patterns: Glob patterns of input images (searched recursively).
        max_workers: Number of images processed in parallel.
        acquire_timeout: Seconds to wait for a busy model before failing the
            image. None waits forever.
    """

    exclude_pattern: str = "12345"
    image_patterns: List[str] = Field(default_factory=lambda: ["*.jpg"])
    max_workers: int = Field(default=1, ge=1)
    acquire_timeout: Optional[float] = Field(default=None, gt=0.0)

    @field_validator("image_patterns")
    @classmethod
    def _require_patterns(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one image pattern is required")
        return v


class PipelineConfig(BaseModel):
    """Complete pipeline configuration.

    Attributes:
        region_detector: Region detector configuration.
        character_detector: Character detector configuration.
        blur_classifier: Blur classifier configuration and blur threshold.
        thresholds: Orchestrator thresholds.
        plate_id: Plate ID acceptance.
        annotation: Annotation settings.
        summary: Summary CSV settings.
        batch: Batch driver settings.
    """

    region_detector: DetectionModuleConfig = Field(default_factory=_region_detector_defaults)
    character_detector: DetectionModuleConfig = Field(
        default_factory=_character_detector_defaults
    )
    blur_classifier: BlurModuleConfig = Field(default_factory=BlurModuleConfig)
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    plate_id: PlateIdConfig = Field(default_factory=PlateIdConfig)
    annotation: AnnotationConfig = Field(default_factory=AnnotationConfig)
    summary: SummaryConfig = Field(default_factory=SummaryConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)


def load_config(config_path: Path) -> PipelineConfig:
    """Load and validate the pipeline configuration from a YAML file.

    Args:
        config_path: Path to YAML configuration file.

    Returns:
        Validated PipelineConfig.

    Raises:
        FileNotFoundError: If config file does not exist.
        yaml.YAMLError: If YAML parsing fails.
        pydantic.ValidationError: If configuration validation fails.

    Example:
        >>> config = load_config(Path("config.yaml"))
        >>> print(config.thresholds.region_confidence)
        0.25
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    return PipelineConfig(**load_yaml(config_path))


def get_default_config() -> PipelineConfig:
    """Get default configuration from the bundled config.yaml file."""
    default_config_path = Path(__file__).parent / "config.yaml"
    if default_config_path.exists():
        return load_config(default_config_path)
    else:
        # Fallback to hardcoded defaults if config file is missing
        return PipelineConfig()

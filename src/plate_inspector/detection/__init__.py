"""
Detection Models

Collaborator contracts for the models and the YOLO-backed detector used for
both region detection and character detection.

Example:
    >>> from plate_inspector.detection import YoloDetector
    >>> detector = YoloDetector("region_detector")
    >>> if detector.initialize(weights_path="weights/roi/best.pt"):
    ...     result = detector.detect(image)
"""

from plate_inspector.detection.base import BlurClassifier, Detector
from plate_inspector.detection.config_loader import (
    DetectionModuleConfig,
    InferenceConfig,
    ModelConfig,
    load_config,
)
from plate_inspector.detection.processor import YoloDetector

__all__ = [
    "Detector",
    "BlurClassifier",
    "YoloDetector",
    "DetectionModuleConfig",
    "InferenceConfig",
    "ModelConfig",
    "load_config",
]

"""
Blur Classification and Image Status

Scores plate body crops with a blur classifier and resolves the final
status of an image from the per-region scores.

Example:
    >>> from plate_inspector.blur import classify_status, ImageStatus
    >>> decision = classify_status([0.1, 0.9], threshold=0.25)
    >>> decision.status == ImageStatus.BLURRY
    True
"""

from .classifier import YoloBlurClassifier
from .config_loader import BlurInferenceConfig, BlurModelConfig, BlurModuleConfig, load_config
from .status import BlurStatusTracker, classify_status, is_blurry
from .types import ImageStatus, StatusDecision

__all__ = [
    "ImageStatus",
    "StatusDecision",
    "BlurStatusTracker",
    "classify_status",
    "is_blurry",
    "YoloBlurClassifier",
    "BlurModuleConfig",
    "BlurModelConfig",
    "BlurInferenceConfig",
    "load_config",
]

"""
YOLO blur classifier adapter.

Wraps an Ultralytics YOLO classification model trained on plate body crops.
The blur confidence is the probability the model assigns to the configured
blurry class.
"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import yaml
from pydantic import ValidationError
from ultralytics import YOLO

from plate_inspector.detection.base import BlurClassifier, PathLike
from plate_inspector.exceptions import DetectorInvocationError
from plate_inspector.utils.device import resolve_device, resolve_model_path

from .config_loader import BlurModuleConfig, load_config

logger = logging.getLogger(__name__)


class YoloBlurClassifier(BlurClassifier):
    """
    Blur classifier backed by Ultralytics YOLO classification weights.

    Example:
        >>> classifier = YoloBlurClassifier()
        >>> classifier.initialize(weights_path="weights/blur/best.pt")
        True
        >>> confidence = classifier.classify(plate_body_crop)
    """

    def __init__(self, config: Optional[BlurModuleConfig] = None, name: str = "blur_classifier"):
        self.name = name
        self.config = config if config is not None else BlurModuleConfig()
        self.model: Optional[YOLO] = None
        self.blurry_index: Optional[int] = None
        self.device = "cpu"

    @property
    def is_loaded(self) -> bool:
        return self.model is not None

    def initialize(
        self,
        config_path: Optional[PathLike] = None,
        weights_path: Optional[PathLike] = None,
        device: Optional[str] = None,
    ) -> bool:
        """
        Load the classification model and locate the blurry class.

        Returns:
            True if the model is ready, False if configuration or weights are unusable.
        """
        if config_path is not None:
            try:
                self.config = load_config(Path(config_path))
            except (FileNotFoundError, yaml.YAMLError, ValidationError) as e:
                logger.error(f"Invalid {self.name} configuration {config_path}: {e}")
                return False

        model_path = resolve_model_path(weights_path or self.config.model.path)
        if not model_path.exists():
            logger.error(f"{self.name} model not found at {model_path}")
            return False

        try:
            logger.info(f"Loading {self.name} model from {model_path}")
            model = YOLO(str(model_path))
        except Exception as e:
            logger.error(f"Failed to load {self.name} model: {e}")
            return False

        names = getattr(model, "names", None) or {}
        blurry_class = self.config.model.blurry_class
        matches = [idx for idx, label in names.items() if label == blurry_class]
        if not matches:
            logger.error(
                f"{self.name} model has no class named '{blurry_class}' "
                f"(classes: {list(names.values())})"
            )
            return False

        self.model = model
        self.blurry_index = int(matches[0])
        self.device = resolve_device(device or self.config.inference.device)
        logger.info(f"✓ {self.name} model loaded on {self.device}")
        return True

    def classify(self, image: np.ndarray) -> float:
        """
        Return the blurry-class probability of a BGR crop.

        Raises:
            DetectorInvocationError: If the model is not loaded or inference failed.
        """
        if self.model is None or self.blurry_index is None:
            raise DetectorInvocationError(self.name, "model is not initialized")

        inference = self.config.inference
        try:
            results = self.model.predict(
                source=image,
                imgsz=inference.image_size,
                device=self.device,
                verbose=inference.verbose,
            )
        except Exception as e:
            raise DetectorInvocationError(self.name, f"inference failed: {e}") from e

        if len(results) == 0 or results[0].probs is None:
            raise DetectorInvocationError(self.name, "model returned no class probabilities")

        probs = results[0].probs.data
        probs = probs.cpu().numpy() if hasattr(probs, "cpu") else np.asarray(probs)
        return float(probs[self.blurry_index])

    def dispose(self) -> None:
        if self.model is not None:
            logger.info(f"Releasing {self.name} model")
        self.model = None
        self.blurry_index = None

"""
YOLO detector adapter.

Wraps an Ultralytics YOLO detection model behind the ``Detector`` contract.
Used twice by the pipeline: as the region detector on whole frames and as
the character detector on ID plate crops.
"""

import logging
from pathlib import Path
from typing import List, Optional

import numpy as np
import yaml
from pydantic import ValidationError
from ultralytics import YOLO

from plate_inspector.common.types import DetectionBox, DetectionResult
from plate_inspector.detection.base import Detector, PathLike
from plate_inspector.detection.config_loader import DetectionModuleConfig, load_config
from plate_inspector.exceptions import DetectorInvocationError
from plate_inspector.utils.device import resolve_device, resolve_model_path

logger = logging.getLogger(__name__)


def _to_numpy(values) -> np.ndarray:
    return values.cpu().numpy() if hasattr(values, "cpu") else np.asarray(values)


class YoloDetector(Detector):
    """
    Detector backed by Ultralytics YOLO weights.

    Example:
        >>> detector = YoloDetector("region_detector")
        >>> detector.initialize(weights_path="weights/roi/best.pt", device="cuda")
        True
        >>> result = detector.detect(image)
        >>> print(f"{len(result)} box(es)")
    """

    def __init__(self, name: str, config: Optional[DetectionModuleConfig] = None):
        """
        Args:
            name: Name used in logs and errors (e.g. "region_detector").
            config: Detector configuration. Defaults apply if None.
        """
        self.name = name
        self.config = config if config is not None else DetectionModuleConfig()
        self.model: Optional[YOLO] = None
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
        Load the YOLO model.

        Args:
            config_path: Optional YAML detector configuration replacing the current one.
            weights_path: Weights file. Defaults to ``config.model.path``.
            device: Inference device. Defaults to ``config.inference.device``.

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

        names = getattr(model, "names", None)
        if isinstance(names, dict) and len(names) != self.config.model.num_classes:
            logger.error(
                f"{self.name} model has {len(names)} classes, "
                f"configuration expects {self.config.model.num_classes}"
            )
            return False

        self.model = model
        self.device = resolve_device(device or self.config.inference.device)
        logger.info(f"✓ {self.name} model loaded on {self.device}")
        return True

    def detect(self, image: np.ndarray) -> DetectionResult:
        """
        Detect objects in a BGR image.

        Returns:
            DetectionResult in model output order; empty if nothing was found.

        Raises:
            DetectorInvocationError: If the model is not loaded or inference failed.
        """
        if self.model is None:
            raise DetectorInvocationError(self.name, "model is not initialized")

        inference = self.config.inference
        try:
            results = self.model.predict(
                source=image,
                conf=inference.conf_threshold,
                iou=inference.iou_threshold,
                imgsz=inference.image_size,
                device=self.device,
                verbose=inference.verbose,
            )
        except Exception as e:
            raise DetectorInvocationError(self.name, f"inference failed: {e}") from e

        if len(results) == 0 or results[0].boxes is None or len(results[0].boxes) == 0:
            return DetectionResult.empty()

        boxes = results[0].boxes
        confidences = _to_numpy(boxes.conf)
        class_ids = _to_numpy(boxes.cls)
        xyxy_boxes = _to_numpy(boxes.xyxy)

        detections: List[DetectionBox] = [
            DetectionBox.from_xyxy(
                xyxy_boxes[i],
                confidence=float(confidences[i]),
                class_id=int(class_ids[i]),
            )
            for i in range(len(confidences))
        ]
        return DetectionResult(boxes=detections)

    def dispose(self) -> None:
        if self.model is not None:
            logger.info(f"Releasing {self.name} model")
        self.model = None

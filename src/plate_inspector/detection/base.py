"""
Collaborator interfaces for the models used by the pipeline.

The pipeline only depends on these contracts. A model is loaded once with
``initialize``, called any number of times, and released with ``dispose``.
Implementations are not required to be reentrant; callers serialize access
through ``plate_inspector.pipeline.resources.SingleFlight``.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

import numpy as np

from plate_inspector.common.types import DetectionResult

PathLike = Union[str, Path]


class Detector(ABC):
    """Object detector returning bounding boxes."""

    name: str = "detector"

    @abstractmethod
    def initialize(
        self,
        config_path: Optional[PathLike] = None,
        weights_path: Optional[PathLike] = None,
        device: Optional[str] = None,
    ) -> bool:
        """Load the model. Returns False when loading failed."""

    @abstractmethod
    def detect(self, image: np.ndarray) -> DetectionResult:
        """
        Run detection on a BGR image.

        Returns:
            The detections, possibly empty.

        Raises:
            DetectorInvocationError: If the model call failed.
        """

    @abstractmethod
    def dispose(self) -> None:
        """Release the model."""


class BlurClassifier(ABC):
    """Image classifier scoring how blurry an image is."""

    name: str = "blur_classifier"

    @abstractmethod
    def initialize(
        self,
        config_path: Optional[PathLike] = None,
        weights_path: Optional[PathLike] = None,
        device: Optional[str] = None,
    ) -> bool:
        """Load the model. Returns False when loading failed."""

    @abstractmethod
    def classify(self, image: np.ndarray) -> float:
        """
        Score a BGR image.

        Returns:
            Blur confidence in [0, 1].

        Raises:
            DetectorInvocationError: If the model call failed.
        """

    @abstractmethod
    def dispose(self) -> None:
        """Release the model."""

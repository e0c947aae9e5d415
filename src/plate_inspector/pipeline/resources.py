"""
Model handles shared by the pipeline.

Loaded models are not reentrant. Every handle is wrapped in ``SingleFlight``,
which lets at most one call run on that model at a time. Each model has its
own lock, so different models may still run concurrently.

``DetectorHandles`` owns the three models for the lifetime of a batch and is
passed explicitly to the orchestrator.
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Generic, Iterator, Optional, TypeVar

import numpy as np

from plate_inspector.blur.classifier import YoloBlurClassifier
from plate_inspector.common.types import DetectionResult
from plate_inspector.detection.base import BlurClassifier, Detector
from plate_inspector.detection.processor import YoloDetector
from plate_inspector.exceptions import ConfigurationError, DetectorTimeoutError
from plate_inspector.pipeline.config_loader import PipelineConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """
    Mutual exclusion around one model.

    The lock is held only while a call runs. With ``acquire_timeout`` set,
    waiting longer than that for a busy model raises DetectorTimeoutError.
    A call already running cannot be interrupted.

    Example:
        >>> region = SingleFlight(detector, "region_detector")
        >>> result = region.call("detect", image)
    """

    def __init__(self, resource: T, name: str, acquire_timeout: Optional[float] = None):
        self.resource = resource
        self.name = name
        self.acquire_timeout = acquire_timeout
        self._lock = threading.Lock()

    @contextmanager
    def acquire(self) -> Iterator[T]:
        timeout = -1 if self.acquire_timeout is None else self.acquire_timeout
        if not self._lock.acquire(timeout=timeout):
            raise DetectorTimeoutError(
                self.name, f"model busy for more than {self.acquire_timeout}s"
            )
        try:
            yield self.resource
        finally:
            self._lock.release()

    def call(self, method: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke ``resource.<method>`` while holding the lock."""
        begin = time.perf_counter()
        with self.acquire() as resource:
            result = getattr(resource, method)(*args, **kwargs)
        elapsed_ms = (time.perf_counter() - begin) * 1000
        logger.info(f"Time consumed for {self.name}: {elapsed_ms:.1f} ms")
        return result


class DetectorHandles:
    """
    The three models used by the pipeline, each behind its own lock.

    Attributes:
        region: Region detector (plate bodies and ID plates).
        character: Character detector (glyphs of an ID plate).
        blur: Blur classifier (plate body crops).

    Example:
        >>> with DetectorHandles.from_config(config) as handles:
        ...     pipeline = InspectionPipeline(handles, config)
        ...     outcome = pipeline.process(image_path)
    """

    def __init__(
        self,
        region_detector: Detector,
        character_detector: Detector,
        blur_classifier: BlurClassifier,
        acquire_timeout: Optional[float] = None,
    ):
        self.region: SingleFlight[Detector] = SingleFlight(
            region_detector, "region_detector", acquire_timeout
        )
        self.character: SingleFlight[Detector] = SingleFlight(
            character_detector, "character_detector", acquire_timeout
        )
        self.blur: SingleFlight[BlurClassifier] = SingleFlight(
            blur_classifier, "blur_classifier", acquire_timeout
        )
        self._loaded = False

    @classmethod
    def from_config(cls, config: PipelineConfig) -> "DetectorHandles":
        """Build YOLO-backed handles from the pipeline configuration (not loaded yet)."""
        return cls(
            region_detector=YoloDetector("region_detector", config.region_detector),
            character_detector=YoloDetector("character_detector", config.character_detector),
            blur_classifier=YoloBlurClassifier(config.blur_classifier),
            acquire_timeout=config.batch.acquire_timeout,
        )

    def load(self, device: Optional[str] = None) -> float:
        """
        Initialize all three models.

        Args:
            device: Optional device overriding each model's configured device.

        Returns:
            Loading time in milliseconds.

        Raises:
            ConfigurationError: If any model fails to initialize.

        Models already loaded are disposed before any error propagates.
        """
        begin = time.perf_counter()
        try:
            for handle in (self.region, self.character, self.blur):
                with handle.acquire() as resource:
                    loaded = resource.initialize(device=device)
                # dispose() takes every lock, so raise only once this one is released
                if not loaded:
                    raise ConfigurationError(f"Failed to initialize {handle.name}")
        except Exception:
            self.dispose()
            raise
        self._loaded = True

        elapsed_ms = (time.perf_counter() - begin) * 1000
        logger.info("+++++++++++++++++++++++++++++++++++")
        logger.info(f"Time consumed for loading model: {elapsed_ms:.1f} ms")
        logger.info("+++++++++++++++++++++++++++++++++++")
        return elapsed_ms

    def dispose(self) -> None:
        for handle in (self.region, self.character, self.blur):
            with handle.acquire() as resource:
                resource.dispose()
        self._loaded = False

    def detect_regions(self, image: np.ndarray) -> DetectionResult:
        return self.region.call("detect", image)

    def detect_characters(self, image: np.ndarray) -> DetectionResult:
        return self.character.call("detect", image)

    def classify_blur(self, image: np.ndarray) -> float:
        return self.blur.call("classify", image)

    def __enter__(self) -> "DetectorHandles":
        if not self._loaded:
            self.load()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules: box factories, stub models standing in for the YOLO
adapters, and synthetic plate images on disk.
"""

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import cv2
import numpy as np
import pytest

from plate_inspector.common.types import DetectionBox, DetectionResult
from plate_inspector.detection.base import BlurClassifier, Detector


class StubDetector(Detector):
    """Detector returning scripted results, one per call (last one repeats)."""

    def __init__(
        self,
        results: Sequence[Union[DetectionResult, Exception]] = (),
        name: str = "stub_detector",
        load_ok: bool = True,
    ):
        self.name = name
        self.results = list(results) or [DetectionResult.empty()]
        self.load_ok = load_ok
        self.calls: List[np.ndarray] = []
        self.initialized = False
        self.disposed = False

    def initialize(self, config_path=None, weights_path=None, device=None) -> bool:
        self.initialized = self.load_ok
        return self.load_ok

    def detect(self, image: np.ndarray) -> DetectionResult:
        index = min(len(self.calls), len(self.results) - 1)
        self.calls.append(image)
        result = self.results[index]
        if isinstance(result, Exception):
            raise result
        return result

    def dispose(self) -> None:
        self.disposed = True


class StubBlurClassifier(BlurClassifier):
    """Blur classifier returning scripted confidences, one per call."""

    def __init__(self, confidences: Sequence[float] = (0.0,), load_ok: bool = True):
        self.name = "stub_blur"
        self.confidences = list(confidences)
        self.load_ok = load_ok
        self.calls: List[np.ndarray] = []
        self.disposed = False

    def initialize(self, config_path=None, weights_path=None, device=None) -> bool:
        return self.load_ok

    def classify(self, image: np.ndarray) -> float:
        index = min(len(self.calls), len(self.confidences) - 1)
        self.calls.append(image)
        return self.confidences[index]

    def dispose(self) -> None:
        self.disposed = True


@pytest.fixture
def make_box() -> Callable[..., DetectionBox]:
    """Factory for DetectionBox with sensible defaults."""

    def _make(
        x: int = 10,
        y: int = 10,
        w: int = 20,
        h: int = 20,
        confidence: float = 0.9,
        class_id: int = 0,
    ) -> DetectionBox:
        return DetectionBox(x=x, y=y, w=w, h=h, confidence=confidence, class_id=class_id)

    return _make


@pytest.fixture
def stub_detector_class():
    return StubDetector


@pytest.fixture
def stub_blur_class():
    return StubBlurClassifier


@pytest.fixture
def sample_frame() -> np.ndarray:
    """Synthetic BGR camera frame (H=300, W=400)."""
    image = np.full((300, 400, 3), 200, dtype=np.uint8)
    cv2.rectangle(image, (50, 40), (250, 200), (60, 60, 60), -1)
    return image


@pytest.fixture
def write_plate_image(tmp_path: Path, sample_frame: np.ndarray) -> Callable[..., Path]:
    """Factory writing a plate image as <line>/<name>.jpg under tmp_path."""

    def _write(
        name: str = "plate-20230105143000.jpg",
        line: str = "L3",
        image: Optional[np.ndarray] = None,
        root: Optional[Path] = None,
    ) -> Path:
        folder = (root or tmp_path / "input") / line
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / name
        assert cv2.imwrite(str(path), sample_frame if image is None else image)
        return path

    return _write

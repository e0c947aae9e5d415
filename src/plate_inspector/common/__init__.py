"""
Common types shared across all modules.

Standardized detection and image types used by the detectors, the two-line
decoder and the pipeline orchestrator.
"""

from plate_inspector.common.types import (
    MAX_DETECTIONS,
    DetectionBox,
    DetectionResult,
    ImageBuffer,
)

__all__ = ["ImageBuffer", "DetectionBox", "DetectionResult", "MAX_DETECTIONS"]

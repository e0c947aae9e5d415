"""
Image status resolution from per-region blur confidences.

Each plate body region is classified on its own:
    is_blurry = blur_confidence > threshold

The image is BLURRY as soon as one region is blurry, NOT_BLURRY when every
classified region is sharp, and EMPTY when no plate body region exists.
The first blurry region wins: later sharp regions never revert the verdict,
and the annotated output points at that first region.
"""

import logging
from typing import List, Optional, Sequence

from .types import ImageStatus, StatusDecision

logger = logging.getLogger(__name__)


def is_blurry(confidence: float, threshold: float) -> bool:
    return confidence > threshold


class BlurStatusTracker:
    """
    Running status of one image while its regions are scanned in order.

    Attributes:
        threshold: Blur confidence threshold.
        confidences: Confidences observed so far, in scan order.
        trigger_index: Index of the first blurry observation, if any.

    Example:
        >>> tracker = BlurStatusTracker(threshold=0.25)
        >>> tracker.observe(0.9)
        True
        >>> tracker.observe(0.1)
        False
        >>> tracker.status
        <ImageStatus.BLURRY: 'blurry'>
    """

    def __init__(self, threshold: float):
        self.threshold = threshold
        self.confidences: List[float] = []
        self.trigger_index: Optional[int] = None

    def observe(self, confidence: float) -> bool:
        """
        Record one region's blur confidence.

        Returns:
            The verdict for this region alone.
        """
        blurry = is_blurry(confidence, self.threshold)
        if blurry and self.trigger_index is None:
            self.trigger_index = len(self.confidences)
        self.confidences.append(confidence)
        logger.info(f"blurry -> {blurry} with confidence -> {confidence}")
        return blurry

    @property
    def any_blurry(self) -> bool:
        return self.trigger_index is not None

    @property
    def status(self) -> ImageStatus:
        if not self.confidences:
            return ImageStatus.EMPTY
        if self.any_blurry:
            return ImageStatus.BLURRY
        return ImageStatus.NOT_BLURRY

    def decision(self) -> StatusDecision:
        return StatusDecision(status=self.status, trigger_index=self.trigger_index)


def classify_status(confidences: Sequence[float], threshold: float) -> StatusDecision:
    """
    Resolve the image status from plate body blur confidences.

    Args:
        confidences: Blur confidence of each plate body region, in scan order.
        threshold: Blur confidence threshold.

    Returns:
        StatusDecision with the status and the first blurry region index.

    Example:
        >>> classify_status([], 0.25).status
        <ImageStatus.EMPTY: 'empty'>
        >>> classify_status([0.1, 0.9], 0.25)
        StatusDecision(status=<ImageStatus.BLURRY: 'blurry'>, trigger_index=1)
    """
    tracker = BlurStatusTracker(threshold)
    for confidence in confidences:
        tracker.observe(confidence)
    return tracker.decision()

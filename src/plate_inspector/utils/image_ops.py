"""
Image orientation and cropping.

Camera frames arrive rotated: the whole frame is transposed and mirrored
horizontally before detection, and ID plate crops are transposed and
mirrored vertically before character detection.
"""

import cv2
import numpy as np

from plate_inspector.common.types import DetectionBox


def orient_frame(image: np.ndarray) -> np.ndarray:
    """Transpose then flip around the vertical axis."""
    return cv2.flip(cv2.transpose(image), 1)


def orient_id_plate(patch: np.ndarray) -> np.ndarray:
    """Transpose then flip around the horizontal axis."""
    return cv2.flip(cv2.transpose(patch), 0)


def crop_region(image: np.ndarray, box: DetectionBox) -> np.ndarray:
    """
    Crop a detected region, clipped to the image bounds.

    Example:
        >>> patch = crop_region(image, DetectionBox(x=100, y=50, w=400, h=250,
        ...                                         confidence=0.9, class_id=0))
        >>> patch.shape[:2]
        (250, 400)
    """
    x1, y1, x2, y2 = box.to_xyxy()

    x1 = max(0, x1)
    y1 = max(0, y1)
    x2 = min(image.shape[1], x2)
    y2 = min(image.shape[0], y2)

    return image[y1:y2, x1:x2].copy()

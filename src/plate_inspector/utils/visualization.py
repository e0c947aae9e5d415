"""
Visualization Utilities

Draws blur verdicts onto inspection images.
"""

from typing import Tuple

import cv2
import numpy as np

from plate_inspector.common.types import DetectionBox


def draw_blur_verdict(
    canvas: np.ndarray,
    box: DetectionBox,
    blurry: bool,
    confidence: float,
    color: Tuple[int, int, int] = (0, 0, 255),
    thickness: int = 3,
    font_scale: float = 4.0,
    text_thickness: int = 4,
    text_offset: int = 100,
) -> np.ndarray:
    """
    Draw a region rectangle and its "<blurry> <confidence>" label in place.

    Args:
        canvas: BGR image to draw on (modified in place).
        box: Plate body region.
        blurry: Verdict for the region.
        confidence: Blur confidence for the region.
        color: BGR color of rectangle and text.
        thickness: Rectangle line thickness.
        font_scale: Label font scale.
        text_thickness: Label stroke thickness.
        text_offset: Label baseline offset below the region's top edge.

    Returns:
        The same canvas, for chaining.
    """
    x1, y1, x2, y2 = box.to_xyxy()
    cv2.rectangle(canvas, (x1, y1), (x2, y2), color, thickness)
    cv2.putText(
        canvas,
        f"{blurry} {confidence:.2f}",
        (box.x, box.y + text_offset),
        cv2.FONT_HERSHEY_SIMPLEX | cv2.FONT_ITALIC,
        font_scale,
        color,
        text_thickness,
    )
    return canvas

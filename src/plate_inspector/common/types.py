"""
Common type definitions for the plate inspection pipeline.

This module provides Pydantic-based type definitions for the data structures
shared by every stage: image buffers, single detections and the bounded
result of one detector call.

These types provide:
- Type validation and conversion
- Consistent interfaces across detectors, decoder and orchestrator
- Helpers for the filtering rules applied to raw detector output
"""

from typing import List, Tuple, Union

import numpy as np
from pydantic import BaseModel, Field, field_validator

# Detector output buffers hold at most this many boxes
MAX_DETECTIONS = 1000


class ImageBuffer(BaseModel):
    """
    Type-safe wrapper for image arrays (numpy.ndarray).

    Attributes:
        data: The underlying numpy array containing image data.
            Shape: (H, W, C) for color images, (H, W) for grayscale.
            Dtype: uint8 (0-255).

    Example:
        >>> import cv2
        >>> image = cv2.imread("plate.jpg")
        >>> buffer = ImageBuffer(data=image)
        >>> print(buffer.height, buffer.width)  # 1080, 1920
    """

    data: np.ndarray = Field(..., description="Image data as numpy array")

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("data")
    @classmethod
    def _validate_image(cls, v: np.ndarray) -> np.ndarray:
        """
        Validate that the numpy array is a valid image.

        Raises:
            ValueError: If array is not a valid image format.
        """
        if not isinstance(v, np.ndarray):
            raise ValueError(f"Expected numpy.ndarray, got {type(v)}")

        if v.size == 0:
            raise ValueError("Image array is empty")

        if len(v.shape) not in (2, 3):
            raise ValueError(
                f"Expected 2D (grayscale) or 3D (color) image, got shape {v.shape}"
            )

        if len(v.shape) == 3 and v.shape[2] not in (1, 3, 4):
            raise ValueError(
                f"Expected 1, 3, or 4 channels for color image, got {v.shape[2]}"
            )

        if v.dtype != np.uint8:
            raise ValueError(
                f"Expected uint8 dtype for image, got {v.dtype}. "
                "Images should be in range [0, 255]"
            )

        return v

    @property
    def shape(self) -> Tuple[int, ...]:
        """Get image shape (H, W) or (H, W, C)."""
        return self.data.shape

    @property
    def height(self) -> int:
        """Get image height in pixels."""
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        """Get image width in pixels."""
        return int(self.data.shape[1])

    def to_numpy(self) -> np.ndarray:
        return self.data

    def copy(self) -> "ImageBuffer":
        """Create a deep copy of the image buffer."""
        return ImageBuffer(data=self.data.copy())

    def __repr__(self) -> str:
        return f"ImageBuffer(shape={self.shape}, dtype={self.data.dtype})"


class DetectionBox(BaseModel):
    """
    One detected object in image-pixel coordinates.

    Attributes:
        x: Left edge of the box.
        y: Top edge of the box.
        w: Box width.
        h: Box height. A height of 0 marks the end of the valid entries
            in a detector result buffer.
        confidence: Detector confidence (0.0-1.0).
        class_id: Index into the model-specific class table.
        track_id: Tracking id (unused, kept for wire compatibility).
        frames_counter: Tracking frame counter (unused).
        x_3d, y_3d, z_3d: Stereo coordinates (unused).

    Example:
        >>> box = DetectionBox(x=10, y=20, w=30, h=40, confidence=0.9, class_id=0)
        >>> box.to_xyxy()
        (10, 20, 40, 60)
    """

    x: int = Field(..., ge=0, description="Top-left X coordinate")
    y: int = Field(..., ge=0, description="Top-left Y coordinate")
    w: int = Field(..., ge=0, description="Box width")
    h: int = Field(..., ge=0, description="Box height (0 = end of buffer)")
    confidence: float = Field(..., ge=0.0, le=1.0)
    class_id: int = Field(..., ge=0)
    track_id: int = 0
    frames_counter: int = 0
    x_3d: float = 0.0
    y_3d: float = 0.0
    z_3d: float = 0.0

    model_config = {"frozen": True}

    @field_validator("x", "y", "w", "h", "class_id", mode="before")
    @classmethod
    def _convert_to_int(cls, v: Union[int, float]) -> int:
        """Truncate numeric coordinates to int, as raw detector buffers do."""
        if isinstance(v, bool) or not isinstance(v, (int, float, np.integer, np.floating)):
            raise ValueError(f"Coordinate must be numeric, got {type(v)}")
        return int(v)

    @classmethod
    def from_xyxy(
        cls,
        xyxy: Union[List[float], Tuple[float, ...], np.ndarray],
        confidence: float,
        class_id: int,
    ) -> "DetectionBox":
        """
        Create a box from [x_min, y_min, x_max, y_max] corner coordinates.

        Negative coordinates (boxes bleeding past the image edge) are clamped to 0.
        """
        x_min, y_min, x_max, y_max = [max(0.0, float(v)) for v in xyxy]
        return cls(
            x=x_min,
            y=y_min,
            w=max(0.0, x_max - x_min),
            h=max(0.0, y_max - y_min),
            confidence=min(1.0, max(0.0, float(confidence))),
            class_id=class_id,
        )

    def to_xyxy(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.w, self.y + self.h)

    @property
    def is_sentinel(self) -> bool:
        return self.h == 0


class DetectionResult(BaseModel):
    """
    Ordered boxes returned by one detector or classifier call.

    The buffer is bounded to MAX_DETECTIONS entries; anything past the bound
    is dropped on construction. Order is whatever the detector produced.

    An empty result means "nothing detected". A failed call never produces
    a result, it raises DetectorInvocationError instead.

    Example:
        >>> result = DetectionResult(boxes=[box_a, box_b])
        >>> regions = result.above(0.25)
    """

    boxes: List[DetectionBox] = Field(default_factory=list)

    model_config = {"frozen": True}

    @field_validator("boxes")
    @classmethod
    def _bound_capacity(cls, v: List[DetectionBox]) -> List[DetectionBox]:
        if len(v) > MAX_DETECTIONS:
            return list(v[:MAX_DETECTIONS])
        return v

    @classmethod
    def empty(cls) -> "DetectionResult":
        return cls(boxes=[])

    def valid_prefix(self) -> List[DetectionBox]:
        """Boxes before the first zero-height sentinel."""
        valid: List[DetectionBox] = []
        for box in self.boxes:
            if box.is_sentinel:
                break
            valid.append(box)
        return valid

    def above(self, threshold: float) -> List[DetectionBox]:
        """Valid prefix restricted to boxes with confidence >= threshold."""
        return [box for box in self.valid_prefix() if box.confidence >= threshold]

    def glyphs(self) -> List[DetectionBox]:
        """Every box with a non-zero extent, regardless of position in the buffer."""
        return [box for box in self.boxes if box.h > 0 or box.w > 0]

    @property
    def is_empty(self) -> bool:
        return len(self.valid_prefix()) == 0

    def __len__(self) -> int:
        return len(self.boxes)

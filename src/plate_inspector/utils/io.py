"""
I/O Utilities

File input/output operations for configs and images.
"""

from pathlib import Path
from typing import Any, Dict

import cv2
import numpy as np
import yaml

from plate_inspector.common.types import ImageBuffer
from plate_inspector.exceptions import ImageReadError


def load_yaml(file_path: Path) -> Dict[str, Any]:
    """Load YAML file. An empty file yields an empty dict."""
    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def read_image(file_path: Path) -> ImageBuffer:
    """
    Read an image file as a BGR ImageBuffer.

    Raises:
        ImageReadError: If the file is missing or cannot be decoded.
    """
    image = cv2.imread(str(file_path))
    if image is None:
        raise ImageReadError(f"Failed to read image: {file_path}")
    try:
        return ImageBuffer(data=image)
    except ValueError as e:
        raise ImageReadError(f"Invalid image data in {file_path}: {e}") from e


def write_image(image: np.ndarray, file_path: Path) -> None:
    """
    Write an image, creating parent folders as needed.

    Raises:
        OSError: If OpenCV could not encode or write the file.
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        written = cv2.imwrite(str(file_path), image)
    except cv2.error as e:
        raise OSError(f"Failed to write image: {file_path}: {e}") from e
    if not written:
        raise OSError(f"Failed to write image: {file_path}")

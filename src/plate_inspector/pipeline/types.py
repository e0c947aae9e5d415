"""
Data structures for the inspection pipeline.

Defines the identity parsed from an image path and the per-image outcome
handed to the writers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from plate_inspector.blur.types import ImageStatus
from plate_inspector.exceptions import FilenameParseError
from plate_inspector.utils.constants import FILENAME_TIMESTAMP_FORMAT


@dataclass(frozen=True)
class ImageIdentity:
    """
    Metadata carried by an image's path.

    Images are stored as ``<press line>/<prefix>-<yyyyMMddHHmmss>.jpg``.

    Attributes:
        path: Image path.
        name: File stem, used as plate ID when no ID plate is read.
        press_line: Name of the folder holding the image.
        timestamp: Capture time parsed from the file name.
    """

    path: Path
    name: str
    press_line: str
    timestamp: datetime

    @classmethod
    def from_path(cls, path: Path) -> "ImageIdentity":
        """
        Parse the identity of an image from its path.

        Raises:
            FilenameParseError: If the file name carries no valid timestamp.

        Example:
            >>> identity = ImageIdentity.from_path(Path("L3/plate-20230105143000.jpg"))
            >>> identity.press_line, identity.timestamp
            ('L3', datetime.datetime(2023, 1, 5, 14, 30))
        """
        path = Path(path)
        file_name = path.name
        start = file_name.rfind("-") + 1
        end = file_name.rfind(".")
        if end < start:
            end = len(file_name)
        stamp = file_name[start:end]

        try:
            timestamp = datetime.strptime(stamp, FILENAME_TIMESTAMP_FORMAT)
        except ValueError as e:
            raise FilenameParseError(
                f"Cannot parse capture time from '{file_name}' "
                f"(expected <prefix>-yyyyMMddHHmmss.<ext>): {e}"
            ) from e

        return cls(
            path=path,
            name=path.stem,
            press_line=path.parent.name,
            timestamp=timestamp,
        )


@dataclass(frozen=True)
class PipelineOutcome:
    """
    Result of inspecting one image.

    Attributes:
        identity: Parsed image identity (path, press line, timestamp).
        status: Final image status.
        plate_id: Decoded plate ID, or the image name when none was read.
        image: Image to persist: the annotated frame, or the raw frame for
            EMPTY. None when nothing is to be written.
        annotated: Whether ``image`` carries blur annotations.
        region_count: Number of regions above the region threshold.
        decoded_ids: Every decoded candidate, in region order.
        blur_confidences: Blur confidence of each plate body, in region order.
        trigger_region: Index (among plate bodies) of the first blurry region.
    """

    identity: ImageIdentity
    status: ImageStatus
    plate_id: str
    image: Optional[np.ndarray] = field(default=None, repr=False, compare=False)
    annotated: bool = False
    region_count: int = 0
    decoded_ids: Tuple[str, ...] = ()
    blur_confidences: Tuple[float, ...] = ()
    trigger_region: Optional[int] = None

    @property
    def press_line(self) -> str:
        return self.identity.press_line

    @property
    def timestamp(self) -> datetime:
        return self.identity.timestamp

    @property
    def image_path(self) -> Path:
        return self.identity.path

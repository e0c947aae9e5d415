"""
Data structures for blur classification and image status.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ImageStatus(Enum):
    """Final inspection status of one image.

    The values are also the output folder names and the CSV status column.
    """

    EMPTY = "empty"  # No region detected
    NOT_BLURRY = "notBlurry"
    BLURRY = "blurry"


@dataclass(frozen=True)
class StatusDecision:
    """Final status plus the plate body region that caused it.

    Attributes:
        status: Resolved image status.
        trigger_index: Position (among the classified plate body regions) of
            the first blurry region, None unless status is BLURRY.
    """

    status: ImageStatus
    trigger_index: Optional[int] = None

    @property
    def is_blurry(self) -> bool:
        return self.status == ImageStatus.BLURRY

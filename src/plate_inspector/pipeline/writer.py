"""
Outcome persistence.

``OutcomeWriter`` stores the image of an outcome under a folder named after
its status and appends one row to the summary CSV. ``UnrecognizedIdWriter``
keeps ID plate crops whose decoded ID is incomplete for manual review.
Both serialize their writes, so several workers can share one instance.
"""

import csv
import logging
import shutil
import threading
from pathlib import Path
from typing import Optional

import numpy as np

from plate_inspector.blur.types import ImageStatus
from plate_inspector.ocr.types import NO_READ
from plate_inspector.pipeline.config_loader import SummaryConfig
from plate_inspector.pipeline.types import PipelineOutcome
from plate_inspector.utils.constants import SUMMARY_COLUMNS
from plate_inspector.utils.io import write_image

logger = logging.getLogger(__name__)


def prepare_output_dirs(output_dir: Path, clean: bool = True) -> None:
    """
    Create the output folder with one sub-folder per image status.

    Args:
        output_dir: Output root.
        clean: Delete an existing output root first.
    """
    if clean and output_dir.exists():
        logger.warning(f"Removing previous output in {output_dir}")
        shutil.rmtree(output_dir)
    for status in ImageStatus:
        (output_dir / status.value).mkdir(parents=True, exist_ok=True)


class OutcomeWriter:
    """
    Writes outcome images and summary rows.

    Example:
        >>> writer = OutcomeWriter(Path("out"), Path("out/summary.csv"))
        >>> writer.write(outcome)
    """

    def __init__(
        self,
        output_dir: Path,
        summary_csv: Path,
        config: Optional[SummaryConfig] = None,
    ):
        self.output_dir = Path(output_dir)
        self.summary_csv = Path(summary_csv)
        self.config = config if config is not None else SummaryConfig()
        self._lock = threading.Lock()

    def ensure_summary(self) -> None:
        """Create the summary CSV with its header row if it does not exist."""
        with self._lock:
            self._ensure_summary()

    def _ensure_summary(self) -> None:
        if self.summary_csv.exists():
            return
        self.summary_csv.parent.mkdir(parents=True, exist_ok=True)
        with open(self.summary_csv, "w", newline="", encoding="utf-8") as f:
            csv.writer(f).writerow(SUMMARY_COLUMNS)

    def image_path(self, outcome: PipelineOutcome) -> Path:
        return self.output_dir / outcome.status.value / f"{outcome.plate_id}.jpg"

    def write(self, outcome: PipelineOutcome) -> Optional[Path]:
        """
        Persist one outcome.

        Returns:
            Path of the written image, or None if the outcome carried none.

        Raises:
            OSError: If the image or the CSV row could not be written.
        """
        with self._lock:
            written: Optional[Path] = None
            if outcome.image is not None:
                written = self.image_path(outcome)
                write_image(outcome.image, written)

            if outcome.status != ImageStatus.EMPTY or self.config.include_empty:
                self._append_row(outcome)
            return written

    def _append_row(self, outcome: PipelineOutcome) -> None:
        self._ensure_summary()
        row = (
            outcome.plate_id,
            outcome.press_line,
            outcome.timestamp.strftime(self.config.date_format),
            outcome.status.value,
        )
        with open(self.summary_csv, "a", newline="", encoding="utf-8") as f:
            csv.writer(f).writerow(row)


class UnrecognizedIdWriter:
    """
    Keeps ID plate crops whose decoded ID does not have the full length.

    Files are named after the decoded candidate; a later crop with the same
    candidate replaces the earlier one.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self._lock = threading.Lock()

    def write(self, crop: np.ndarray, candidate_id: str) -> Path:
        path = self.output_dir / f"{candidate_id or NO_READ}.jpg"
        with self._lock:
            write_image(crop, path)
        logger.info(f"Saved unrecognized ID crop to {path}")
        return path

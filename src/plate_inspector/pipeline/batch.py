"""
Batch driver.

Walks a folder of plate images, runs the inspection pipeline on each one and
hands every outcome to the writer. A failing image is logged and counted; it
never stops the batch. Only a ConfigurationError aborts the run.
"""

import logging
import re
import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from plate_inspector.blur.types import ImageStatus
from plate_inspector.exceptions import (
    ConfigurationError,
    DetectorInvocationError,
    FilenameParseError,
    ImageReadError,
)
from plate_inspector.pipeline.config_loader import BatchConfig
from plate_inspector.pipeline.orchestrator import InspectionPipeline
from plate_inspector.pipeline.writer import OutcomeWriter

logger = logging.getLogger(__name__)

# DetectorTimeoutError is a DetectorInvocationError; ImageReadError is an OSError
PER_IMAGE_ERRORS = (
    ImageReadError,
    FilenameParseError,
    DetectorInvocationError,
    OSError,
)


def collect_images(root: Path, patterns: Sequence[str] = ("*.jpg",)) -> List[Path]:
    """
    Recursively list input images under ``root`` in sorted order.

    Raises:
        FileNotFoundError: If ``root`` is not a directory.
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Input directory not found: {root}")

    found = set()
    for pattern in patterns:
        found.update(p for p in root.rglob(pattern) if p.is_file())
    return sorted(found)


class ProcessedLedger:
    """
    Text file listing images already processed, one path per line.

    Lets an interrupted batch resume without inspecting the same images twice.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._done = set()
        if self.path.exists():
            with open(self.path, "r", encoding="utf-8") as f:
                self._done = {line.strip() for line in f if line.strip()}
            logger.info(f"Ledger {self.path} lists {len(self._done)} processed images")

    def __contains__(self, image_path: Path) -> bool:
        return str(image_path) in self._done

    def __len__(self) -> int:
        return len(self._done)

    def record(self, image_path: Path) -> None:
        key = str(image_path)
        with self._lock:
            if key in self._done:
                return
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(key + "\n")
            self._done.add(key)


@dataclass
class BatchReport:
    """
    Summary of a batch run.

    Attributes:
        status_counts: Number of images per final status.
        failures: (image path, error message) of every failed image.
        skipped: Images skipped by the exclusion pattern or the ledger.
        elapsed_ms: Wall-clock time of the whole batch.
    """

    status_counts: Counter = field(default_factory=Counter)
    failures: List[Tuple[Path, str]] = field(default_factory=list)
    skipped: int = 0
    elapsed_ms: float = 0.0

    @property
    def processed(self) -> int:
        return sum(self.status_counts.values())

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    def count(self, status: ImageStatus) -> int:
        return self.status_counts[status]


class BatchDriver:
    """
    Runs the pipeline over many images.

    Example:
        >>> driver = BatchDriver(pipeline, writer, config.batch)
        >>> report = driver.run(collect_images(Path("images")))
        >>> print(report.count(ImageStatus.BLURRY), report.failed)
    """

    def __init__(
        self,
        pipeline: InspectionPipeline,
        writer: OutcomeWriter,
        config: Optional[BatchConfig] = None,
        ledger: Optional[ProcessedLedger] = None,
    ):
        self.pipeline = pipeline
        self.writer = writer
        self.config = config if config is not None else BatchConfig()
        self.ledger = ledger
        pattern = self.config.exclude_pattern
        self._exclude = re.compile(pattern) if pattern else None
        self._report_lock = threading.Lock()
        self._aborted = threading.Event()

    def is_excluded(self, image_path: Path) -> bool:
        return self._exclude is not None and self._exclude.search(image_path.name) is not None

    def run(self, image_paths: Iterable[Path]) -> BatchReport:
        """
        Process every image and write its outcome.

        Raises:
            ConfigurationError: If the models or the character map are unusable.
        """
        report = BatchReport()
        begin = time.perf_counter()

        pending: List[Path] = []
        for image_path in image_paths:
            if self.is_excluded(image_path):
                logger.info(f"Skipping excluded image {image_path}")
                report.skipped += 1
            elif self.ledger is not None and image_path in self.ledger:
                logger.debug(f"Skipping already processed image {image_path}")
                report.skipped += 1
            else:
                pending.append(image_path)

        self.writer.ensure_summary()
        self._aborted.clear()

        if self.config.max_workers > 1 and len(pending) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                # list() re-raises the first ConfigurationError from a worker;
                # workers already running see _aborted and write nothing
                list(executor.map(lambda p: self._process_one(p, report), pending))
        else:
            for image_path in pending:
                self._process_one(image_path, report)

        report.elapsed_ms = (time.perf_counter() - begin) * 1000
        logger.info(
            f"Time consumed for evaluate {len(pending)} images: {report.elapsed_ms:.1f} ms"
        )
        logger.info(
            f"Processed {report.processed}, failed {report.failed}, skipped {report.skipped} "
            f"({', '.join(f'{s.value}={report.count(s)}' for s in ImageStatus)})"
        )
        return report

    def _process_one(self, image_path: Path, report: BatchReport) -> None:
        if self._aborted.is_set():
            return
        logger.info("*****************************************")
        begin = time.perf_counter()
        try:
            outcome = self.pipeline.process(image_path)
            if self._aborted.is_set():
                logger.debug(f"Batch aborted, dropping outcome of {image_path}")
                return
            self.writer.write(outcome)
        except ConfigurationError:
            self._aborted.set()
            raise
        except PER_IMAGE_ERRORS as e:
            logger.error(f"Failed to process {image_path}: {e}")
            with self._report_lock:
                report.failures.append((image_path, str(e)))
            return

        if self.ledger is not None:
            self.ledger.record(image_path)
        with self._report_lock:
            report.status_counts[outcome.status] += 1

        elapsed_ms = (time.perf_counter() - begin) * 1000
        logger.info(f"Time consumed for {image_path.name}: {elapsed_ms:.1f} ms")
        logger.info("*****************************************")

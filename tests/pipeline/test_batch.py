"""
Tests for the batch driver.

Covers:
    - Input collection
    - Exclusion pattern and processed-image ledger
    - Per-image failure isolation
    - Fatal configuration errors
    - Parallel processing
"""

import time
from pathlib import Path
from unittest.mock import Mock

import pytest

from plate_inspector.blur.types import ImageStatus
from plate_inspector.exceptions import (
    ConfigurationError,
    DetectorInvocationError,
    DetectorTimeoutError,
    FilenameParseError,
    ImageReadError,
)
from plate_inspector.pipeline.batch import BatchDriver, BatchReport, ProcessedLedger, collect_images
from plate_inspector.pipeline.config_loader import BatchConfig
from plate_inspector.pipeline.types import ImageIdentity, PipelineOutcome

# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════


def outcome_for(path: Path, status: ImageStatus = ImageStatus.NOT_BLURRY) -> PipelineOutcome:
    return PipelineOutcome(
        identity=ImageIdentity.from_path(path), status=status, plate_id=path.stem
    )


@pytest.fixture
def image_paths():
    return [Path(f"L1/plate-2023010514300{i}.jpg") for i in range(5)]


@pytest.fixture
def pipeline():
    mock = Mock()
    mock.process.side_effect = outcome_for
    return mock


@pytest.fixture
def writer():
    return Mock()


# ═══════════════════════════════════════════════════════════════════════════
# INPUT COLLECTION
# ═══════════════════════════════════════════════════════════════════════════


class TestCollectImages:
    def test_recursive_and_sorted(self, tmp_path):
        for relative in ["L2/b-20230101000000.jpg", "L1/a-20230101000000.jpg", "L1/notes.txt"]:
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"")

        images = collect_images(tmp_path)

        assert images == [
            tmp_path / "L1" / "a-20230101000000.jpg",
            tmp_path / "L2" / "b-20230101000000.jpg",
        ]

    def test_multiple_patterns_without_duplicates(self, tmp_path):
        (tmp_path / "a.jpg").write_bytes(b"")
        (tmp_path / "b.png").write_bytes(b"")
        assert len(collect_images(tmp_path, ["*.jpg", "*.png", "a.*"])) == 2

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            collect_images(tmp_path / "missing")


# ═══════════════════════════════════════════════════════════════════════════
# SKIPPING
# ═══════════════════════════════════════════════════════════════════════════


class TestSkipping:
    """Exclusion pattern and ledger."""

    def test_excluded_file_names(self, pipeline, writer):
        paths = [Path("L1/plate-20230105143000.jpg"), Path("L1/test12345-20230105143000.jpg")]

        report = BatchDriver(pipeline, writer).run(paths)

        pipeline.process.assert_called_once_with(paths[0])
        assert report.skipped == 1
        assert report.processed == 1

    def test_exclusion_only_looks_at_file_name(self, pipeline, writer):
        path = Path("12345/plate-20230105143000.jpg")
        report = BatchDriver(pipeline, writer).run([path])
        assert report.skipped == 0

    def test_empty_pattern_disables_exclusion(self, pipeline, writer):
        config = BatchConfig(exclude_pattern="")
        report = BatchDriver(pipeline, writer, config).run([Path("L1/x12345-20230105143000.jpg")])
        assert report.processed == 1

    def test_ledger_skips_and_records(self, tmp_path, pipeline, writer, image_paths):
        ledger_path = tmp_path / "ledger.txt"
        ledger_path.write_text(f"{image_paths[0]}\n{image_paths[1]}\n")
        ledger = ProcessedLedger(ledger_path)

        report = BatchDriver(pipeline, writer, ledger=ledger).run(image_paths)

        assert report.skipped == 2
        assert pipeline.process.call_count == 3
        reloaded = ProcessedLedger(ledger_path)
        assert len(reloaded) == 5
        assert all(path in reloaded for path in image_paths)

    def test_failed_images_are_not_recorded(self, tmp_path, pipeline, writer, image_paths):
        pipeline.process.side_effect = ImageReadError("unreadable")
        ledger = ProcessedLedger(tmp_path / "ledger.txt")

        BatchDriver(pipeline, writer, ledger=ledger).run(image_paths[:1])

        assert image_paths[0] not in ledger
        assert not (tmp_path / "ledger.txt").exists()


# ═══════════════════════════════════════════════════════════════════════════
# FAILURES
# ═══════════════════════════════════════════════════════════════════════════


class TestFailures:
    """Per-image failures are isolated, configuration errors are not."""

    @pytest.mark.parametrize(
        "error",
        [
            ImageReadError("Failed to read image"),
            FilenameParseError("no timestamp"),
            DetectorInvocationError("region_detector", "inference failed"),
            DetectorTimeoutError("blur_classifier", "model busy"),
            OSError("disk full"),
        ],
    )
    def test_failure_is_isolated(self, pipeline, writer, image_paths, error):
        def process(path):
            if path == image_paths[2]:
                raise error
            return outcome_for(path)

        pipeline.process.side_effect = process

        report = BatchDriver(pipeline, writer).run(image_paths)

        assert report.processed == 4
        assert report.failed == 1
        assert report.failures[0] == (image_paths[2], str(error))
        assert not report.succeeded
        assert writer.write.call_count == 4

    def test_writer_failure_counts_as_image_failure(self, pipeline, writer, image_paths):
        writer.write.side_effect = OSError("Failed to write image")
        report = BatchDriver(pipeline, writer).run(image_paths[:2])
        assert report.failed == 2

    def test_configuration_error_aborts(self, pipeline, writer, image_paths):
        pipeline.process.side_effect = ConfigurationError("Character class 42 is not in the character map")

        with pytest.raises(ConfigurationError):
            BatchDriver(pipeline, writer).run(image_paths)
        assert pipeline.process.call_count == 1

    def test_configuration_error_aborts_parallel_batch(self, pipeline, writer, image_paths):
        pipeline.process.side_effect = ConfigurationError("bad class table")
        with pytest.raises(ConfigurationError):
            BatchDriver(pipeline, writer, BatchConfig(max_workers=3)).run(image_paths)

    def test_configuration_error_stops_in_flight_writes(self, pipeline, writer):
        paths = [Path(f"L1/plate-202301051430{i:02d}.jpg") for i in range(10)]

        def process(path):
            if path == paths[0]:
                raise ConfigurationError("bad class table")
            time.sleep(0.05)
            return outcome_for(path)

        pipeline.process.side_effect = process

        with pytest.raises(ConfigurationError):
            BatchDriver(pipeline, writer, BatchConfig(max_workers=2)).run(paths)
        writer.write.assert_not_called()

    def test_driver_is_reusable_after_abort(self, pipeline, writer, image_paths):
        driver = BatchDriver(pipeline, writer)
        pipeline.process.side_effect = ConfigurationError("bad class table")
        with pytest.raises(ConfigurationError):
            driver.run(image_paths)

        pipeline.process.side_effect = outcome_for
        assert driver.run(image_paths).processed == 5


# ═══════════════════════════════════════════════════════════════════════════
# REPORT
# ═══════════════════════════════════════════════════════════════════════════


class TestReport:
    def test_counts_per_status(self, pipeline, writer, image_paths):
        statuses = iter(
            [ImageStatus.EMPTY, ImageStatus.BLURRY, ImageStatus.BLURRY, ImageStatus.NOT_BLURRY, ImageStatus.EMPTY]
        )
        pipeline.process.side_effect = lambda path: outcome_for(path, next(statuses))

        report = BatchDriver(pipeline, writer).run(image_paths)

        assert report.count(ImageStatus.EMPTY) == 2
        assert report.count(ImageStatus.BLURRY) == 2
        assert report.count(ImageStatus.NOT_BLURRY) == 1
        assert report.succeeded
        assert report.elapsed_ms >= 0.0

    def test_summary_header_created_before_processing(self, pipeline, writer):
        BatchDriver(pipeline, writer).run([])
        writer.ensure_summary.assert_called_once()

    def test_parallel_processing(self, pipeline, writer):
        paths = [Path(f"L2/plate-202301051430{i:02d}.jpg") for i in range(12)]

        report = BatchDriver(pipeline, writer, BatchConfig(max_workers=4)).run(paths)

        assert report.processed == 12
        assert sorted(c[0][0] for c in pipeline.process.call_args_list) == paths

    def test_empty_report(self):
        report = BatchReport()
        assert report.processed == 0
        assert report.succeeded

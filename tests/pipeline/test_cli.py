"""
Tests for the plate-inspect command line entry point.

Model loading is replaced by stub handles; everything else (config,
output folders, summary CSV) runs for real under tmp_path.
"""

from unittest.mock import patch

import pytest

from plate_inspector.common.types import DetectionBox, DetectionResult
from plate_inspector.pipeline import cli
from plate_inspector.pipeline.resources import DetectorHandles

PLATE_BODY = DetectionBox(x=10, y=10, w=100, h=80, confidence=0.9, class_id=0)


@pytest.fixture
def stub_handles(stub_detector_class, stub_blur_class):
    def _make(region_results=(), blur_confidences=(0.9,), load_ok=True):
        return DetectorHandles(
            stub_detector_class(region_results, load_ok=load_ok),
            stub_detector_class(),
            stub_blur_class(blur_confidences),
        )

    return _make


@pytest.fixture
def input_dir(tmp_path, write_plate_image):
    root = tmp_path / "input"
    write_plate_image(name="plate-20230105143000.jpg", line="L1", root=root)
    write_plate_image(name="plate-20230105143100.jpg", line="L2", root=root)
    return root


class TestCli:
    """Exit codes and produced files."""

    def test_success(self, tmp_path, input_dir, stub_handles):
        handles = stub_handles([DetectionResult(boxes=[PLATE_BODY])])
        output = tmp_path / "output"

        with patch.object(DetectorHandles, "from_config", return_value=handles):
            code = cli.main([str(input_dir), str(output)])

        assert code == cli.EXIT_OK
        assert sorted(p.name for p in (output / "blurry").iterdir()) == [
            "plate-20230105143000.jpg",
            "plate-20230105143100.jpg",
        ]
        lines = (output / "summary.csv").read_text().splitlines()
        assert lines[0] == "ID,Line,Date,Status"
        assert len(lines) == 3
        assert handles.region.resource.disposed

    def test_explicit_summary_path_and_no_clean(self, tmp_path, input_dir, stub_handles):
        output = tmp_path / "output"
        (output / "notBlurry").mkdir(parents=True)
        (output / "notBlurry" / "keep.jpg").write_bytes(b"x")
        summary = tmp_path / "reports" / "summary.csv"

        with patch.object(DetectorHandles, "from_config", return_value=stub_handles()):
            code = cli.main([str(input_dir), str(output), str(summary), "--no-clean"])

        assert code == cli.EXIT_OK
        assert (output / "notBlurry" / "keep.jpg").exists()
        assert len(list((output / "empty").iterdir())) == 2
        assert summary.read_text().splitlines() == ["ID,Line,Date,Status"]

    def test_image_failure(self, tmp_path, input_dir, stub_handles):
        (input_dir / "L1" / "plate-20230105143200.jpg").write_bytes(b"broken")

        with patch.object(DetectorHandles, "from_config", return_value=stub_handles()):
            code = cli.main([str(input_dir), str(tmp_path / "output")])

        assert code == cli.EXIT_IMAGE_FAILURES

    def test_ledger_resumes(self, tmp_path, input_dir, stub_handles):
        ledger = tmp_path / "ledger.txt"
        output = tmp_path / "output"

        with patch.object(DetectorHandles, "from_config", return_value=stub_handles()):
            assert cli.main([str(input_dir), str(output), "--ledger", str(ledger)]) == cli.EXIT_OK
        assert len(ledger.read_text().splitlines()) == 2

        handles = stub_handles()
        with patch.object(DetectorHandles, "from_config", return_value=handles):
            assert cli.main([str(input_dir), str(output), "--ledger", str(ledger)]) == cli.EXIT_OK
        assert handles.region.resource.calls == []

    def test_model_load_failure(self, tmp_path, input_dir, stub_handles):
        with patch.object(DetectorHandles, "from_config", return_value=stub_handles(load_ok=False)):
            code = cli.main([str(input_dir), str(tmp_path / "output")])
        assert code == cli.EXIT_CONFIGURATION

    def test_missing_config_file(self, tmp_path, input_dir):
        code = cli.main(
            [str(input_dir), str(tmp_path / "output"), "--config", str(tmp_path / "nope.yaml")]
        )
        assert code == cli.EXIT_CONFIGURATION

    def test_invalid_config_file(self, tmp_path, input_dir):
        config_path = tmp_path / "pipeline.yaml"
        config_path.write_text("batch:\n  max_workers: 0\n")
        code = cli.main([str(input_dir), str(tmp_path / "output"), "--config", str(config_path)])
        assert code == cli.EXIT_CONFIGURATION

    def test_missing_input_dir(self, tmp_path):
        code = cli.main([str(tmp_path / "missing"), str(tmp_path / "output")])
        assert code == cli.EXIT_CONFIGURATION

    def test_invalid_worker_count(self, tmp_path, input_dir):
        code = cli.main([str(input_dir), str(tmp_path / "output"), "--workers", "0"])
        assert code == cli.EXIT_CONFIGURATION

    def test_parallel_workers(self, tmp_path, input_dir, stub_handles):
        with patch.object(DetectorHandles, "from_config", return_value=stub_handles()):
            code = cli.main([str(input_dir), str(tmp_path / "output"), "--workers", "2"])
        assert code == cli.EXIT_OK

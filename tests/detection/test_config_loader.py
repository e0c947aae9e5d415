"""
Tests for the detector configuration loader.
"""

import pytest
import yaml
from pydantic import ValidationError

from plate_inspector.detection.config_loader import (
    DetectionModuleConfig,
    InferenceConfig,
    load_config,
)


class TestDetectionConfigDefaults:
    def test_defaults(self):
        config = DetectionModuleConfig()
        assert config.inference.conf_threshold == 0.25
        assert config.inference.iou_threshold == 0.45
        assert config.inference.image_size == 640
        assert config.inference.device == "auto"
        assert config.model.num_classes == 2

    @pytest.mark.parametrize(
        "field, value",
        [("conf_threshold", 1.5), ("iou_threshold", -0.1), ("image_size", 0), ("device", "tpu")],
    )
    def test_invalid_inference_values(self, field, value):
        with pytest.raises(ValidationError):
            InferenceConfig(**{field: value})


class TestLoadConfig:
    def test_load_yaml(self, tmp_path):
        config_path = tmp_path / "character_detector.yaml"
        config_path.write_text(
            yaml.safe_dump(
                {
                    "model": {"path": "weights/id/best.pt", "num_classes": 23},
                    "inference": {"conf_threshold": 0.3, "device": "cpu"},
                }
            )
        )

        config = load_config(config_path)

        assert config.model.path == "weights/id/best.pt"
        assert config.model.num_classes == 23
        assert config.inference.conf_threshold == 0.3
        assert config.inference.iou_threshold == 0.45

    def test_empty_file_uses_defaults(self, tmp_path):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        assert load_config(config_path) == DetectionModuleConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_value(self, tmp_path):
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("model:\n  num_classes: 0\n")
        with pytest.raises(ValidationError):
            load_config(config_path)

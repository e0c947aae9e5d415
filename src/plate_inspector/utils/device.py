"""
Model loading helpers shared by the detector and classifier adapters.
"""

import logging
from pathlib import Path
from typing import Union

from plate_inspector.utils.constants import PROJECT_ROOT

logger = logging.getLogger(__name__)


def resolve_device(device: str) -> str:
    """
    Resolve the inference device.

    "auto" becomes "cuda" when PyTorch sees a GPU and "cpu" otherwise.
    Any other value is returned unchanged.
    """
    if device != "auto":
        return device

    try:
        import torch

        if torch.cuda.is_available():
            return "cuda"
        logger.debug("CUDA not available, using CPU")
    except ImportError:
        logger.debug("PyTorch not available, using CPU")
    return "cpu"


def resolve_model_path(path: Union[str, Path]) -> Path:
    """Resolve a model path; relative paths are taken from the project root."""
    model_path = Path(path)
    if model_path.is_absolute():
        return model_path
    return PROJECT_ROOT / model_path

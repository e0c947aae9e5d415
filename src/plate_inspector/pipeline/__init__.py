"""
Inspection Pipeline

Per-image orchestration of the region detector, blur classifier and
character detector, plus the batch driver, writers and CLI around it.

Example:
    >>> from plate_inspector.pipeline import DetectorHandles, InspectionPipeline
    >>> from plate_inspector.pipeline import get_default_config
    >>> config = get_default_config()
    >>> with DetectorHandles.from_config(config) as handles:
    ...     outcome = InspectionPipeline(handles, config).process(image_path)
"""

from plate_inspector.pipeline.batch import BatchDriver, BatchReport, ProcessedLedger, collect_images
from plate_inspector.pipeline.config_loader import (
    AnnotationConfig,
    BatchConfig,
    PipelineConfig,
    PlateIdConfig,
    SummaryConfig,
    ThresholdsConfig,
    get_default_config,
    load_config,
)
from plate_inspector.pipeline.orchestrator import InspectionPipeline
from plate_inspector.pipeline.resources import DetectorHandles, SingleFlight
from plate_inspector.pipeline.types import ImageIdentity, PipelineOutcome
from plate_inspector.pipeline.writer import OutcomeWriter, UnrecognizedIdWriter, prepare_output_dirs

__all__ = [
    "InspectionPipeline",
    "DetectorHandles",
    "SingleFlight",
    "BatchDriver",
    "BatchReport",
    "ProcessedLedger",
    "collect_images",
    "OutcomeWriter",
    "UnrecognizedIdWriter",
    "prepare_output_dirs",
    "ImageIdentity",
    "PipelineOutcome",
    "PipelineConfig",
    "ThresholdsConfig",
    "PlateIdConfig",
    "AnnotationConfig",
    "SummaryConfig",
    "BatchConfig",
    "load_config",
    "get_default_config",
]

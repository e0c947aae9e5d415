"""
Per-image inspection pipeline.

Sequences the three models for one image:

    Start           load + orient the frame, detect regions
      |
      +-- no region ---------------------------> EMPTY (raw frame kept)
      |
    PerRegionLoop   in detector order
      |   plate body (class 0): crop -> blur classifier -> running status,
      |                         annotate once a blurry region was seen
      |   ID plate (class != 0): crop -> reorient -> character detector
      |                          -> two-line decode -> length check
      v
    Done            status, plate ID, annotated frame -> PipelineOutcome

A failing model call raises DetectorInvocationError and aborts the image;
there are no retries and no fallback status.

Example:
    >>> with DetectorHandles.from_config(config) as handles:
    ...     pipeline = InspectionPipeline(handles, config)
    ...     outcome = pipeline.process(Path("L3/plate-20230105143000.jpg"))
    ...     print(outcome.status, outcome.plate_id)
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np

from plate_inspector.blur.status import BlurStatusTracker
from plate_inspector.blur.types import ImageStatus
from plate_inspector.common.types import DetectionBox
from plate_inspector.ocr.decoder import TwoLineDecoder, is_complete_plate_id
from plate_inspector.pipeline.config_loader import PipelineConfig, get_default_config
from plate_inspector.pipeline.resources import DetectorHandles
from plate_inspector.pipeline.types import ImageIdentity, PipelineOutcome
from plate_inspector.pipeline.writer import UnrecognizedIdWriter
from plate_inspector.utils.constants import PLATE_BODY_CLASS_ID
from plate_inspector.utils.image_ops import crop_region, orient_frame, orient_id_plate
from plate_inspector.utils.io import read_image
from plate_inspector.utils.visualization import draw_blur_verdict

logger = logging.getLogger(__name__)


class InspectionPipeline:
    """
    Inspects one image at a time with injected model handles.

    All per-image state (running status, annotation canvas, decoded IDs) lives
    inside ``process``; one instance can serve several worker threads.

    Attributes:
        handles: Model handles, each behind its own lock.
        config: Pipeline configuration.
        decoder: Two-line plate ID decoder.
        unrecognized_writer: Receives ID plate crops with an incomplete ID.
    """

    def __init__(
        self,
        handles: DetectorHandles,
        config: Optional[PipelineConfig] = None,
        unrecognized_writer: Optional[UnrecognizedIdWriter] = None,
        decoder: Optional[TwoLineDecoder] = None,
    ):
        self.handles = handles
        self.config = config if config is not None else get_default_config()
        self.unrecognized_writer = unrecognized_writer
        self.decoder = decoder if decoder is not None else TwoLineDecoder()

    def process(self, image_path: Union[str, Path]) -> PipelineOutcome:
        """
        Inspect one image.

        Args:
            image_path: Path of the image, ``<press line>/<prefix>-<timestamp>.jpg``.

        Returns:
            PipelineOutcome for the image.

        Raises:
            FilenameParseError: If the file name has no valid timestamp.
            ImageReadError: If the image cannot be read.
            DetectorInvocationError: If a model call failed.
            ConfigurationError: If the character detector reports an unknown class.
        """
        image_path = Path(image_path)
        logger.info(f"image file name: {image_path}")

        # Start
        identity = ImageIdentity.from_path(image_path)
        frame = orient_frame(read_image(image_path).to_numpy())
        regions = self.handles.detect_regions(frame).above(
            self.config.thresholds.region_confidence
        )
        logger.info(f"start blurry classification with length {len(regions)}")

        # EmptyTerminal
        if not regions:
            logger.info("Empty plate")
            logger.info(f"{identity.name} is checked to be {ImageStatus.EMPTY.value}")
            return PipelineOutcome(
                identity=identity,
                status=ImageStatus.EMPTY,
                plate_id=identity.name,
                image=frame,
            )

        # PerRegionLoop
        tracker = BlurStatusTracker(self.config.blur_classifier.threshold)
        annotate = self.config.annotation.annotate_all
        canvas: Optional[np.ndarray] = frame.copy() if annotate else None
        plate_id: Optional[str] = None
        decoded_ids: List[str] = []

        for box in regions:
            if box.class_id == PLATE_BODY_CLASS_ID:
                confidence, blurry = self._inspect_plate_body(frame, box, tracker)
                annotate = annotate or blurry
                if annotate:
                    if canvas is None:
                        canvas = frame.copy()
                    self._annotate(canvas, box, blurry, confidence)
            else:
                candidate = self._read_id_plate(frame, box, identity)
                decoded_ids.append(candidate)
                if is_complete_plate_id(candidate, self.config.plate_id.length):
                    plate_id = candidate

        # Done
        decision = tracker.decision()
        if plate_id is None:
            plate_id = identity.name
        logger.info(f"{plate_id} is checked to be {decision.status.value}")

        image = canvas
        if image is None and decision.status == ImageStatus.EMPTY:
            image = frame

        return PipelineOutcome(
            identity=identity,
            status=decision.status,
            plate_id=plate_id,
            image=image,
            annotated=canvas is not None,
            region_count=len(regions),
            decoded_ids=tuple(decoded_ids),
            blur_confidences=tuple(tracker.confidences),
            trigger_region=decision.trigger_index,
        )

    def _inspect_plate_body(
        self, frame: np.ndarray, box: DetectionBox, tracker: BlurStatusTracker
    ) -> Tuple[float, bool]:
        logger.info(f"roi detected -> x:{box.x}, y:{box.y}, w:{box.w}, h:{box.h}")
        patch = crop_region(frame, box)
        confidence = self.handles.classify_blur(patch)
        blurry = tracker.observe(confidence)
        return confidence, blurry

    def _read_id_plate(
        self, frame: np.ndarray, box: DetectionBox, identity: ImageIdentity
    ) -> str:
        logger.info(f"id plate detected -> x:{box.x}, y:{box.y}")
        patch = orient_id_plate(crop_region(frame, box))
        candidate = self.decoder.decode(self.handles.detect_characters(patch))

        if not is_complete_plate_id(candidate, self.config.plate_id.length):
            logger.warning(
                f"Decoded ID '{candidate}' from {identity.path.name} has "
                f"{len(candidate)} characters, expected {self.config.plate_id.length}"
            )
            if self.unrecognized_writer is not None:
                self.unrecognized_writer.write(patch, candidate)
        return candidate

    def _annotate(
        self, canvas: np.ndarray, box: DetectionBox, blurry: bool, confidence: float
    ) -> None:
        settings = self.config.annotation
        draw_blur_verdict(
            canvas,
            box,
            blurry,
            confidence,
            color=settings.color,
            thickness=settings.thickness,
            font_scale=settings.font_scale,
            text_thickness=settings.text_thickness,
            text_offset=settings.text_offset,
        )


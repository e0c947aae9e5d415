"""
Command line entry point.

Usage:
    plate-inspect INPUT_DIR OUTPUT_DIR [SUMMARY_CSV] [--config PATH]
                  [--workers N] [--ledger PATH] [--device DEVICE] [--no-clean]
                  [--log-level LEVEL]

Exit codes:
    0  every image was processed
    1  at least one image failed
    2  configuration or models unusable
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from plate_inspector.exceptions import ConfigurationError
from plate_inspector.pipeline.batch import BatchDriver, ProcessedLedger, collect_images
from plate_inspector.pipeline.config_loader import get_default_config, load_config
from plate_inspector.pipeline.orchestrator import InspectionPipeline
from plate_inspector.pipeline.resources import DetectorHandles
from plate_inspector.pipeline.writer import (
    OutcomeWriter,
    UnrecognizedIdWriter,
    prepare_output_dirs,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IMAGE_FAILURES = 1
EXIT_CONFIGURATION = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plate-inspect",
        description="Inspect stamped plate images for blur and read their IDs",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "input_dir", type=Path, help="Folder of <line>/<prefix>-<timestamp>.jpg images"
    )
    parser.add_argument("output_dir", type=Path, help="Output folder (one sub-folder per status)")
    parser.add_argument(
        "summary_csv",
        type=Path,
        nargs="?",
        default=None,
        help="Summary CSV (default: OUTPUT_DIR/summary.csv)",
    )
    parser.add_argument("--config", type=Path, default=None, help="Pipeline YAML configuration")
    parser.add_argument("--workers", type=int, default=None, help="Images processed in parallel")
    parser.add_argument(
        "--ledger", type=Path, default=None, help="Processed-image ledger for resuming"
    )
    parser.add_argument(
        "--device",
        type=str,
        default=None,
        choices=["cpu", "cuda", "mps"],
        help="Override the device of every model",
    )
    parser.add_argument(
        "--no-clean",
        action="store_true",
        help="Keep previous content of OUTPUT_DIR",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else get_default_config()
    except (FileNotFoundError, yaml.YAMLError, ValidationError) as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIGURATION

    if args.workers is not None:
        if args.workers < 1:
            logger.error(f"--workers must be at least 1, got {args.workers}")
            return EXIT_CONFIGURATION
        config.batch.max_workers = args.workers

    try:
        images = collect_images(args.input_dir, config.batch.image_patterns)
    except FileNotFoundError as e:
        logger.error(str(e))
        return EXIT_CONFIGURATION
    logger.info(f"Found {len(images)} images in {args.input_dir}")

    prepare_output_dirs(args.output_dir, clean=not args.no_clean)
    summary_csv = args.summary_csv or args.output_dir / "summary.csv"
    writer = OutcomeWriter(args.output_dir, summary_csv, config.summary)
    unrecognized_writer = UnrecognizedIdWriter(args.output_dir / config.plate_id.unrecognized_dir)
    ledger = ProcessedLedger(args.ledger) if args.ledger else None

    handles = DetectorHandles.from_config(config)
    try:
        handles.load(device=args.device)
        pipeline = InspectionPipeline(handles, config, unrecognized_writer)
        report = BatchDriver(pipeline, writer, config.batch, ledger).run(images)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIGURATION
    finally:
        handles.dispose()

    if not report.succeeded:
        for image_path, message in report.failures:
            logger.error(f"  {image_path}: {message}")
        return EXIT_IMAGE_FAILURES
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())

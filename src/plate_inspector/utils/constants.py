"""
Shared Constants for the Plate Inspection Pipeline

This module contains constants used across multiple modules to ensure
consistency and avoid duplication.
"""

from pathlib import Path

# ============================================================================
# Paths
# ============================================================================
# Relative model and output paths in config files resolve against this root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

# ============================================================================
# Region Detector Classes
# ============================================================================
# Class 0 is the plate body; every other class is an ID plate
PLATE_BODY_CLASS_ID = 0

# ============================================================================
# Summary CSV
# ============================================================================
SUMMARY_COLUMNS = ("ID", "Line", "Date", "Status")

# Capture timestamp embedded in image names: <prefix>-<yyyyMMddHHmmss>.jpg
FILENAME_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

"""
Shared Utilities

Common functions used across all modules.
"""

from plate_inspector.utils.image_ops import crop_region, orient_frame, orient_id_plate

__all__ = [
    "crop_region",
    "orient_frame",
    "orient_id_plate",
]

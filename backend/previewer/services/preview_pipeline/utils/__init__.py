"""
Preview Pipeline Utilities
"""

from .constants import (
    ANIMATED_IMAGE_FORMATS,
    ANIMATION_OUTPUT_FORMATS,
    JPEG_COMPATIBLE_MODES,
    LOSSY_IMAGE_FORMATS,
    SOURCE_READ_CHUNK_SIZE,
)
from .preview_utils import (
    calculate_center_crop_box,
    calculate_resize_dimensions,
    calculate_target_dimensions,
    is_animated_format,
    is_lossy_format,
    make_orig_id,
    make_variant_filename,
)
from .variant_planner import RAW_SOURCE_KEY, VariantPlanner

__all__ = [
    # Constants
    "ANIMATED_IMAGE_FORMATS",
    "ANIMATION_OUTPUT_FORMATS",
    "JPEG_COMPATIBLE_MODES",
    "LOSSY_IMAGE_FORMATS",
    "SOURCE_READ_CHUNK_SIZE",
    # Geometry and naming
    "calculate_target_dimensions",
    "calculate_resize_dimensions",
    "calculate_center_crop_box",
    "is_animated_format",
    "is_lossy_format",
    "make_orig_id",
    "make_variant_filename",
    # Planner
    "VariantPlanner",
    "RAW_SOURCE_KEY",
]

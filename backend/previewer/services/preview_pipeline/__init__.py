"""
Preview Pipeline Module

Derives a configurable set of variants (thumbnails, cropped previews, format
conversions) from one source image and persists them to an asset store.
"""

from .generators import PreviewGenerator, SourceLoader, probe_image
from .preview_pipeline import (
    PreviewPipeline,
    create_preview_pipeline,
    derive_previews,
    parse_options,
)
from .services import AssetPersister
from .utils import (
    RAW_SOURCE_KEY,
    VariantPlanner,
    calculate_center_crop_box,
    calculate_resize_dimensions,
    calculate_target_dimensions,
    make_orig_id,
    make_variant_filename,
)

__all__ = [
    # Main pipeline
    "PreviewPipeline",
    "create_preview_pipeline",
    "derive_previews",
    "parse_options",
    # Components
    "SourceLoader",
    "PreviewGenerator",
    "AssetPersister",
    "VariantPlanner",
    # Utils
    "probe_image",
    "calculate_target_dimensions",
    "calculate_resize_dimensions",
    "calculate_center_crop_box",
    "make_orig_id",
    "make_variant_filename",
    "RAW_SOURCE_KEY",
]

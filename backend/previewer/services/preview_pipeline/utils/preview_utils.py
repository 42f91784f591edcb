# backend/previewer/services/preview_pipeline/utils/preview_utils.py
"""
Preview Utility Functions

Pure geometry and naming helpers used by the preview generator and the
asset persister.
"""

from typing import Optional, Tuple

from ....constants import (
    ASSET_FILENAME_SEPARATOR,
    ASSET_ID_SUFFIX,
    ASSET_ID_TIMESTAMP_HEX_DIGITS,
)
from ....models import VariantSpec
from ....utils.format_helpers import normalize_format
from .constants import ANIMATED_IMAGE_FORMATS, LOSSY_IMAGE_FORMATS


def calculate_target_dimensions(
    base_width: int, base_height: int, spec: VariantSpec
) -> Tuple[int, int]:
    """
    Calculate the final (width, height) of a variant.

    - height only: scale to fit height, width proportional and capped by max_width
    - width only: scale to fit width, height proportional and capped by max_height
    - both: exactly (width, height)
    - neither: the base dimensions

    Args:
        base_width: Width of the base image
        base_height: Height of the base image
        spec: Variant spec

    Returns:
        (width, height) of the variant
    """
    if spec.height and not spec.width:
        scaled_height = spec.height
        proportional_width = base_width * scaled_height // base_height
        if spec.max_width and spec.max_width < proportional_width:
            scaled_width = spec.max_width
        else:
            scaled_width = proportional_width

    elif spec.width and not spec.height:
        scaled_width = spec.width
        proportional_height = base_height * scaled_width // base_width
        if spec.max_height and spec.max_height < proportional_height:
            scaled_height = spec.max_height
        else:
            scaled_height = proportional_height

    elif spec.width and spec.height:
        scaled_width = spec.width
        scaled_height = spec.height

    else:
        return (base_width, base_height)

    return (max(1, scaled_width), max(1, scaled_height))


def calculate_resize_dimensions(
    width: int, height: int, target_height: int
) -> Optional[Tuple[int, int]]:
    """
    Dimensions after scaling an image down to target_height.

    Returns:
        New (width, height), or None when the image is not taller than
        target_height (images are never upscaled)
    """
    if height <= target_height:
        return None

    new_width = max(1, round(width * target_height / height))
    return (new_width, target_height)


def calculate_center_crop_box(
    width: int,
    height: int,
    target_width: int,
    target_height: int,
    clip: bool = False,
) -> Tuple[int, int, int, int]:
    """
    Crop box of target size centered on the image.

    Margins are symmetric. When the target is larger than the image on an
    axis, the box extends past the edges on both sides, or with clip=True
    stops at the image edges.

    Returns:
        (left, upper, right, lower) box
    """
    if clip:
        target_width = min(target_width, width)
        target_height = min(target_height, height)

    left = (width - target_width) // 2
    upper = (height - target_height) // 2
    return (left, upper, left + target_width, upper + target_height)


def is_animated_format(image_format: Optional[str]) -> bool:
    return normalize_format(image_format) in ANIMATED_IMAGE_FORMATS


def is_lossy_format(image_format: Optional[str]) -> bool:
    return normalize_format(image_format) in LOSSY_IMAGE_FORMATS


def make_orig_id(timestamp: int) -> str:
    """
    Derive the orig asset identifier from a UNIX timestamp.

    ObjectId layout: 8 hex digits of seconds, then a zeroed remainder, so the
    same timestamp always maps to the same identifier.

    Args:
        timestamp: UNIX seconds

    Returns:
        24 character lower-case hex identifier
    """
    if timestamp < 0 or timestamp >= 16**ASSET_ID_TIMESTAMP_HEX_DIGITS:
        raise ValueError(f"Timestamp out of range for asset id: {timestamp}")
    return f"{timestamp:0{ASSET_ID_TIMESTAMP_HEX_DIGITS}x}{ASSET_ID_SUFFIX}"


def make_variant_filename(orig_id: str, key: str) -> str:
    """Store filename of a non-orig variant: `<orig_id>_<key>`"""
    return f"{orig_id}{ASSET_FILENAME_SEPARATOR}{key}"

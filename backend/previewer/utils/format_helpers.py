# backend/previewer/utils/format_helpers.py
"""
Image Format Helper Functions

Maps between the lower-case format names used in variant configuration,
Pillow's upper-case format identifiers and MIME content types.
"""

from typing import Optional

from PIL import Image

from ..constants import DEFAULT_CONTENT_TYPE, FORMAT_ALIASES


def normalize_format(value: Optional[str]) -> Optional[str]:
    """
    Convert a format name or file extension to its canonical lower-case name.

    Args:
        value: Format name ("JPG", "jpeg"), extension (".jpg") or None

    Returns:
        Canonical format name ("jpeg"), or None when value is empty
    """
    if not value:
        return None

    name = str(value).strip().lower().lstrip(".")
    if not name:
        return None

    if name in FORMAT_ALIASES:
        return FORMAT_ALIASES[name]

    pil_format = Image.registered_extensions().get(f".{name}")
    if pil_format:
        return FORMAT_ALIASES.get(pil_format.lower(), pil_format.lower())

    return name


def pil_format_name(image_format: str) -> str:
    """Pillow save() identifier for a canonical format name."""
    return normalize_format(image_format).upper()


def content_type_for(image_format: Optional[str]) -> str:
    """
    Resolve the MIME content type for a format using Pillow's registry.

    Args:
        image_format: Canonical or alias format name

    Returns:
        MIME type such as "image/jpeg", or a generic binary type if unknown
    """
    normalized = normalize_format(image_format)
    if not normalized:
        return DEFAULT_CONTENT_TYPE

    Image.init()
    return Image.MIME.get(normalized.upper(), DEFAULT_CONTENT_TYPE)


def extension_for(image_format: Optional[str]) -> str:
    """File extension (with dot) for a format, used by filesystem stores."""
    normalized = normalize_format(image_format)
    if not normalized:
        return ".bin"

    pil_format = normalized.upper()
    registered_extensions = Image.registered_extensions()
    if registered_extensions.get(f".{normalized}") == pil_format:
        return f".{normalized}"

    for extension, registered in registered_extensions.items():
        if registered == pil_format:
            return extension
    return f".{normalized}"


def format_for_content_type(content_type: Optional[str]) -> Optional[str]:
    """Reverse lookup of a MIME content type to a canonical format name."""
    if not content_type:
        return None

    Image.init()
    for pil_format, mime in Image.MIME.items():
        if mime == content_type:
            return normalize_format(pil_format)
    return None

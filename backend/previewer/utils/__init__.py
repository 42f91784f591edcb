"""
Utility functions for Previewer

Helpers shared between the pipeline, the asset stores and configuration.
"""

from .format_helpers import (
    content_type_for,
    extension_for,
    format_for_content_type,
    normalize_format,
    pil_format_name,
)

__all__ = [
    "normalize_format",
    "pil_format_name",
    "content_type_for",
    "extension_for",
    "format_for_content_type",
]

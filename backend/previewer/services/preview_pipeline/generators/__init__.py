"""
Preview Generation Components

- SourceLoader: buffers a source and probes its header
- PreviewGenerator: derives one variant from a base image
"""

from .preview_generator import PreviewGenerator
from .source_loader import SourceLoader, probe_image

__all__ = [
    "SourceLoader",
    "PreviewGenerator",
    "probe_image",
]

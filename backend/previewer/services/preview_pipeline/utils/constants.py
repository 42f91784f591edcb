# backend/previewer/services/preview_pipeline/utils/constants.py
"""
Preview Pipeline Constants
"""

from ....enums import ImageFormat

# Formats whose sources may carry more than one frame
ANIMATED_IMAGE_FORMATS = ImageFormat.animated_formats()

# Output formats that can store every frame of an animation
ANIMATION_OUTPUT_FORMATS = {ImageFormat.GIF.value, ImageFormat.WEBP.value}

# Lossy photographic formats: quality, auto-orient and sharpening apply
LOSSY_IMAGE_FORMATS = ImageFormat.lossy_formats()

# Modes JPEG can encode directly; anything else is converted to RGB
JPEG_COMPATIBLE_MODES = {"RGB", "L", "CMYK"}

# Chunk size for reading file-like sources
SOURCE_READ_CHUNK_SIZE = 64 * 1024

# Frame timing defaults when an animated source does not specify them
DEFAULT_FRAME_DURATION_MS = 100
DEFAULT_ANIMATION_LOOP = 0

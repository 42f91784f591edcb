# backend/previewer/enums.py
"""
Application Enums - Centralized enum definitions.

Kept separate from constants.py and the models so that both can import
them without creating circular dependencies.
"""

from enum import Enum


# =============================================================================
# IMAGE FORMATS
# =============================================================================


class ImageFormat(str, Enum):
    """Canonical lower-case image format names used for variant types."""

    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"
    BMP = "bmp"
    TIFF = "tiff"

    @classmethod
    def animated_formats(cls):
        return {cls.GIF.value, cls.WEBP.value, cls.PNG.value}

    @classmethod
    def lossy_formats(cls):
        return {cls.JPEG.value}


# =============================================================================
# LOGGING SYSTEM
# =============================================================================


class LogLevel(str, Enum):
    """Log level constants for centralized logging system."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogSource(str, Enum):
    """Log source constants for identifying log origins."""

    SYSTEM = "system"
    PIPELINE = "pipeline"
    STORAGE = "storage"
    CLI = "cli"


class LogEmoji(str, Enum):
    """Type-safe emoji constants for log messages."""

    # Status emojis
    SUCCESS = "✅"
    ERROR = "❌"
    WARNING = "⚠️"
    INFO = "ℹ️"
    DEBUG = "🐞"

    # Work emojis
    PROCESSING = "🔄"
    SKIPPED = "⏭️"

    # Image emojis
    IMAGE = "🖼️"
    CROP = "✂️"

    # Storage emojis
    STORAGE = "💾"

    # System emojis
    STARTUP = "🚀"


class LoggerName(str, Enum):
    """Logger name constants for categorizing log entries."""

    # Pipeline loggers
    PREVIEW_PIPELINE = "preview_pipeline"
    SOURCE_LOADER = "source_loader"
    VARIANT_PLANNER = "variant_planner"
    PREVIEW_GENERATOR = "preview_generator"
    ASSET_PERSISTER = "asset_persister"

    # Storage loggers
    ASSET_STORE = "asset_store"

    # Entry points
    CLI = "cli"

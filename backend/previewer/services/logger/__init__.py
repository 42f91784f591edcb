"""
Centralized Logger Service Module.

Thin, type-safe layer over loguru shared by every pipeline component.
"""

# Re-export commonly used enums for convenience
from ...enums import LogEmoji, LoggerName, LogLevel, LogSource
from .logger_service import configure_logging, get_service_logger

__all__ = [
    "get_service_logger",
    "configure_logging",
    # Enums
    "LogLevel",
    "LogSource",
    "LoggerName",
    "LogEmoji",
]

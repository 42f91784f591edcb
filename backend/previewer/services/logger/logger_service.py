# backend/previewer/services/logger/logger_service.py
"""
Logger Service - loguru-backed service loggers.

Every component logs through a ServiceLogger created by get_service_logger().
Records are bound with the component's logger name and source so sinks can
filter or format on them, and messages get a type-safe emoji prefix.

Usage:
    from previewer.services.logger import get_service_logger
    from previewer.enums import LoggerName, LogSource

    logger = get_service_logger(LoggerName.PREVIEW_PIPELINE, LogSource.PIPELINE)
    logger.info("Derived 4 variants", extra_context={"orig_id": "..."})
"""

import sys
from typing import Any, Dict, Optional

from loguru import logger

from ...enums import LogEmoji, LoggerName, LogLevel, LogSource

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[logger_name]}</cyan> | "
    "{message}"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[source]}:{extra[logger_name]} | {message} | {extra[context]}"
)

# Defaults so records logged through plain `loguru.logger` still format
logger.configure(extra={"logger_name": "-", "source": "-", "context": {}})


def configure_logging(settings=None) -> None:
    """
    Install console (and optional file) sinks for the configured level.

    Args:
        settings: Settings instance; the global settings are used when omitted
    """
    if settings is None:
        from ...config import settings as global_settings

        settings = global_settings

    level = LogLevel(settings.log_level).value

    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=None)

    if settings.log_file:
        logger.add(
            settings.log_file,
            level=level,
            format=FILE_FORMAT,
            rotation="10 MB",
            retention=5,
            enqueue=True,
        )


def get_service_logger(
    logger_name: LoggerName,
    source: LogSource = LogSource.SYSTEM,
    default_emoji: Optional[LogEmoji] = None,
):
    """
    Factory function to create a pre-configured logger for a specific service.

    Emoji priority (highest to lowest): emoji passed to the call, the
    instance-level default_emoji, then the level-based fallback.

    Args:
        logger_name: The logger name enum bound to every record
        source: The log source enum bound to every record
        default_emoji: Instance-level default emoji that overrides level fallbacks

    Returns:
        ServiceLogger instance with error, warning, info, debug methods
    """
    bound = logger.bind(logger_name=logger_name.value, source=source.value)

    def _resolve_emoji(
        method_emoji: Optional[LogEmoji], fallback_emoji: LogEmoji
    ) -> LogEmoji:
        if method_emoji is not None:
            return method_emoji
        if default_emoji is not None:
            return default_emoji
        return fallback_emoji

    def _emit(
        level: str,
        message: str,
        emoji: LogEmoji,
        extra_context: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        # depth=2 attributes the record to the caller of the ServiceLogger method
        bound.bind(context=extra_context or {}).opt(
            depth=2, exception=exception
        ).log(level, f"{emoji.value} {message}")

    class ServiceLogger:
        name = logger_name

        @staticmethod
        def error(
            message: str,
            exception: Optional[BaseException] = None,
            error_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            """Log an error, attaching the exception traceback when given."""
            _emit(
                "ERROR",
                message,
                _resolve_emoji(emoji, LogEmoji.ERROR),
                error_context,
                exception,
            )

        @staticmethod
        def warning(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            _emit(
                "WARNING",
                message,
                _resolve_emoji(emoji, LogEmoji.WARNING),
                extra_context,
            )

        @staticmethod
        def info(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            _emit("INFO", message, _resolve_emoji(emoji, LogEmoji.INFO), extra_context)

        @staticmethod
        def debug(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ):
            _emit(
                "DEBUG", message, _resolve_emoji(emoji, LogEmoji.DEBUG), extra_context
            )

    return ServiceLogger()

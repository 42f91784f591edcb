# backend/previewer/exceptions.py
"""
Custom exceptions for Previewer.

Centralized location for all custom exception classes to avoid
duplicating exception definitions across modules.
"""

from typing import Optional

# Exception design follows semantic clarity - each exception type represents
# a distinct failure stage of a preview run


class PreviewerError(Exception):
    """Base exception for all Previewer-specific errors."""

    pass


class DecodeError(PreviewerError):
    """Source stream is unreadable or its image format is not recognized."""

    pass


class TransformError(PreviewerError):
    """Image engine failure while resizing, cropping or encoding a variant."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class PersistError(PreviewerError):
    """Asset store write failure."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class ConfigurationError(PreviewerError):
    """Custom exception for configuration and validation errors."""

    pass

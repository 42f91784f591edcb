# backend/previewer/services/preview_pipeline/generators/source_loader.py
"""
Source Loader Component

Buffers an image source fully into memory and probes its dimensions and
format from the header. Pillow's Image.open() only parses the header, so the
pixel data is not decoded here; the preview generator decodes it once when a
variant actually needs transforming.
"""

import asyncio
import io
from pathlib import Path
from typing import Any, Optional

from PIL import Image, UnidentifiedImageError

from ....enums import LoggerName, LogSource
from ....exceptions import DecodeError
from ....models import RawImage
from ....utils.format_helpers import normalize_format
from ...logger import get_service_logger
from ..utils.constants import SOURCE_READ_CHUNK_SIZE

logger = get_service_logger(LoggerName.SOURCE_LOADER, LogSource.PIPELINE)


def probe_image(buffer: bytes, default_format: Optional[str] = None) -> RawImage:
    """
    Build a RawImage from bytes using a header-only probe.

    Args:
        buffer: Complete image bytes
        default_format: Format to record when the probe reports none

    Returns:
        RawImage with width, height, length and format

    Raises:
        DecodeError: If the bytes are empty or not a recognized image
    """
    if not buffer:
        raise DecodeError("Image source is empty")

    try:
        with Image.open(io.BytesIO(buffer)) as img:
            width, height = img.size
            image_format = img.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeError(f"Unrecognized image data: {e}") from e

    return RawImage(
        buffer=buffer,
        length=len(buffer),
        width=width,
        height=height,
        format=normalize_format(image_format) or normalize_format(default_format),
    )


class SourceLoader:
    """
    Component responsible for turning an input source into a RawImage.

    Accepted sources:
    - bytes / bytearray / memoryview
    - a filesystem path (str or Path)
    - a binary file object with read()
    - an async iterable of byte chunks
    """

    def __init__(
        self,
        max_source_bytes: Optional[int] = None,
        default_format: Optional[str] = None,
    ):
        """
        Args:
            max_source_bytes: Reject sources larger than this (None: unbounded)
            default_format: Format recorded when the probe reports none
        """
        self.max_source_bytes = max_source_bytes
        self.default_format = default_format

    async def read_image(self, source: Any) -> RawImage:
        """
        Consume the source to completion and probe the buffered image.

        Raises:
            DecodeError: If reading fails, the source is too large, or the
                format cannot be identified
        """
        buffer = await self._read_source(source)
        image = probe_image(buffer, self.default_format)

        logger.debug(
            f"Loaded source image {image.width}x{image.height} "
            f"({image.format}, {image.length} bytes)"
        )
        return image

    async def _read_source(self, source: Any) -> bytes:
        try:
            if isinstance(source, (bytes, bytearray, memoryview)):
                buffer = bytes(source)
            elif isinstance(source, (str, Path)):
                loop = asyncio.get_running_loop()
                buffer = await loop.run_in_executor(None, self._read_path, Path(source))
            elif hasattr(source, "__aiter__"):
                buffer = await self._read_async_chunks(source)
            elif hasattr(source, "read"):
                loop = asyncio.get_running_loop()
                buffer = await loop.run_in_executor(None, self._read_stream, source)
            else:
                raise DecodeError(
                    f"Unsupported image source type: {type(source).__name__}"
                )
        except (DecodeError, asyncio.CancelledError):
            raise
        except Exception as e:
            raise DecodeError(f"Failed to read image source: {e}") from e

        self._check_size(len(buffer))
        return buffer

    def _read_path(self, path: Path) -> bytes:
        with path.open("rb") as f:
            return self._read_stream(f)

    def _read_stream(self, stream) -> bytes:
        chunks = []
        length = 0
        while True:
            chunk = stream.read(SOURCE_READ_CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
            length += len(chunk)
            self._check_size(length)
        return b"".join(chunks)

    async def _read_async_chunks(self, source) -> bytes:
        chunks = []
        length = 0
        async for chunk in source:
            chunks.append(bytes(chunk))
            length += len(chunk)
            self._check_size(length)
        return b"".join(chunks)

    def _check_size(self, length: int) -> None:
        if self.max_source_bytes is not None and length > self.max_source_bytes:
            raise DecodeError(
                f"Image source exceeds {self.max_source_bytes} bytes"
            )

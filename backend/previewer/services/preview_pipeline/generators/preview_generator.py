# backend/previewer/services/preview_pipeline/generators/preview_generator.py
"""
Preview Generator Component

Derives one variant from a base image. Policy, in order:

1. skip-by-size: small bases are passed through untouched
2. output type: spec type, else the base's type
3. frame selection: first frame only when animation is disabled
4. target geometry from width / height / max_width / max_height
5. resize by height, never upscaling
6. early exit when the image already has the target dimensions
7. center crop to the target dimensions (clipped to the image unless both
   width and height are fixed)
8. encode (quality, auto-orient and sharpening for jpeg output)
"""

import io
from typing import List, Tuple

from PIL import Image, ImageFilter, ImageOps, ImageSequence

from ....enums import LogEmoji, LoggerName, LogSource
from ....exceptions import DecodeError, TransformError
from ....models import RawImage, Variant, VariantSpec
from ....utils.format_helpers import normalize_format, pil_format_name
from ...logger import get_service_logger
from ..utils.constants import (
    ANIMATION_OUTPUT_FORMATS,
    DEFAULT_ANIMATION_LOOP,
    DEFAULT_FRAME_DURATION_MS,
    JPEG_COMPATIBLE_MODES,
)
from ..utils.preview_utils import (
    calculate_center_crop_box,
    calculate_resize_dimensions,
    calculate_target_dimensions,
    is_animated_format,
    is_lossy_format,
)
from .source_loader import probe_image

logger = get_service_logger(LoggerName.PREVIEW_GENERATOR, LogSource.PIPELINE)


class PreviewGenerator:
    """
    Component responsible for deriving a single variant from a base image.

    Methods are synchronous and CPU bound; the pipeline runs them on its own
    bounded executor.
    """

    def __init__(
        self,
        unsharp_radius: float = 1.0,
        unsharp_percent: int = 50,
        unsharp_threshold: int = 3,
    ):
        """
        Initialize preview generator.

        Args:
            unsharp_radius: Blur radius of the sharpening mask
            unsharp_percent: Sharpening strength in percent
            unsharp_threshold: Minimum brightness change to sharpen
        """
        self.unsharp_filter = ImageFilter.UnsharpMask(
            radius=unsharp_radius,
            percent=unsharp_percent,
            threshold=unsharp_threshold,
        )

    def create_preview(
        self, image: RawImage, spec: VariantSpec, image_type: str
    ) -> Variant:
        """
        Derive the variant described by spec from a base image.

        Args:
            image: Base image (raw source or a previously derived variant)
            spec: Variant spec
            image_type: Format of the base image

        Returns:
            The derived Variant, or the base itself on passthrough

        Raises:
            TransformError: If the image engine fails to decode or encode
        """
        # Is image size smaller than 'skip_size' - skip resizing
        if spec.skip_size and image.length < spec.skip_size:
            logger.debug(
                f"Variant '{spec.key}': {image.length} bytes below skip_size, passing through",
                emoji=LogEmoji.SKIPPED,
            )
            return Variant(key=spec.key, image=image, type=image_type)

        out_type = spec.type or image_type
        target_size = calculate_target_dimensions(image.width, image.height, spec)

        # Already scaled; a geometry-less spec with a new type still converts
        if image.size == target_size and (spec.has_geometry or out_type == image_type):
            logger.debug(
                f"Variant '{spec.key}': already {target_size[0]}x{target_size[1]}, passing through",
                emoji=LogEmoji.SKIPPED,
            )
            return Variant(key=spec.key, image=image, type=image_type)

        try:
            buffer = self._render(image, spec, image_type, out_type)
            result = probe_image(buffer, out_type)
        except (
            OSError,
            ValueError,
            KeyError,
            EOFError,
            Image.DecompressionBombError,
            DecodeError,
        ) as e:
            raise TransformError(
                f"Failed to derive variant '{spec.key}': {e}", key=spec.key
            ) from e

        logger.debug(
            f"Variant '{spec.key}': {image.width}x{image.height} -> "
            f"{result.width}x{result.height} {out_type} ({result.length} bytes)",
            emoji=LogEmoji.CROP,
        )
        return Variant(key=spec.key, image=result, type=out_type)

    def _render(
        self, image: RawImage, spec: VariantSpec, image_type: str, out_type: str
    ) -> bytes:
        lossy = is_lossy_format(out_type)

        with Image.open(io.BytesIO(image.buffer)) as source:
            frames, durations, loop = self._select_frames(
                source, spec, image_type, out_type
            )

        if lossy:
            frames = [ImageOps.exif_transpose(frame) for frame in frames]

        # Geometry follows the working frame, which auto-orient may have rotated
        width, height = frames[0].size
        target_width, target_height = calculate_target_dimensions(width, height, spec)

        # Don't resize (only crop) image if height smaller than target height
        resized_size = calculate_resize_dimensions(width, height, target_height)
        if resized_size is not None:
            frames = [
                frame.resize(resized_size, Image.Resampling.LANCZOS)
                for frame in frames
            ]

        if frames[0].size != (target_width, target_height):
            # Only a fixed width x height box may pad past the image edges
            box = calculate_center_crop_box(
                frames[0].width,
                frames[0].height,
                target_width,
                target_height,
                clip=not (spec.width and spec.height),
            )
            frames = [frame.crop(box) for frame in frames]

        return self._encode(frames, durations, loop, spec, out_type, lossy)

    def _select_frames(
        self, source: Image.Image, spec: VariantSpec, image_type: str, out_type: str
    ) -> Tuple[List[Image.Image], List[int], int]:
        """
        Copy the frames a variant is built from out of the opened source.

        If animation is not allowed, only the first frame is taken. Animated
        output keeps every frame when the output format can store them.
        """
        keep_animation = (
            is_animated_format(image_type)
            and spec.gif_animation is not False
            and getattr(source, "is_animated", False)
            and normalize_format(out_type) in ANIMATION_OUTPUT_FORMATS
        )
        loop = source.info.get("loop", DEFAULT_ANIMATION_LOOP)

        if not keep_animation:
            source.seek(0)
            return [source.copy()], [], loop

        frames = []
        durations = []
        for frame in ImageSequence.Iterator(source):
            durations.append(frame.info.get("duration", DEFAULT_FRAME_DURATION_MS))
            frames.append(frame.copy())
        return frames, durations, loop

    def _encode(
        self,
        frames: List[Image.Image],
        durations: List[int],
        loop: int,
        spec: VariantSpec,
        out_type: str,
        lossy: bool,
    ) -> bytes:
        save_kwargs = {}

        if lossy:
            # Set quality and sharpening only for jpeg images
            frames = [self._to_jpeg_mode(frame) for frame in frames]
            if spec.jpeg_quality is not None:
                save_kwargs["quality"] = spec.jpeg_quality
            if spec.unsharp:
                frames = [frame.filter(self.unsharp_filter) for frame in frames]
        else:
            frames = [
                frame.convert("RGB") if frame.mode == "CMYK" else frame
                for frame in frames
            ]

        if len(frames) > 1:
            save_kwargs.update(
                save_all=True,
                append_images=frames[1:],
                duration=durations,
                loop=loop,
            )

        output = io.BytesIO()
        frames[0].save(output, format=pil_format_name(out_type), **save_kwargs)
        return output.getvalue()

    @staticmethod
    def _to_jpeg_mode(frame: Image.Image) -> Image.Image:
        # Convert to RGB if necessary (handles RGBA, P, etc.)
        if frame.mode not in JPEG_COMPATIBLE_MODES:
            return frame.convert("RGB")
        return frame

#!/usr/bin/env python3
# backend/tests/conftest.py
"""
Pytest configuration and shared fixtures for Previewer tests.
"""

import io
from typing import List, Optional, Tuple

import pytest
from PIL import Image, ImageDraw

from previewer.config import Settings
from previewer.services.asset_store import MemoryAssetStore


def make_image_bytes(
    size: Tuple[int, int] = (800, 600),
    image_format: str = "JPEG",
    color: str = "red",
    **save_kwargs,
) -> bytes:
    """Encode a test image with a contrasting rectangle in the middle."""
    mode = "RGB" if image_format.upper() in ("JPEG", "BMP") else "RGBA"
    img = Image.new(mode, size, color=color)
    draw = ImageDraw.Draw(img)
    width, height = size
    draw.rectangle(
        [width // 4, height // 4, width * 3 // 4, height * 3 // 4], fill="blue"
    )
    output = io.BytesIO()
    img.save(output, image_format, **save_kwargs)
    return output.getvalue()


def make_noise_bytes(size: Tuple[int, int] = (320, 240), image_format: str = "PNG") -> bytes:
    """Encode a noisy image so lossy settings visibly change the output."""
    img = Image.effect_noise(size, 64).convert("RGB")
    output = io.BytesIO()
    img.save(output, image_format)
    return output.getvalue()


def make_animated_gif_bytes(
    size: Tuple[int, int] = (100, 100),
    colors: Optional[List[str]] = None,
    duration: int = 80,
) -> bytes:
    """Encode a looping GIF with one distinct solid color per frame."""
    colors = colors or ["red", "green", "blue"]
    frames = [Image.new("RGB", size, color=color) for color in colors]
    output = io.BytesIO()
    frames[0].save(
        output,
        "GIF",
        save_all=True,
        append_images=frames[1:],
        duration=duration,
        loop=0,
    )
    return output.getvalue()


def open_image(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


@pytest.fixture
def test_settings():
    """Settings isolated from the environment."""
    return Settings(
        _env_file=None,
        environment="test",
        filter_threads=1,
        persist_concurrency=2,
        max_concurrent_runs=2,
    )


@pytest.fixture
def memory_store():
    """Provide a fresh in-memory asset store."""
    return MemoryAssetStore()


@pytest.fixture
def jpeg_800x600():
    return make_image_bytes((800, 600), "JPEG")


@pytest.fixture
def png_400x300():
    return make_image_bytes((400, 300), "PNG")


@pytest.fixture
def animated_gif():
    return make_animated_gif_bytes()


# Custom pytest markers for organizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line(
        "markers", "integration: marks tests that run the whole pipeline"
    )
    config.addinivalue_line(
        "markers", "pipeline: marks tests for the preview pipeline"
    )


@pytest.fixture
def image_factory():
    """Factory fixture wrapping make_image_bytes."""
    return make_image_bytes


@pytest.fixture
def noise_factory():
    return make_noise_bytes


@pytest.fixture
def gif_factory():
    return make_animated_gif_bytes


@pytest.fixture
def decode():
    """Decode encoded bytes back into a loaded PIL image."""
    return open_image

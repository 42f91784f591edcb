# backend/previewer/__init__.py
"""
Previewer - image preview derivation pipeline.

Derives thumbnails, cropped previews and format conversions from a single
source image and persists them to an asset store.
"""

__version__ = "1.0.0"

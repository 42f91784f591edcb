from .preview_model import (
    AssetDescriptor,
    ImageRecord,
    PersistedAsset,
    PreviewOptions,
    RawImage,
    Variant,
    VariantSpec,
)

__all__ = [
    "RawImage",
    "VariantSpec",
    "Variant",
    "PersistedAsset",
    "ImageRecord",
    "AssetDescriptor",
    "PreviewOptions",
]

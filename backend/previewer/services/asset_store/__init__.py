"""
Asset Store Module

Storage backends the preview pipeline persists variants to.
"""

from .asset_store import (
    AssetStore,
    FileSystemAssetStore,
    MemoryAssetStore,
    StoredAsset,
    resolve_asset_name,
)

__all__ = [
    "AssetStore",
    "MemoryAssetStore",
    "FileSystemAssetStore",
    "StoredAsset",
    "resolve_asset_name",
]

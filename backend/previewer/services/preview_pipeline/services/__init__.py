"""
Preview Pipeline Services
"""

from .asset_persister import AssetPersister

__all__ = [
    "AssetPersister",
]

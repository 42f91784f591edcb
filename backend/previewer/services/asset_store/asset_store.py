# backend/previewer/services/asset_store/asset_store.py
"""
Asset Store Backends

The preview pipeline writes through the AssetStore protocol only. Two
backends ship with the package:

- MemoryAssetStore: keeps assets in a dict (tests, dry runs)
- FileSystemAssetStore: one file per asset under a root directory
"""

import asyncio
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union, runtime_checkable

from ...constants import SAFE_ASSET_NAME_PATTERN
from ...enums import LogEmoji, LoggerName, LogSource
from ...utils.format_helpers import extension_for, format_for_content_type
from ..logger import get_service_logger

logger = get_service_logger(LoggerName.ASSET_STORE, LogSource.STORAGE)

SAFE_ASSET_NAME = re.compile(SAFE_ASSET_NAME_PATTERN)


@runtime_checkable
class AssetStore(Protocol):
    """Durable, content-type aware blob backend"""

    async def put(
        self,
        data: bytes,
        *,
        content_type: str,
        asset_id: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> str:
        """
        Store bytes under an explicit id or a filename.

        Returns:
            Identifier the asset was stored under
        """
        ...


def resolve_asset_name(asset_id: Optional[str], filename: Optional[str]) -> str:
    """
    Pick the name an asset is stored under and validate it.

    Raises:
        ValueError: If neither or both names are given, or the name is unsafe
    """
    if (asset_id is None) == (filename is None):
        raise ValueError("Exactly one of asset_id or filename must be provided")

    name = asset_id if asset_id is not None else filename
    if not SAFE_ASSET_NAME.fullmatch(name) or ".." in name:
        raise ValueError(f"Invalid asset name: {name!r}")
    return name


@dataclass
class StoredAsset:
    name: str
    data: bytes
    content_type: str
    by_filename: bool = False

    @property
    def length(self) -> int:
        return len(self.data)


@dataclass
class MemoryAssetStore:
    """In-process asset store; put() calls are recorded in order"""

    assets: Dict[str, StoredAsset] = field(default_factory=dict)
    calls: List[str] = field(default_factory=list)

    async def put(
        self,
        data: bytes,
        *,
        content_type: str,
        asset_id: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> str:
        name = resolve_asset_name(asset_id, filename)
        self.calls.append(name)
        self.assets[name] = StoredAsset(
            name=name,
            data=bytes(data),
            content_type=content_type,
            by_filename=filename is not None,
        )
        return name

    def get(self, name: str) -> Optional[StoredAsset]:
        return self.assets.get(name)

    def __len__(self) -> int:
        return len(self.assets)


class FileSystemAssetStore:
    """
    Stores each asset as `<root>/<name><extension>`.

    The extension is derived from the content type. Writes go to a temporary
    file first and are renamed into place, so readers never observe partial
    assets.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def path_for(self, name: str, content_type: str) -> Path:
        return self.root / f"{name}{extension_for(format_for_content_type(content_type))}"

    async def put(
        self,
        data: bytes,
        *,
        content_type: str,
        asset_id: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> str:
        name = resolve_asset_name(asset_id, filename)
        path = self.path_for(name, content_type)

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write_file, path, bytes(data))

        logger.debug(
            f"Stored asset {path.name} ({len(data)} bytes)",
            extra_context={"path": str(path), "content_type": content_type},
            emoji=LogEmoji.STORAGE,
        )
        return name

    def _write_file(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f".{path.name}.{os.getpid()}.tmp")
        try:
            with tmp_path.open("wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

#!/usr/bin/env python3
"""
Unit tests for the asset store backends.
"""

import pytest

from previewer.services.asset_store import (
    AssetStore,
    FileSystemAssetStore,
    MemoryAssetStore,
    resolve_asset_name,
)


@pytest.mark.unit
class TestResolveAssetName:
    """Test suite for asset name validation."""

    def test_asset_id(self):
        assert resolve_asset_name("abc123", None) == "abc123"

    def test_filename(self):
        assert resolve_asset_name(None, "abc123_sm") == "abc123_sm"

    @pytest.mark.parametrize("asset_id,filename", [(None, None), ("a", "b")])
    def test_exactly_one_name_required(self, asset_id, filename):
        with pytest.raises(ValueError):
            resolve_asset_name(asset_id, filename)

    @pytest.mark.parametrize("name", ["../etc", "a/b", "", ".hidden", "a..b", "a b"])
    def test_unsafe_names_rejected(self, name):
        with pytest.raises(ValueError):
            resolve_asset_name(name, None)


@pytest.mark.unit
@pytest.mark.asyncio
class TestMemoryAssetStore:
    """Test suite for MemoryAssetStore."""

    async def test_put_records_asset(self, memory_store):
        name = await memory_store.put(b"abc", content_type="image/png", asset_id="id1")

        assert name == "id1"
        assert memory_store.get("id1").data == b"abc"
        assert memory_store.get("id1").content_type == "image/png"
        assert memory_store.calls == ["id1"]

    async def test_put_by_filename(self, memory_store):
        await memory_store.put(b"abc", content_type="image/png", filename="id1_sm")

        assert memory_store.get("id1_sm").by_filename
        assert len(memory_store) == 1

    async def test_implements_protocol(self, memory_store):
        assert isinstance(memory_store, AssetStore)


@pytest.mark.unit
@pytest.mark.asyncio
class TestFileSystemAssetStore:
    """Test suite for FileSystemAssetStore."""

    async def test_writes_file_with_extension(self, tmp_path):
        store = FileSystemAssetStore(tmp_path / "assets")

        name = await store.put(b"jpegdata", content_type="image/jpeg", asset_id="id1")

        path = tmp_path / "assets" / "id1.jpeg"
        assert name == "id1"
        assert path.read_bytes() == b"jpegdata"

    async def test_unknown_content_type_uses_bin(self, tmp_path):
        store = FileSystemAssetStore(tmp_path)

        await store.put(b"x", content_type="application/x-foo", filename="id1_raw")

        assert (tmp_path / "id1_raw.bin").exists()

    async def test_overwrites_existing_asset(self, tmp_path):
        store = FileSystemAssetStore(tmp_path)

        await store.put(b"old", content_type="image/png", asset_id="id1")
        await store.put(b"new", content_type="image/png", asset_id="id1")

        assert (tmp_path / "id1.png").read_bytes() == b"new"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["id1.png"]

    async def test_rejects_unsafe_name(self, tmp_path):
        store = FileSystemAssetStore(tmp_path)

        with pytest.raises(ValueError):
            await store.put(b"x", content_type="image/png", filename="../escape")

    async def test_implements_protocol(self, tmp_path):
        assert isinstance(FileSystemAssetStore(tmp_path), AssetStore)

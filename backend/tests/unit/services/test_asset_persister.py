#!/usr/bin/env python3
"""
Unit tests for AssetPersister.
"""

import asyncio

import pytest

from previewer.exceptions import PersistError
from previewer.models import RawImage, Variant
from previewer.services.asset_store import MemoryAssetStore
from previewer.services.preview_pipeline.services import AssetPersister
from previewer.services.preview_pipeline.utils import make_orig_id

TIMESTAMP = 1262304000


def _variant(key, image_type="jpeg", data=b"data", size=(10, 10)):
    image = RawImage(
        buffer=data, length=len(data), width=size[0], height=size[1], format=image_type
    )
    return Variant(key=key, image=image, type=image_type)


class FailingStore(MemoryAssetStore):
    """Memory store that fails for one name and stalls the others."""

    def __init__(self, fail_name, delay=0.0):
        super().__init__()
        self.fail_name = fail_name
        self.delay = delay
        self.cancelled = []

    async def put(self, data, *, content_type, asset_id=None, filename=None):
        name = asset_id or filename
        if name == self.fail_name:
            raise IOError("disk full")
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled.append(name)
            raise
        return await super().put(
            data, content_type=content_type, asset_id=asset_id, filename=filename
        )


@pytest.mark.unit
@pytest.mark.asyncio
class TestAssetPersister:
    """Test suite for AssetPersister.save_images."""

    async def test_orig_stored_by_id_and_variants_by_filename(self, memory_store):
        persister = AssetPersister(memory_store)
        previews = {"orig": _variant("orig"), "sm": _variant("sm", "png")}

        orig_id, assets = await persister.save_images(previews, TIMESTAMP)

        assert orig_id == make_orig_id(TIMESTAMP)
        assert [asset.id for asset in assets] == [orig_id, f"{orig_id}_sm"]
        assert not memory_store.get(orig_id).by_filename
        assert memory_store.get(f"{orig_id}_sm").by_filename

    async def test_content_types_follow_variant_type(self, memory_store):
        persister = AssetPersister(memory_store)
        previews = {
            "orig": _variant("orig", "jpeg"),
            "sm": _variant("sm", "png"),
            "anim": _variant("anim", "gif"),
        }

        orig_id, assets = await persister.save_images(previews, TIMESTAMP)

        assert [asset.content_type for asset in assets] == [
            "image/jpeg",
            "image/png",
            "image/gif",
        ]
        assert memory_store.get(f"{orig_id}_anim").content_type == "image/gif"

    async def test_assets_describe_variant_images(self, memory_store):
        persister = AssetPersister(memory_store)
        previews = {
            "orig": _variant("orig", data=b"12345", size=(800, 600)),
            "sm": _variant("sm", data=b"12", size=(40, 30)),
        }

        _, assets = await persister.save_images(previews, TIMESTAMP)

        assert [(a.key, a.width, a.height, a.length) for a in assets] == [
            ("orig", 800, 600, 5),
            ("sm", 40, 30, 2),
        ]

    async def test_same_timestamp_gives_same_ids(self):
        first, second = MemoryAssetStore(), MemoryAssetStore()
        previews = {"orig": _variant("orig"), "sm": _variant("sm")}

        first_id, _ = await AssetPersister(first).save_images(previews, TIMESTAMP)
        second_id, _ = await AssetPersister(second).save_images(previews, TIMESTAMP)

        assert first_id == second_id
        assert sorted(first.assets) == sorted(second.assets)

    async def test_missing_orig_raises(self, memory_store):
        persister = AssetPersister(memory_store)

        with pytest.raises(PersistError):
            await persister.save_images({"sm": _variant("sm")}, TIMESTAMP)

        assert memory_store.calls == []

    async def test_store_failure_raises_persist_error(self):
        orig_id = make_orig_id(TIMESTAMP)
        store = FailingStore(fail_name=f"{orig_id}_sm")
        persister = AssetPersister(store)

        with pytest.raises(PersistError) as exc_info:
            await persister.save_images(
                {"orig": _variant("orig"), "sm": _variant("sm")}, TIMESTAMP
            )

        assert exc_info.value.key == "sm"
        assert isinstance(exc_info.value.__cause__, IOError)

    async def test_store_failure_cancels_pending_writes(self):
        orig_id = make_orig_id(TIMESTAMP)
        store = FailingStore(fail_name=orig_id, delay=5)
        persister = AssetPersister(store, concurrency=4)
        previews = {
            "orig": _variant("orig"),
            "sm": _variant("sm"),
            "md": _variant("md"),
        }

        with pytest.raises(PersistError):
            await persister.save_images(previews, TIMESTAMP)

        assert sorted(store.cancelled) == [f"{orig_id}_md", f"{orig_id}_sm"]
        assert len(store) == 0

    async def test_concurrency_is_bounded(self):
        active = 0
        peak = 0

        class CountingStore(MemoryAssetStore):
            async def put(self, data, **kwargs):
                nonlocal active, peak
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1
                return await super().put(data, **kwargs)

        persister = AssetPersister(CountingStore(), concurrency=2)
        previews = {"orig": _variant("orig")}
        previews.update({f"v{i}": _variant(f"v{i}") for i in range(6)})

        _, assets = await persister.save_images(previews, TIMESTAMP)

        assert len(assets) == 7
        assert peak == 2

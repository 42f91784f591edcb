# backend/previewer/services/preview_pipeline/services/asset_persister.py
"""
Asset Persister Service

Writes the variants of a completed run to the asset store. The orig entry is
stored under an identifier derived from the caller's timestamp; every other
entry is stored under the filename `<orig_id>_<key>`.

Writes are independent and run concurrently up to a bound. The first failed
write cancels the writes still pending; writes that already completed are not
rolled back.
"""

import asyncio
from typing import Dict, List, Tuple

from ....constants import ORIG_VARIANT_KEY
from ....enums import LogEmoji, LoggerName, LogSource
from ....exceptions import PersistError
from ....models import PersistedAsset, Variant
from ....utils.format_helpers import content_type_for
from ...asset_store import AssetStore
from ...logger import get_service_logger
from ..utils.preview_utils import make_orig_id, make_variant_filename

logger = get_service_logger(LoggerName.ASSET_PERSISTER, LogSource.STORAGE)


class AssetPersister:
    """Persists a run's variants to an explicitly supplied asset store."""

    def __init__(self, store: AssetStore, concurrency: int = 4):
        """
        Args:
            store: Asset store receiving the writes
            concurrency: Maximum number of writes in flight
        """
        self.store = store
        self.concurrency = max(1, concurrency)

    async def save_images(
        self, previews: Dict[str, Variant], timestamp: int
    ) -> Tuple[str, List[PersistedAsset]]:
        """
        Persist every variant of a run.

        Args:
            previews: Completed variants keyed by variant key, including orig
            timestamp: UNIX seconds the orig identifier is derived from

        Returns:
            (orig identifier, persisted assets in previews order)

        Raises:
            PersistError: On the first failed store write
        """
        if ORIG_VARIANT_KEY not in previews:
            raise PersistError(
                f"No '{ORIG_VARIANT_KEY}' variant to persist", key=ORIG_VARIANT_KEY
            )

        orig_id = make_orig_id(timestamp)
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _save(key: str, variant: Variant) -> PersistedAsset:
            async with semaphore:
                return await self._save_one(orig_id, key, variant)

        tasks = [
            asyncio.create_task(_save(key, variant), name=f"persist:{key}")
            for key, variant in previews.items()
        ]

        try:
            done, pending = await asyncio.wait(
                tasks, return_when=asyncio.FIRST_EXCEPTION
            )
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        failed = [task for task in tasks if task in done and task.exception()]
        if failed:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

            written = [
                task.result().id
                for task in tasks
                if task.done() and not task.cancelled() and task.exception() is None
            ]
            if written:
                logger.warning(
                    f"Persist failed after {len(written)} asset(s) were written; "
                    f"they are not rolled back",
                    extra_context={"orig_id": orig_id, "written": written},
                )
            raise failed[0].exception()

        assets = [task.result() for task in tasks]
        logger.debug(
            f"Persisted {len(assets)} asset(s) for {orig_id}",
            emoji=LogEmoji.STORAGE,
        )
        return orig_id, assets

    async def _save_one(self, orig_id: str, key: str, variant: Variant) -> PersistedAsset:
        content_type = content_type_for(variant.type)
        image = variant.image

        if key == ORIG_VARIANT_KEY:
            params = {"asset_id": orig_id}
        else:
            params = {"filename": make_variant_filename(orig_id, key)}

        try:
            stored_id = await self.store.put(
                image.buffer, content_type=content_type, **params
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise PersistError(
                f"Failed to store variant '{key}': {e}", key=key
            ) from e

        return PersistedAsset(
            key=key,
            id=stored_id or params.get("asset_id") or params["filename"],
            content_type=content_type,
            width=image.width,
            height=image.height,
            length=image.length,
        )

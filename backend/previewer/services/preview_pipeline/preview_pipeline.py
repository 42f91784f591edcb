# backend/previewer/services/preview_pipeline/preview_pipeline.py
"""
Main Preview Pipeline Class

Drives one preview run: load the source, derive every configured variant in
configuration order, persist the results, and describe what was written.

A run fails as a unit. Nothing is written to the asset store unless every
variant was derived; a failed store write aborts the remaining writes.
"""

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from ...config import Settings
from ...config import settings as global_settings
from ...constants import ORIG_VARIANT_KEY
from ...enums import LogEmoji, LoggerName, LogSource
from ...exceptions import ConfigurationError, PreviewerError
from ...models import AssetDescriptor, ImageRecord, PreviewOptions, Variant, VariantSpec
from ...utils.time_utils import elapsed_ms
from ..asset_store import AssetStore, FileSystemAssetStore
from ..logger import get_service_logger
from .generators import PreviewGenerator, SourceLoader
from .services import AssetPersister
from .utils import VariantPlanner

logger = get_service_logger(LoggerName.PREVIEW_PIPELINE, LogSource.PIPELINE)


class PreviewPipeline:
    """
    Preview derivation pipeline with explicit dependencies.

    The asset store is always passed in; nothing here keeps a process-wide
    store handle.
    """

    def __init__(
        self,
        store: AssetStore,
        settings: Optional[Settings] = None,
        generator: Optional[PreviewGenerator] = None,
        loader: Optional[SourceLoader] = None,
    ):
        """
        Initialize preview pipeline.

        Args:
            store: Asset store receiving the variants
            settings: Settings instance (global settings when omitted)
            generator: Preview generator (built from settings when omitted)
            loader: Source loader (built from settings when omitted)
        """
        if store is None:
            raise ConfigurationError("PreviewPipeline requires an asset store")

        self.store = store
        self.settings = settings or global_settings
        self.generator = generator or PreviewGenerator(
            unsharp_radius=self.settings.unsharp_radius,
            unsharp_percent=self.settings.unsharp_percent,
            unsharp_threshold=self.settings.unsharp_threshold,
        )
        self.loader = loader or SourceLoader(
            max_source_bytes=self.settings.max_source_bytes
        )
        self.persister = AssetPersister(
            store, concurrency=self.settings.persist_concurrency
        )

    async def derive_previews(
        self, source: Any, options: Union[PreviewOptions, Mapping[str, Any]]
    ) -> AssetDescriptor:
        """
        Derive and persist every configured variant of one source image.

        Args:
            source: Image bytes, path, binary file object or async chunk iterable
            options: Run options (resize mapping, ext, date)

        Returns:
            AssetDescriptor with the orig identifier, orig size and one
            record per persisted variant

        Raises:
            ConfigurationError: If the options are invalid
            DecodeError: If the source cannot be read or identified
            TransformError: If deriving any variant fails (nothing persisted)
            PersistError: If a store write fails
        """
        start = time.perf_counter()
        run_options = parse_options(options)

        logger.info(
            f"Deriving {len(run_options.resize)} variant(s)",
            extra_context={"keys": list(run_options.resize), "date": run_options.date},
            emoji=LogEmoji.PROCESSING,
        )

        try:
            raw_image = await self.loader.read_image(source)
            default_format = (
                raw_image.format or run_options.ext or self.settings.default_format
            )

            planner = VariantPlanner(
                raw_image,
                default_format,
                strict=self.settings.strict_variant_references,
            )
            specs = planner.plan(run_options.resize)
            previews = await self._derive_variants(planner, specs)

            if ORIG_VARIANT_KEY not in previews:
                previews = {
                    ORIG_VARIANT_KEY: Variant(
                        key=ORIG_VARIANT_KEY, image=raw_image, type=default_format
                    ),
                    **previews,
                }

            # Save all previews
            orig_id, assets = await self.persister.save_images(
                previews, run_options.date
            )
        except PreviewerError as e:
            logger.error(
                f"Preview run failed: {e}",
                exception=e,
                error_context={"date": run_options.date, "stage": type(e).__name__},
            )
            raise

        descriptor = AssetDescriptor(
            id=orig_id,
            size=previews[ORIG_VARIANT_KEY].image.length,
            images=[
                ImageRecord(
                    key=asset.key,
                    width=asset.width,
                    height=asset.height,
                    length=asset.length,
                )
                for asset in assets
            ],
        )

        logger.info(
            f"Stored {len(assets)} asset(s) for {orig_id} in {elapsed_ms(start)}ms",
            emoji=LogEmoji.SUCCESS,
        )
        return descriptor

    async def derive_many(
        self,
        jobs: Iterable[Tuple[Any, Union[PreviewOptions, Mapping[str, Any]]]],
        return_exceptions: bool = False,
    ) -> List[Union[AssetDescriptor, BaseException]]:
        """
        Run several independent preview runs concurrently.

        At most settings.max_concurrent_runs runs execute at once. Results are
        returned in input order once every run has settled.

        Args:
            jobs: (source, options) pairs
            return_exceptions: Return failures in place of results instead of
                raising the first one

        Returns:
            One AssetDescriptor (or exception) per job
        """
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_runs)

        async def _run(source: Any, options) -> AssetDescriptor:
            async with semaphore:
                return await self.derive_previews(source, options)

        results = await asyncio.gather(
            *[_run(source, options) for source, options in jobs],
            return_exceptions=True,
        )

        if not return_exceptions:
            for result in results:
                if isinstance(result, BaseException):
                    raise result
        return results

    async def _derive_variants(
        self, planner: VariantPlanner, specs: Sequence[VariantSpec]
    ) -> Dict[str, Variant]:
        """
        Derive the variants one at a time, in order.

        Image engine work runs on an executor owned by this run and pinned to
        settings.filter_threads workers.
        """
        loop = asyncio.get_running_loop()
        previews: Dict[str, Variant] = {}

        executor = ThreadPoolExecutor(
            max_workers=self.settings.filter_threads,
            thread_name_prefix="preview",
        )
        try:
            for spec in specs:
                # Next preview will be based on preview in 'from' property,
                # by default on 'orig'
                image, image_type, base_key = planner.resolve_base(spec, previews)

                logger.debug(
                    f"Variant '{spec.key}' derived from {base_key}",
                    extra_context={"key": spec.key, "base": base_key},
                )
                previews[spec.key] = await loop.run_in_executor(
                    executor, self.generator.create_preview, image, spec, image_type
                )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return previews


def parse_options(options: Union[PreviewOptions, Mapping[str, Any]]) -> PreviewOptions:
    """
    Validate run options.

    A `store` entry in mapping options is ignored here; stores are passed to
    the pipeline explicitly.

    Raises:
        ConfigurationError: If the options do not validate
    """
    if isinstance(options, PreviewOptions):
        return options

    if not isinstance(options, Mapping):
        raise ConfigurationError(
            f"Options must be a mapping, got {type(options).__name__}"
        )

    data = {key: value for key, value in options.items() if key != "store"}
    try:
        return PreviewOptions.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid preview options: {e}") from e


async def derive_previews(
    source: Any,
    options: Union[PreviewOptions, Mapping[str, Any]],
    store: Optional[AssetStore] = None,
    settings: Optional[Settings] = None,
) -> AssetDescriptor:
    """
    Derive and persist previews for one source image.

    The store may be passed directly or, for callers using the
    `{resize, ext, date, store}` options shape, inside mapping options.

    Raises:
        ConfigurationError: If no store is supplied
    """
    if store is None and isinstance(options, Mapping):
        store = options.get("store")
    if store is None:
        raise ConfigurationError("An asset store is required to derive previews")

    pipeline = PreviewPipeline(store=store, settings=settings)
    return await pipeline.derive_previews(source, options)


def create_preview_pipeline(
    store: Optional[AssetStore] = None, settings: Optional[Settings] = None
) -> PreviewPipeline:
    """
    Factory function to create a preview pipeline.

    Args:
        store: Asset store; a filesystem store under settings.store_directory
            is created when omitted
        settings: Settings instance (global settings when omitted)

    Returns:
        Configured PreviewPipeline
    """
    settings = settings or global_settings
    if store is None:
        store = FileSystemAssetStore(settings.store_path)
    return PreviewPipeline(store=store, settings=settings)

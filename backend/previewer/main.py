#!/usr/bin/env python3
# backend/previewer/main.py
"""
Preview derivation CLI for Previewer.

Derives the variants described by a JSON resize configuration from one
source image and stores them in a local asset directory.
"""

import argparse
import asyncio
import json
import sys
import time
from pathlib import Path

from .config import Settings
from .enums import LogEmoji, LoggerName, LogSource
from .exceptions import ConfigurationError, PreviewerError
from .services.asset_store import FileSystemAssetStore
from .services.logger import configure_logging, get_service_logger
from .services.preview_pipeline import PreviewPipeline

logger = get_service_logger(LoggerName.CLI, LogSource.CLI)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="previewer",
        description="Previewer - derive image previews into an asset directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s photo.jpg --config resize.json
  %(prog)s photo.jpg --config resize.json --date 1262304000 --json
  %(prog)s anim.gif --config resize.json --output-dir ./assets --ext gif
        """,
    )

    parser.add_argument("source", help="Path to the source image")
    parser.add_argument(
        "--config",
        required=True,
        help="JSON file with the resize mapping (variant key -> spec), "
        "or an object with a 'resize' key",
    )
    parser.add_argument(
        "--date",
        default=None,
        help="Timestamp used to derive the orig asset id "
        "(UNIX seconds or ISO 8601; defaults to the source file mtime)",
    )
    parser.add_argument("--ext", default=None, help="Default source format")
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Asset directory (defaults to the configured store directory)",
    )
    parser.add_argument("--json", action="store_true", help="Output results as JSON")
    return parser


def load_resize_config(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read resize config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Resize config must be a JSON object")
    return data.get("resize", data)


async def run(args: argparse.Namespace, settings: Settings) -> dict:
    source = Path(args.source)
    date = args.date
    if date is None:
        date = int(source.stat().st_mtime) if source.exists() else int(time.time())

    store = FileSystemAssetStore(args.output_dir or settings.store_path)
    pipeline = PreviewPipeline(store=store, settings=settings)

    descriptor = await pipeline.derive_previews(
        source,
        {
            "resize": load_resize_config(Path(args.config)),
            "ext": args.ext,
            "date": date,
        },
    )
    return descriptor.model_dump()


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    settings = Settings()
    configure_logging(settings)

    try:
        result = asyncio.run(run(args, settings))
    except PreviewerError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    if args.json:
        print(json.dumps(result, indent=2))
    else:
        print(f"{LogEmoji.SUCCESS.value} Stored {result['id']} ({result['size']} bytes)")
        for image in result["images"]:
            print(
                f"   {image['key']}: {image['width']}x{image['height']} "
                f"({image['length']} bytes)"
            )
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""CLI entry point for the vehicle pricing dataset builder.

Usage:
    # Full run: live API where available, seed catalogs elsewhere
    python -m vehicle_db.main

    # Ignore the previous dataset and rebuild from scratch
    python -m vehicle_db.main --reset

    # Run everything but write nothing; report projected sizes
    python -m vehicle_db.main --dry-run

    # No network at all
    python -m vehicle_db.main --offline
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

from .collector.config import PRICE_MODES, Config
from .collector.fipe_collector import FipeCollector
from .collector.html_source import HtmlTableSource, NullSource
from .collector.http_client import HTTPClient
from .common.config import settings
from .common.errors import EmptyDatasetError, IntegrityError
from .common.logging import setup_logging
from .dataset.writer import DatasetWriter, WriteResult, load_previous_vehicles
from .pipeline import VehiclePipeline

logger = logging.getLogger(__name__)


def write_ci_outputs(result: WriteResult, output_file: str) -> None:
    """Append run outputs for a GitHub Actions step."""
    meta = result.metadata
    with open(output_file, "a", encoding="utf-8") as f:
        f.write(f"version={meta.version}\n")
        f.write(f"vehicles_count={meta.vehicles_count}\n")
        f.write(f"gzip_size={meta.gzip_size_bytes}\n")
        f.write(f"stats={json.dumps(meta.stats, separators=(',', ':'))}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vehicle pricing dataset builder")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Ignore the existing dataset and regenerate everything",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Collect and merge but write no files; report projected sizes",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip the live API and build every category from seed catalogs",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=settings.pipeline.output_dir,
        help="Directory for vehicles_db.json(.gz) and metadata.json",
    )
    parser.add_argument(
        "--price-mode",
        choices=PRICE_MODES,
        default=None,
        help="live: fetch every price; synthetic: estimate prices per model year",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging",
    )
    return parser


def run(args: argparse.Namespace) -> int:
    """Execute one build. Returns the process exit code."""
    started = datetime.now(timezone.utc)
    logger.info("Vehicle dataset build started at %s", started.isoformat())

    config = Config()
    if args.price_mode:
        config.price_mode = args.price_mode
    live = config.live_enabled and not args.offline

    writer = DatasetWriter(
        args.output_dir,
        db_filename=settings.pipeline.db_filename,
        metadata_filename=settings.pipeline.metadata_filename,
        dry_run=args.dry_run,
    )
    previous = [] if args.reset else load_previous_vehicles(writer.json_path)

    with HTTPClient(config) as client:
        collector = FipeCollector(client, config) if live else None
        aux_source = (
            HtmlTableSource(client, settings.pipeline.auxiliary_urls)
            if live and settings.pipeline.auxiliary_urls
            else NullSource()
        )
        pipeline = VehiclePipeline(collector, aux_source, settings=settings)
        try:
            dataset, _summary = pipeline.run(previous, now=started)
            result = writer.write(dataset)
        except (EmptyDatasetError, IntegrityError) as exc:
            logger.error("Build aborted: %s", exc)
            return 1

    if not result.dry_run and (output_file := os.getenv("GITHUB_OUTPUT")):
        write_ci_outputs(result, output_file)

    logger.info(
        "Done: version %s, %d vehicles, %s bytes gzip%s",
        result.metadata.version,
        result.metadata.vehicles_count,
        f"{result.gzip_bytes:,}",
        " (dry run)" if result.dry_run else f" -> {Path(args.output_dir)}",
    )
    return 0


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    sys.exit(run(args))


if __name__ == "__main__":
    main()

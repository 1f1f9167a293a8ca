"""Command-line entry point for the release scraper."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from typing import Sequence

from .collector import build_channel_map, collect_releases
from .config import ARCHIVE_CHANNELS, ScrapeConfig
from .models import channel_map_to_json, record_schema

logger = logging.getLogger("blender_releases.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Scrape Blender release metadata from the stable download page and the "
            "builder archive, and print it as a single JSON document."
        ),
    )
    parser.add_argument(
        "--channel",
        dest="channels",
        action="append",
        choices=ARCHIVE_CHANNELS,
        help="Archive channel to scrape in addition to stable (repeatable; default: all)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Per-request timeout in seconds",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=4,
        help="Maximum number of channels fetched at the same time",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Pretty-print the JSON output with this many spaces",
    )
    parser.add_argument(
        "--schema",
        action="store_true",
        help="Print the JSON Schema of the output document and exit",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only log errors",
    )
    return parser.parse_args(argv)


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    if args.schema:
        sys.stdout.write(json.dumps(record_schema(), indent=args.indent) + "\n")
        return 0
    _configure_logging(args)

    config = ScrapeConfig(
        channels=tuple(dict.fromkeys(args.channels)) if args.channels else ARCHIVE_CHANNELS,
        timeout=args.timeout,
        max_workers=args.workers,
    )

    overall_start = time.perf_counter()
    results = collect_releases(config)
    total_elapsed = time.perf_counter() - overall_start

    channel_map = build_channel_map(results)
    sys.stdout.write(channel_map_to_json(channel_map, indent=args.indent) + "\n")
    sys.stdout.flush()

    failures = [result for result in results if not result.ok]
    logger.info(
        "Finished in %.2fs (%d/%d channels succeeded, %d failed)",
        total_elapsed,
        len(results) - len(failures),
        len(results),
        len(failures),
    )
    if len(failures) == len(results):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

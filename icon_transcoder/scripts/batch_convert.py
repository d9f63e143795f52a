#!/usr/bin/env python3
"""
Batch Convert Script.

Transcode every scene document in a directory into Java icon classes.

Usage:
    python -m icon_transcoder.scripts.batch_convert icons/ org.example.icons
    python -m icon_transcoder.scripts.batch_convert icons/ org.example.icons \\
        --output-dir src/main/java/org/example/icons --naming identifier

Files that fail are logged and skipped; the exit status is 1 if any did.
"""

from __future__ import annotations

import argparse
import logging
import sys

from icon_transcoder.batch.converter import NAMING_STRATEGIES, BatchConverter
from icon_transcoder.configs.loader import ConfigError, load_config
from icon_transcoder.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Transcode a directory of scene documents into Java icon classes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "directory",
        type=str,
        help="Directory holding scene documents",
    )
    parser.add_argument(
        "package",
        type=str,
        help="Java package of the generated classes",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=str,
        help="Destination directory (default: the input directory)",
    )
    parser.add_argument(
        "--naming",
        type=str,
        choices=list(NAMING_STRATEGIES.keys()),
        help="Class naming strategy (overrides config)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Configuration file path",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (overrides config)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(
        args.log_level or config.logging.level,
        json=config.logging.json,
        context={"app": "batch"},
    )

    naming = NAMING_STRATEGIES[args.naming] if args.naming else None
    converter = BatchConverter(config, naming=naming)

    try:
        report = converter.convert_directory(args.directory, args.package, args.output_dir)
    except NotADirectoryError as e:
        logger.error("%s", e)
        return 1

    for path, error in report.failed:
        logger.warning("FAILED %s: %s", path.name, error)
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Transcode Script.

Convert one scene document into a Java 2D icon class.

Usage:
    python -m icon_transcoder.scripts.transcode close.scene.yaml --class-name Close
    python -m icon_transcoder.scripts.transcode close.scene.yaml.gz -n Close \\
        --package org.example.icons --resizable --output Close.java

The generated source goes to stdout unless --output is given.  Nothing is
written when the scene cannot be transcoded.
"""

from __future__ import annotations

import argparse
import logging
import sys

from icon_transcoder.codegen.errors import TranscodeError
from icon_transcoder.codegen.transcoder import SceneTranscoder, TranscodeOptions
from icon_transcoder.configs.loader import ConfigError, load_config
from icon_transcoder.scene.schema import SceneDocumentError, load_scene
from icon_transcoder.utils.fs import atomic_write_text
from icon_transcoder.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Transcode a scene document into a Java 2D icon class",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "scene",
        type=str,
        help="Scene document (.scene.yaml, optionally gzipped)",
    )
    parser.add_argument(
        "--class-name",
        "-n",
        type=str,
        required=True,
        help="Name of the generated class",
    )
    parser.add_argument(
        "--package",
        "-p",
        type=str,
        default=None,
        help="Java package of the generated class",
    )
    parser.add_argument(
        "--resizable",
        action="store_true",
        help="Use the resizable icon skeleton",
    )
    parser.add_argument(
        "--threshold",
        type=int,
        help="Maximum procedure body size in bytes (overrides config)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output file (default: stdout)",
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
        context={"app": "transcode"},
    )

    try:
        options = TranscodeOptions(
            class_name=args.class_name,
            package=args.package,
            resizable=args.resizable or config.codegen.resizable,
            chunk_threshold_bytes=(
                args.threshold if args.threshold is not None
                else config.codegen.chunk_threshold_bytes
            ),
            indent=config.codegen.indent,
        )
    except ValueError as e:
        logger.error("Invalid options: %s", e)
        return 1

    try:
        scene = load_scene(args.scene)
        source = SceneTranscoder(options).transcode(scene)
    except (FileNotFoundError, SceneDocumentError, TranscodeError) as e:
        logger.error("Cannot transcode %s: %s", args.scene, e)
        return 1

    if args.output:
        atomic_write_text(args.output, source)
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(source)
    return 0


if __name__ == "__main__":
    sys.exit(main())

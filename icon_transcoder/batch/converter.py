"""Convert every scene document in a directory to a Java icon class.

One output file per input, named by a pluggable naming strategy.  A
document that fails to load or transcode is logged and recorded in the
report; the remaining files are still converted, and no output is
written for the failing one.

Usage::

    from icon_transcoder.batch.converter import BatchConverter
    from icon_transcoder.configs.loader import load_config

    report = BatchConverter(load_config()).convert_directory(
        "icons/", "org.example.icons",
    )
    if report.failed:
        ...
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from icon_transcoder.codegen.errors import TranscodeError
from icon_transcoder.codegen.transcoder import SceneTranscoder
from icon_transcoder.configs.loader import ConfigError, TranscoderConfig
from icon_transcoder.scene.nodes import Scene
from icon_transcoder.scene.schema import load_scene
from icon_transcoder.utils.fs import atomic_write_text, ensure_dir, find_files, strip_suffixes
from icon_transcoder.utils.logging_config import log_context

logger = logging.getLogger(__name__)

NamingStrategy = Callable[[str], str]
SceneLoader = Callable[[Path], Scene]


# ---------------------------------------------------------------------------
# Naming strategies
# ---------------------------------------------------------------------------


def pascal_case_name(stem: str) -> str:
    """``arrow-left_small`` -> ``ArrowLeftSmall``.

    Non-alphanumeric runs act as word separators.  A leading digit gets an
    underscore prefix so the result is always a valid identifier.
    """
    parts = re.split(r"[^A-Za-z0-9]+", stem)
    name = "".join(word[:1].upper() + word[1:] for word in parts if word)
    return _ensure_identifier(name)


def identifier_name(stem: str) -> str:
    """Keep the stem as-is, replacing every invalid character with ``_``."""
    return _ensure_identifier(re.sub(r"[^A-Za-z0-9_]", "_", stem))


def _ensure_identifier(name: str) -> str:
    if not name:
        return "_"
    if name[0].isdigit():
        return "_" + name
    return name


NAMING_STRATEGIES: dict[str, NamingStrategy] = {
    "pascal": pascal_case_name,
    "identifier": identifier_name,
}


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


@dataclass
class BatchReport:
    """Outcome of one directory conversion."""

    converted: list[tuple[Path, Path]] = field(default_factory=list)
    failed: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def total(self) -> int:
        return len(self.converted) + len(self.failed)


# ---------------------------------------------------------------------------
# Converter
# ---------------------------------------------------------------------------


class BatchConverter:
    """Transcode all scene documents found in a directory.

    Parameters
    ----------
    config : TranscoderConfig
        Supplies chunking, skeleton, extensions, naming and output suffix.
    loader : callable
        Turns a path into a ``Scene``.  Defaults to the ``scene.v1``
        document loader.
    naming : callable, optional
        Overrides the configured naming strategy.
    """

    def __init__(
        self,
        config: TranscoderConfig,
        loader: SceneLoader = load_scene,
        naming: NamingStrategy | None = None,
    ) -> None:
        self.config = config
        self.loader = loader
        self.naming = naming or NAMING_STRATEGIES[config.batch.naming]

    def class_name_for(self, path: Path) -> str:
        return self.naming(strip_suffixes(path, self.config.batch.extensions))

    def convert_directory(
        self,
        directory: str | Path,
        package: str | None,
        output_dir: str | Path | None = None,
    ) -> BatchReport:
        """Convert every matching file directly under *directory*.

        Parameters
        ----------
        directory : str | Path
            Directory holding scene documents.
        package : str | None
            Java package of the generated classes.
        output_dir : str | Path | None
            Destination; defaults to *directory* itself.

        Returns
        -------
        BatchReport
            Converted ``(source, output)`` pairs and ``(source, error)``
            failures, in file-name order.

        Raises
        ------
        NotADirectoryError
            If *directory* does not exist.
        """
        directory = Path(directory)
        files = find_files(directory, self.config.batch.extensions)
        out_root = ensure_dir(output_dir if output_dir is not None else directory)
        logger.info("Converting %d scene file(s) from %s", len(files), directory)

        report = BatchReport()
        claimed: dict[str, Path] = {}
        for path in files:
            with log_context(source=path.name):
                class_name = self.class_name_for(path)
                if class_name in claimed:
                    msg = f"class name {class_name} already used by {claimed[class_name].name}"
                    logger.error("Skipping %s: %s", path.name, msg)
                    report.failed.append((path, msg))
                    continue
                claimed[class_name] = path

                target = out_root / f"{class_name}{self.config.batch.output_suffix}"
                try:
                    self._convert_file(path, target, class_name, package)
                except (TranscodeError, ConfigError, ValueError, OSError, RuntimeError) as exc:
                    logger.error("Failed to convert %s: %s", path.name, exc, exc_info=True)
                    report.failed.append((path, str(exc)))
                    continue
                report.converted.append((path, target))

        logger.info(
            "Batch finished: %d converted, %d failed",
            len(report.converted), len(report.failed),
        )
        return report

    def _convert_file(
        self, path: Path, target: Path, class_name: str, package: str | None,
    ) -> None:
        logger.info("Processing %s -> %s", path.name, target.name)
        scene = self.loader(path)
        options = self.config.options_for(class_name, package)
        source = SceneTranscoder(options).transcode(scene)
        atomic_write_text(target, source)

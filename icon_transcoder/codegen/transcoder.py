"""Scene -> Java source, end to end.

:class:`SceneTranscoder` runs the walker, the chunker and the packager
in sequence and only hands text to the sink once the whole file is
built.  A failing scene therefore never produces partial output.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from icon_transcoder.codegen.chunker import DEFAULT_CHUNK_THRESHOLD, split_instructions
from icon_transcoder.codegen.packager import TemplatePackager
from icon_transcoder.codegen.walker import SceneWalker, TranscodeResult
from icon_transcoder.scene.nodes import Scene

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class TextSink(Protocol):
    def write(self, text: str) -> object: ...


@dataclass(frozen=True, slots=True)
class TranscodeOptions:
    """Per-call transcoding options.

    Parameters
    ----------
    class_name : str
        Name of the generated class.  Must be a Java identifier.
    package : str | None
        Dotted package name, or ``None`` for the default package.
    resizable : bool
        Use the resizable skeleton instead of the fixed-size one.
    chunk_threshold_bytes : int
        Maximum UTF-8 size of one generated procedure body.
    indent : int
        Spaces before each generated statement.
    """

    class_name: str
    package: str | None = None
    resizable: bool = False
    chunk_threshold_bytes: int = DEFAULT_CHUNK_THRESHOLD
    indent: int = 8

    def __post_init__(self) -> None:
        if not _IDENTIFIER.match(self.class_name):
            raise ValueError(
                f"class_name must be a Java identifier, got {self.class_name!r}"
            )
        if self.package:
            for part in self.package.split("."):
                if not _IDENTIFIER.match(part):
                    raise ValueError(
                        f"package must be a dotted identifier, got {self.package!r}"
                    )
        if self.chunk_threshold_bytes <= 0:
            raise ValueError(
                f"chunk_threshold_bytes must be > 0, got {self.chunk_threshold_bytes}"
            )
        if self.indent < 0:
            raise ValueError(f"indent must be >= 0, got {self.indent}")


class SceneTranscoder:
    """Turn scene trees into Java 2D icon classes.

    Parameters
    ----------
    options : TranscodeOptions
        Naming, skeleton and chunking settings.

    Examples
    --------
    >>> transcoder = SceneTranscoder(TranscodeOptions("MyIcon", "org.icons"))
    >>> source = transcoder.transcode(scene)  # doctest: +SKIP
    """

    def __init__(self, options: TranscodeOptions) -> None:
        self.options = options
        self._walker = SceneWalker()
        self._packager = TemplatePackager.bundled(
            resizable=options.resizable, indent=options.indent,
        )

    def walk(self, scene: Scene) -> TranscodeResult:
        return self._walker.walk(scene)

    def transcode(self, scene: Scene) -> str:
        """Return the complete source text for *scene*.

        Raises
        ------
        TranscodeError
            Any walker failure; nothing is produced.
        """
        result = self._walker.walk(scene)
        bodies = split_instructions(result.pieces, self.options.chunk_threshold_bytes)
        text = self._packager.package(
            bodies,
            class_name=self.options.class_name,
            package=self.options.package,
            bounds=result.bounds,
        )
        logger.info(
            "Transcoded %s: %d instructions in %d procedure(s), bounds %dx%d",
            self.options.class_name, len(result.instructions), len(bodies),
            result.bounds.width, result.bounds.height,
        )
        return text

    def write(self, scene: Scene, sink: TextSink) -> None:
        """Transcode *scene* and write the result to *sink* in one call."""
        sink.write(self.transcode(scene))


def transcode(scene: Scene, options: TranscodeOptions) -> str:
    """Convenience wrapper around :class:`SceneTranscoder`."""
    return SceneTranscoder(options).transcode(scene)

"""Split an instruction stream into size-bounded procedure bodies.

The JVM limits a method to 64 KB of bytecode, which large icons exceed.
The stream is therefore cut into several bodies, each later wrapped in its
own procedure that calls the next one.  Cuts only ever fall between
atomic instructions.

Cross-procedure state (``origAlpha``, the open-transform stack and the
current ``shape``) is carried by procedure parameters, never reset, so a
transform pushed in one body can be popped in a later one.  This module
only deals with text; see :mod:`icon_transcoder.codegen.packager` for the
procedure wrapping.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_THRESHOLD = 3000
"""Default maximum UTF-8 size of one procedure body, in bytes."""


def _size(piece: str) -> int:
    return len(piece.encode("utf-8"))


def split_instructions(
    stream: str | Iterable[str],
    threshold: int = DEFAULT_CHUNK_THRESHOLD,
) -> list[str]:
    """Greedily pack instruction pieces into bodies of at most *threshold* bytes.

    Parameters
    ----------
    stream : str | Iterable[str]
        Either the raw stream text (split after every newline) or the
        atomic pieces themselves, each exactly as it appears in the
        stream.
    threshold : int
        Maximum body size in UTF-8 bytes.  A single piece larger than
        this gets a body of its own.

    Returns
    -------
    list[str]
        Bodies in call order.  Always at least one (possibly empty).
        ``"".join(bodies)`` equals the input stream.

    Raises
    ------
    ValueError
        If *threshold* is not positive.
    """
    if threshold <= 0:
        raise ValueError(f"threshold must be > 0, got {threshold}")

    if isinstance(stream, str):
        pieces: Iterable[str] = stream.splitlines(keepends=True)
    else:
        pieces = stream

    bodies: list[str] = []
    current: list[str] = []
    size = 0
    for piece in pieces:
        piece_size = _size(piece)
        if current and size + piece_size > threshold:
            bodies.append("".join(current))
            current = []
            size = 0
        current.append(piece)
        size += piece_size
    bodies.append("".join(current))

    logger.debug("Split stream into %d bodies (threshold %d)", len(bodies), threshold)
    return bodies

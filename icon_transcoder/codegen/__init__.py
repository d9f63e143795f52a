"""
Java 2D code generation module.

Walks a scene tree into a state-diffed instruction stream, splits it into
size-bounded procedures and packages them into an icon class.
"""

from icon_transcoder.codegen.chunker import split_instructions
from icon_transcoder.codegen.errors import InvalidGradient, TranscodeError
from icon_transcoder.codegen.packager import TemplatePackager
from icon_transcoder.codegen.transcoder import SceneTranscoder, TranscodeOptions, transcode
from icon_transcoder.codegen.walker import SceneWalker, TranscodeResult

__all__ = [
    "InvalidGradient",
    "SceneTranscoder",
    "SceneWalker",
    "TemplatePackager",
    "TranscodeError",
    "TranscodeOptions",
    "TranscodeResult",
    "split_instructions",
    "transcode",
]

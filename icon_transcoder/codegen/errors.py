"""Exceptions raised while transcoding a scene tree.

Every error is fatal to the current transcode call.  Any instructions
produced before the error must be discarded by the caller.
"""

from __future__ import annotations

from typing import Any


class TranscodeError(Exception):
    """Base class for all transcoding failures."""

    pass


def _describe(variant: Any) -> str:
    if isinstance(variant, (str, int, float)) or variant is None:
        return f"{variant!r} ({type(variant).__name__})"
    return type(variant).__qualname__


class UnsupportedVariantError(TranscodeError):
    """A tree element falls outside the supported variants.

    Attributes
    ----------
    variant : Any
        The offending object, kept for diagnosis.
    """

    kind = "variant"

    def __init__(self, variant: Any) -> None:
        self.variant = variant
        super().__init__(f"Unsupported {self.kind}: {_describe(variant)}")


class UnsupportedNode(UnsupportedVariantError):
    kind = "node"


class UnsupportedGeometry(UnsupportedVariantError):
    kind = "geometry"


class UnsupportedPaint(UnsupportedVariantError):
    kind = "paint"


class UnsupportedPainter(UnsupportedVariantError):
    kind = "painter"


class UnsupportedCompositeRule(UnsupportedVariantError):
    kind = "composite rule"


class InvalidGradient(TranscodeError):
    """Gradient fractions are out of [0, 1] or decreasing."""

    pass

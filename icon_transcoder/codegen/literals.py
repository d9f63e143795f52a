"""Canonical Java literals for scene values.

Every function here is pure: equal input always yields identical text,
so the walker can diff state by comparing strings.

Numeric canonicalization
    Values within ``1e-6`` of an integer render as that integer.  Other
    ``float`` values render as the shortest text that round-trips through
    float32, tagged with ``f``; ``double`` values use the shortest float64
    text.  No exponent notation is produced.

Gradient fractions
    Validated to lie in [0, 1] and be non-decreasing.  A fraction that
    would repeat the previous literal is nudged up by ``1e-9`` because
    ``MultipleGradientPaint`` rejects equal stops.  This is lossy.

Colors
    Opaque colors matching a ``java.awt.Color`` constant render as the
    constant name (the templates import ``java.awt.Color.*`` statically).
    Other opaque colors render as ``new Color(0xRRGGBB)``; translucent ones
    as ``new Color(0xAARRGGBB, true)``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import numpy as np

from icon_transcoder.codegen.errors import (
    InvalidGradient,
    UnsupportedCompositeRule,
    UnsupportedPaint,
)
from icon_transcoder.scene.nodes import (
    AffineTransform,
    AlphaComposite,
    CapStyle,
    Color,
    ColorSpace,
    CompositeRule,
    CycleMethod,
    JoinStyle,
    LinearGradient,
    Paint,
    Point,
    RadialGradient,
    StrokeStyle,
)

INTEGRAL_TOLERANCE = 1e-6
FRACTION_EPSILON = 1e-9

# Java int literals stop at 2**31 - 1
_INT_LITERAL_LIMIT = 2**31 - 1

NAMED_COLORS: dict[tuple[int, int, int, int], str] = {
    (255, 255, 255, 255): "WHITE",
    (0, 0, 0, 255): "BLACK",
    (255, 0, 0, 255): "RED",
    (0, 255, 0, 255): "GREEN",
    (0, 0, 255, 255): "BLUE",
    (192, 192, 192, 255): "LIGHT_GRAY",
    (128, 128, 128, 255): "GRAY",
    (64, 64, 64, 255): "DARK_GRAY",
    (255, 255, 0, 255): "YELLOW",
    (0, 255, 255, 255): "CYAN",
    (255, 0, 255, 255): "MAGENTA",
}


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


def _snap_to_int(value: float) -> int | None:
    """Return the nearest integer if *value* is integral within tolerance."""
    if not math.isfinite(value):
        raise ValueError(f"Cannot emit non-finite literal: {value!r}")
    rounded = math.floor(value + 0.5)
    if abs(rounded - value) < INTEGRAL_TOLERANCE and abs(rounded) <= _INT_LITERAL_LIMIT:
        return rounded
    return None


def format_float(value: float) -> str:
    """Format a Java ``float`` literal.

    Examples
    --------
    >>> format_float(2.0000001)
    '2'
    >>> format_float(0.1)
    '0.1f'
    """
    snapped = _snap_to_int(value)
    if snapped is not None:
        return str(snapped)
    text = np.format_float_positional(np.float32(value), unique=True, trim="-")
    return f"{text}f"


def format_double(value: float) -> str:
    """Format a Java ``double`` literal (no precision tag)."""
    snapped = _snap_to_int(value)
    if snapped is not None:
        return str(snapped)
    text = np.format_float_positional(np.float64(value), unique=True, trim="-")
    # Integral values past the int range need a decimal point to stay doubles
    if "." not in text:
        text += ".0"
    return text


def format_float_array(values: Iterable[float]) -> str:
    return "new float[]{" + ", ".join(format_float(v) for v in values) + "}"


# ---------------------------------------------------------------------------
# Gradient fractions
# ---------------------------------------------------------------------------


def normalize_fractions(fractions: Sequence[float]) -> list[float]:
    """Validate gradient fractions and make them strictly increasing.

    Parameters
    ----------
    fractions : Sequence[float]
        Source stop positions, each in [0, 1], non-decreasing.

    Returns
    -------
    list[float]
        Strictly increasing fractions.  A value that does not exceed its
        predecessor becomes ``predecessor + FRACTION_EPSILON``.  Nudges
        that would leave [0, 1] at the top end are pushed back from 1
        instead.

    Raises
    ------
    InvalidGradient
        If a fraction is out of range or smaller than its predecessor.
    """
    previous = -1.0
    for fraction in fractions:
        if not 0.0 <= fraction <= 1.0:
            raise InvalidGradient(
                f"Fraction values must be in the range 0 to 1: {fraction}"
            )
        if fraction < previous:
            raise InvalidGradient(
                f"Keyframe fractions must be non-decreasing: {fraction}"
            )
        previous = fraction

    result: list[float] = []
    for fraction in fractions:
        if result and fraction <= result[-1]:
            fraction = result[-1] + FRACTION_EPSILON
        result.append(float(fraction))

    if result and result[-1] > 1.0:
        result[-1] = 1.0
        for i in range(len(result) - 2, -1, -1):
            if result[i] < result[i + 1]:
                break
            result[i] = result[i + 1] - FRACTION_EPSILON
    return result


def format_fraction(value: float) -> str:
    if value == 0.0 or value == 1.0:
        return str(int(value))
    text = np.format_float_positional(np.float64(value), unique=True, trim="-")
    return f"{text}f"


def format_fractions(fractions: Sequence[float]) -> str:
    """Validate, normalize and format gradient fractions as ``float[]``."""
    normalized = normalize_fractions(fractions)
    return "new float[]{" + ", ".join(format_fraction(f) for f in normalized) + "}"


# ---------------------------------------------------------------------------
# Colors, points, transforms
# ---------------------------------------------------------------------------


def format_color(color: Color) -> str:
    name = NAMED_COLORS.get(color.rgba)
    if name is not None:
        return name
    if color.is_opaque:
        return f"new Color(0x{color.rgb:06X})"
    return f"new Color(0x{color.argb:08X}, true)"


def format_color_array(colors: Iterable[Color]) -> str:
    return "new Color[]{" + ", ".join(format_color(c) for c in colors) + "}"


def format_point(point: Point) -> str:
    return f"new Point2D.Double({format_double(point.x)}, {format_double(point.y)})"


def format_transform(transform: AffineTransform) -> str:
    """All six matrix components, always, each as a float literal."""
    return "new AffineTransform(" + ", ".join(
        format_float(v) for v in transform.matrix
    ) + ")"


def format_cycle_method(cycle: CycleMethod) -> str:
    return f"CycleMethod.{CycleMethod(cycle).value}"


def format_color_space(space: ColorSpace) -> str:
    return f"ColorSpaceType.{ColorSpace(space).value}"


# ---------------------------------------------------------------------------
# Paint, stroke, composite
# ---------------------------------------------------------------------------


def format_linear_gradient(paint: LinearGradient) -> str:
    fractions = format_fractions(paint.fractions)
    return (
        f"new LinearGradientPaint({format_point(paint.start)}, "
        f"{format_point(paint.end)}, {fractions}, "
        f"{format_color_array(paint.colors)}, "
        f"{format_cycle_method(paint.cycle)}, "
        f"{format_color_space(paint.color_space)}, "
        f"{format_transform(paint.transform)})"
    )


def format_radial_gradient(paint: RadialGradient) -> str:
    fractions = format_fractions(paint.fractions)
    return (
        f"new RadialGradientPaint({format_point(paint.center)}, "
        f"{format_float(paint.radius)}, {format_point(paint.focus)}, "
        f"{fractions}, {format_color_array(paint.colors)}, "
        f"{format_cycle_method(paint.cycle)}, "
        f"{format_color_space(paint.color_space)}, "
        f"{format_transform(paint.transform)})"
    )


def format_paint(paint: Paint) -> str:
    """Canonical text for any supported paint.

    Raises
    ------
    UnsupportedPaint
        If *paint* is not a ``Color``, ``LinearGradient`` or
        ``RadialGradient``.
    InvalidGradient
        If gradient fractions fail validation.
    """
    if isinstance(paint, Color):
        return format_color(paint)
    if isinstance(paint, LinearGradient):
        return format_linear_gradient(paint)
    if isinstance(paint, RadialGradient):
        return format_radial_gradient(paint)
    raise UnsupportedPaint(paint)


def format_stroke(style: StrokeStyle) -> str:
    head = (
        f"new BasicStroke({format_float(style.width)}, "
        f"{int(CapStyle(style.cap))}, {int(JoinStyle(style.join))}, "
        f"{format_float(style.miter_limit)}"
    )
    if style.dash_array is None:
        return head + ")"
    return (
        f"{head}, {format_float_array(style.dash_array)}, "
        f"{format_float(style.dash_phase)})"
    )


def format_composite(composite: AlphaComposite) -> str:
    """``AlphaComposite`` factory call scaled by the caller's alpha.

    Raises
    ------
    UnsupportedCompositeRule
        If the rule is not a ``CompositeRule`` member.
    """
    rule = composite.rule
    if not isinstance(rule, CompositeRule):
        raise UnsupportedCompositeRule(rule)
    return (
        f"AlphaComposite.getInstance({int(rule)}, "
        f"{format_float(composite.alpha)} * origAlpha)"
    )

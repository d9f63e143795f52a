"""Scene tree -- the vocabulary between a resolved vector graphic and code.

Every element of a resolved scene is an immutable, slotted dataclass.
The tree is produced by an external parser (or by
:mod:`icon_transcoder.scene.schema`) with all units, styles and
references already resolved to concrete geometry, paint and transforms.

Node kinds
----------
``CompositeNode`` groups children in z-order; ``ShapeNode`` applies a
painter to one geometry.  Both may carry an ``AffineTransform`` and an
``AlphaComposite``; ``None`` means identity / no change.

Identity
--------
Geometry objects are compared **by identity** during code generation:
two painters that reference the same ``Path`` instance share one shape
construction, while equal-but-distinct instances are emitted twice.
"""

from __future__ import annotations

import math
from abc import ABC
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Union

# ---------------------------------------------------------------------------
# Enumerations (values match the java.awt constants)
# ---------------------------------------------------------------------------


class CompositeRule(IntEnum):
    """Porter-Duff compositing rules (``java.awt.AlphaComposite``)."""

    CLEAR = 1
    SRC = 2
    SRC_OVER = 3
    DST_OVER = 4
    SRC_IN = 5
    DST_IN = 6
    SRC_OUT = 7
    DST_OUT = 8
    DST = 9
    SRC_ATOP = 10
    DST_ATOP = 11
    XOR = 12


class CapStyle(IntEnum):
    """Line end decoration (``java.awt.BasicStroke.CAP_*``)."""

    BUTT = 0
    ROUND = 1
    SQUARE = 2


class JoinStyle(IntEnum):
    """Segment join decoration (``java.awt.BasicStroke.JOIN_*``)."""

    MITER = 0
    ROUND = 1
    BEVEL = 2


class CycleMethod(Enum):
    """Gradient behaviour outside the [start, end] interval."""

    NO_CYCLE = "NO_CYCLE"
    REFLECT = "REFLECT"
    REPEAT = "REPEAT"


class ColorSpace(Enum):
    """Color space used for gradient interpolation."""

    SRGB = "SRGB"
    LINEAR_RGB = "LINEAR_RGB"


# ---------------------------------------------------------------------------
# Primitive values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Color:
    """8-bit RGBA color.

    Parameters
    ----------
    r, g, b : int
        Channels in [0, 255].
    a : int
        Alpha in [0, 255].  255 is opaque.
    """

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for ch, val in [("r", self.r), ("g", self.g), ("b", self.b), ("a", self.a)]:
            if not 0 <= val <= 255:
                raise ValueError(
                    f"Color {ch} must be in [0, 255], got {val}"
                )

    @classmethod
    def from_hex(cls, text: str) -> Color:
        """Parse ``#RRGGBB`` or ``#RRGGBBAA``."""
        digits = text.lstrip("#")
        if len(digits) not in (6, 8):
            raise ValueError(f"Expected #RRGGBB or #RRGGBBAA, got {text!r}")
        value = int(digits, 16)
        if len(digits) == 6:
            return cls(value >> 16 & 0xFF, value >> 8 & 0xFF, value & 0xFF)
        return cls(
            value >> 24 & 0xFF, value >> 16 & 0xFF, value >> 8 & 0xFF, value & 0xFF,
        )

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    @property
    def rgb(self) -> int:
        """Packed ``0xRRGGBB`` value."""
        return self.r << 16 | self.g << 8 | self.b

    @property
    def argb(self) -> int:
        """Packed ``0xAARRGGBB`` value."""
        return self.a << 24 | self.rgb

    @property
    def is_opaque(self) -> bool:
        return self.a == 255


@dataclass(frozen=True, slots=True)
class AffineTransform:
    """2D affine transform in ``java.awt.geom.AffineTransform`` order.

    Maps ``(x, y)`` to ``(m00*x + m01*y + m02, m10*x + m11*y + m12)``.
    """

    m00: float = 1.0
    m10: float = 0.0
    m01: float = 0.0
    m11: float = 1.0
    m02: float = 0.0
    m12: float = 0.0

    @classmethod
    def translation(cls, tx: float, ty: float) -> AffineTransform:
        return cls(m02=tx, m12=ty)

    @classmethod
    def scaling(cls, sx: float, sy: float | None = None) -> AffineTransform:
        return cls(m00=sx, m11=sx if sy is None else sy)

    @classmethod
    def rotation(cls, theta: float) -> AffineTransform:
        cos, sin = math.cos(theta), math.sin(theta)
        return cls(m00=cos, m10=sin, m01=-sin, m11=cos)

    @property
    def matrix(self) -> tuple[float, float, float, float, float, float]:
        """The six components in constructor order."""
        return (self.m00, self.m10, self.m01, self.m11, self.m02, self.m12)

    @property
    def is_identity(self) -> bool:
        return self.matrix == (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


IDENTITY = AffineTransform()


@dataclass(frozen=True, slots=True)
class AlphaComposite:
    """Compositing rule plus constant alpha.

    Parameters
    ----------
    rule : CompositeRule
        Porter-Duff rule.
    alpha : float
        Extra opacity in [0, 1], multiplied into every draw.
    """

    rule: CompositeRule = CompositeRule.SRC_OVER
    alpha: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(
                f"AlphaComposite alpha must be in [0, 1], got {self.alpha}"
            )


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

Extent = tuple[float, float, float, float]
"""Axis-aligned ``(min_x, min_y, max_x, max_y)``."""


@dataclass(frozen=True, slots=True)
class PathSegment(ABC):
    """Base class for path segments."""

    pass


@dataclass(frozen=True, slots=True)
class MoveTo(PathSegment):
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class LineTo(PathSegment):
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class QuadTo(PathSegment):
    """Quadratic Bezier through control point ``(x1, y1)``."""

    x1: float
    y1: float
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class CubicTo(PathSegment):
    """Cubic Bezier through control points ``(x1, y1)``, ``(x2, y2)``."""

    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class ClosePath(PathSegment):
    pass


@dataclass(frozen=True, slots=True)
class Geometry(ABC):
    """Base class for all shape geometries."""

    def extent(self) -> Extent | None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Path(Geometry):
    """General path built from ordered segments.

    The extent is the hull of all end and control points, matching the
    loose bounds a ``GeneralPath`` reports.
    """

    segments: tuple[PathSegment, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "segments", tuple(self.segments))

    def extent(self) -> Extent | None:
        xs: list[float] = []
        ys: list[float] = []
        for seg in self.segments:
            if isinstance(seg, (MoveTo, LineTo)):
                xs.append(seg.x)
                ys.append(seg.y)
            elif isinstance(seg, QuadTo):
                xs += [seg.x1, seg.x]
                ys += [seg.y1, seg.y]
            elif isinstance(seg, CubicTo):
                xs += [seg.x1, seg.x2, seg.x]
                ys += [seg.y1, seg.y2, seg.y]
        if not xs:
            return None
        return (min(xs), min(ys), max(xs), max(ys))


@dataclass(frozen=True, slots=True)
class Rectangle(Geometry):
    x: float
    y: float
    width: float
    height: float

    def extent(self) -> Extent | None:
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(frozen=True, slots=True)
class RoundRectangle(Geometry):
    """Rectangle with elliptical corners of ``arc_width`` x ``arc_height``."""

    x: float
    y: float
    width: float
    height: float
    arc_width: float
    arc_height: float

    def extent(self) -> Extent | None:
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(frozen=True, slots=True)
class Ellipse(Geometry):
    """Ellipse inscribed in the frame ``(x, y, width, height)``."""

    x: float
    y: float
    width: float
    height: float

    def extent(self) -> Extent | None:
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(frozen=True, slots=True)
class Line(Geometry):
    x1: float
    y1: float
    x2: float
    y2: float

    def extent(self) -> Extent | None:
        return (
            min(self.x1, self.x2), min(self.y1, self.y2),
            max(self.x1, self.x2), max(self.y1, self.y2),
        )


# ---------------------------------------------------------------------------
# Paint
# ---------------------------------------------------------------------------


def _check_stops(fractions: tuple[float, ...], colors: tuple[Color, ...]) -> None:
    if len(fractions) != len(colors):
        raise ValueError(
            f"Gradient needs one color per fraction, got "
            f"{len(fractions)} fractions and {len(colors)} colors"
        )
    if len(fractions) < 2:
        raise ValueError(
            f"Gradient requires >= 2 stops, got {len(fractions)}"
        )


@dataclass(frozen=True, slots=True)
class LinearGradient:
    """Multi-stop gradient along the line ``start`` -> ``end``.

    Range and ordering of ``fractions`` are checked when the paint is
    formatted, not here, so invalid documents surface as
    ``InvalidGradient`` during transcoding.
    """

    start: Point
    end: Point
    fractions: tuple[float, ...]
    colors: tuple[Color, ...]
    cycle: CycleMethod = CycleMethod.NO_CYCLE
    color_space: ColorSpace = ColorSpace.SRGB
    transform: AffineTransform = IDENTITY

    def __post_init__(self) -> None:
        object.__setattr__(self, "fractions", tuple(self.fractions))
        object.__setattr__(self, "colors", tuple(self.colors))
        _check_stops(self.fractions, self.colors)


@dataclass(frozen=True, slots=True)
class RadialGradient:
    """Multi-stop gradient around ``center`` with an optional ``focus``."""

    center: Point
    radius: float
    focus: Point
    fractions: tuple[float, ...]
    colors: tuple[Color, ...]
    cycle: CycleMethod = CycleMethod.NO_CYCLE
    color_space: ColorSpace = ColorSpace.SRGB
    transform: AffineTransform = IDENTITY

    def __post_init__(self) -> None:
        object.__setattr__(self, "fractions", tuple(self.fractions))
        object.__setattr__(self, "colors", tuple(self.colors))
        _check_stops(self.fractions, self.colors)
        if self.radius <= 0:
            raise ValueError(
                f"RadialGradient radius must be > 0, got {self.radius}"
            )


Paint = Union[Color, LinearGradient, RadialGradient]


@dataclass(frozen=True, slots=True)
class StrokeStyle:
    """Outline parameters (``java.awt.BasicStroke`` defaults)."""

    width: float = 1.0
    cap: CapStyle = CapStyle.SQUARE
    join: JoinStyle = JoinStyle.MITER
    miter_limit: float = 10.0
    dash_array: tuple[float, ...] | None = None
    dash_phase: float = 0.0

    def __post_init__(self) -> None:
        if self.width < 0:
            raise ValueError(f"Stroke width must be >= 0, got {self.width}")
        if self.dash_array is not None:
            object.__setattr__(self, "dash_array", tuple(self.dash_array))


# ---------------------------------------------------------------------------
# Painters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Painter(ABC):
    """Base class for rendering operations applied to a geometry."""

    pass


@dataclass(frozen=True, slots=True)
class Fill(Painter):
    paint: Paint


@dataclass(frozen=True, slots=True)
class Stroke(Painter):
    paint: Paint
    style: StrokeStyle = field(default_factory=StrokeStyle)


@dataclass(frozen=True, slots=True)
class CompositePainter(Painter):
    """Several painters applied in order to the same geometry."""

    painters: tuple[Painter, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "painters", tuple(self.painters))


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Node(ABC):
    """Base class for scene tree nodes."""

    pass


@dataclass(frozen=True, slots=True)
class ShapeNode(Node):
    """One geometry rendered by one painter.

    Parameters
    ----------
    geometry : Geometry
        Shape outline in user space.
    painter : Painter
        Fill, stroke or composite painter.
    transform : AffineTransform | None
        Applied for this node only.  ``None`` is identity.
    composite : AlphaComposite | None
        ``None`` keeps the current composite.
    """

    geometry: Geometry
    painter: Painter
    transform: AffineTransform | None = None
    composite: AlphaComposite | None = None


@dataclass(frozen=True, slots=True)
class CompositeNode(Node):
    """Ordered group of child nodes (document order is z-order)."""

    children: tuple[Node, ...] = ()
    transform: AffineTransform | None = None
    composite: AlphaComposite | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True, slots=True)
class Scene:
    """A resolved vector graphic.

    Parameters
    ----------
    root : Node
        Top of the scene tree.
    width, height : float
        Declared document size, used as the bounding box when the tree
        draws nothing.
    """

    root: Node
    width: float
    height: float


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------


def iter_painters(painter: Painter) -> Iterator[Painter]:
    """Yield the leaf painters of *painter* in application order."""
    if isinstance(painter, CompositePainter):
        for sub in painter.painters:
            yield from iter_painters(sub)
    else:
        yield painter


def count_paint_operations(node: Node) -> int:
    """Number of fill/stroke applications the tree will produce."""
    if isinstance(node, ShapeNode):
        return sum(
            1 for p in iter_painters(node.painter) if isinstance(p, (Fill, Stroke))
        )
    if isinstance(node, CompositeNode):
        return sum(count_paint_operations(child) for child in node.children)
    return 0

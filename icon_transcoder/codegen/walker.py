"""Scene tree walker -- scene nodes to a flat Java 2D instruction stream.

The walker visits the tree depth-first and emits the statements a
``Graphics2D`` canvas needs to reproduce it, skipping any state change
the canvas already has:

* ``g.setComposite(...)`` only when the composite changes (the implicit
  full-opacity composite is never emitted first);
* ``g.setPaint(...)`` / ``g.setStroke(...)`` only when the canonical
  literal differs from the last one set;
* shape construction only when the geometry is not the very object used
  by the previous draw (identity, not equality).

Emission state is walk-global, mirroring a canvas that keeps its last
paint and stroke regardless of nesting.  It lives in an ``_Emission``
created per :meth:`SceneWalker.walk` call and threaded through the
recursion, so one walker can serve independent scenes.

Transform scopes
    A non-identity node transform is bracketed by
    ``transformations.push(g.getTransform())`` and
    ``g.setTransform(transformations.pop())``.  The pop is emitted on every
    exit path, including error propagation.

Generated statements rely on these names from the output template:
``g`` (Graphics2D), ``origAlpha`` (float), ``transformations``
(LinkedList<AffineTransform>) and ``shape`` (Shape).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from icon_transcoder.codegen.errors import (
    UnsupportedGeometry,
    UnsupportedNode,
    UnsupportedPainter,
)
from icon_transcoder.codegen.literals import (
    format_composite,
    format_double,
    format_float,
    format_paint,
    format_stroke,
    format_transform,
)
from icon_transcoder.scene.nodes import (
    AffineTransform,
    AlphaComposite,
    ClosePath,
    CompositeNode,
    CubicTo,
    Ellipse,
    Extent,
    Fill,
    Geometry,
    Line,
    LineTo,
    MoveTo,
    Node,
    Painter,
    Path,
    QuadTo,
    Rectangle,
    RoundRectangle,
    Scene,
    ShapeNode,
    Stroke,
    count_paint_operations,
    iter_painters,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Output artifact
# ---------------------------------------------------------------------------


class InstructionKind(Enum):
    COMMENT = "comment"
    SET_COMPOSITE = "set_composite"
    PUSH_TRANSFORM = "push_transform"
    TRANSFORM = "transform"
    POP_TRANSFORM = "pop_transform"
    SET_PAINT = "set_paint"
    SET_STROKE = "set_stroke"
    SHAPE = "shape"
    FILL = "fill"
    DRAW = "draw"


@dataclass(frozen=True, slots=True)
class Instruction:
    """One atomic unit of generated code.

    ``text`` has no trailing newline; shape construction for a path spans
    several lines but is never split.
    """

    kind: InstructionKind
    text: str

    @property
    def line(self) -> str:
        return self.text + "\n"


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Integer bounds of the drawing (each component ceiling-rounded)."""

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_extent(cls, extent: Extent) -> BoundingBox:
        min_x, min_y, max_x, max_y = extent
        return cls(
            x=math.ceil(min_x),
            y=math.ceil(min_y),
            width=math.ceil(max_x - min_x),
            height=math.ceil(max_y - min_y),
        )


@dataclass(frozen=True, slots=True)
class TranscodeResult:
    """Instruction stream plus bounding box for one scene."""

    instructions: tuple[Instruction, ...]
    bounds: BoundingBox

    @property
    def pieces(self) -> list[str]:
        """Atomic newline-terminated pieces, in order."""
        return [ins.line for ins in self.instructions]

    @property
    def text(self) -> str:
        return "".join(self.pieces)

    def of_kind(self, *kinds: InstructionKind) -> list[Instruction]:
        return [ins for ins in self.instructions if ins.kind in kinds]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _union(a: Extent | None, b: Extent | None) -> Extent | None:
    if a is None:
        return b
    if b is None:
        return a
    return (min(a[0], b[0]), min(a[1], b[1]), max(a[2], b[2]), max(a[3], b[3]))


def _inflate(extent: Extent | None, margin: float) -> Extent | None:
    if extent is None or margin == 0:
        return extent
    return (
        extent[0] - margin, extent[1] - margin,
        extent[2] + margin, extent[3] + margin,
    )


def _transform_extent(extent: Extent, transform: AffineTransform) -> Extent:
    """Axis-aligned bounds of the four transformed corners."""
    min_x, min_y, max_x, max_y = extent
    corners = np.array([
        [min_x, min_y, 1.0],
        [max_x, min_y, 1.0],
        [min_x, max_y, 1.0],
        [max_x, max_y, 1.0],
    ])
    matrix = np.array([
        [transform.m00, transform.m01, transform.m02],
        [transform.m10, transform.m11, transform.m12],
    ])
    pts = corners @ matrix.T
    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    return (float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))


def _has_transform(transform: AffineTransform | None) -> bool:
    return transform is not None and not transform.is_identity


@dataclass(slots=True)
class _Emission:
    """Mutable state for one walk: output buffer plus canvas memory."""

    out: list[Instruction] = field(default_factory=list)
    paint: str | None = None
    stroke: str | None = None
    shape: Geometry | None = None
    composite: AlphaComposite | None = None
    open_transforms: int = 0

    def emit(self, kind: InstructionKind, text: str) -> None:
        self.out.append(Instruction(kind, text))


@dataclass(frozen=True, slots=True)
class _PaintStep:
    """A validated fill or draw, ready to emit."""

    kind: InstructionKind
    paint: str
    stroke: str | None = None
    margin: float = 0.0


# ---------------------------------------------------------------------------
# Walker
# ---------------------------------------------------------------------------


class SceneWalker:
    """Convert a scene tree to a state-diffed instruction stream.

    Notes
    -----
    The walker holds no per-walk state of its own; every call to
    :meth:`walk` starts from a fresh canvas memory.
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def walk(self, scene: Scene) -> TranscodeResult:
        """Emit instructions for *scene*.

        Parameters
        ----------
        scene : Scene
            Resolved scene tree.  Not modified.

        Returns
        -------
        TranscodeResult
            Instructions in drawing order and the ceiling-rounded bounds.
            A tree that draws nothing reports the declared document size.

        Raises
        ------
        UnsupportedNode, UnsupportedGeometry, UnsupportedPaint,
        UnsupportedPainter, UnsupportedCompositeRule, InvalidGradient
            On the first element that cannot be transcoded.  No partial
            result is returned.
        """
        emission = _Emission()
        extent = self._visit(scene.root, "", emission)
        assert emission.open_transforms == 0, "unbalanced transform scopes"

        if extent is None:
            bounds = BoundingBox(0, 0, math.ceil(scene.width), math.ceil(scene.height))
        else:
            bounds = BoundingBox.from_extent(extent)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Walked scene: %d instructions, %d paint operations, bounds %s",
                len(emission.out), count_paint_operations(scene.root), bounds,
            )
        return TranscodeResult(instructions=tuple(emission.out), bounds=bounds)

    # ------------------------------------------------------------------
    # Internal: nodes
    # ------------------------------------------------------------------

    def _visit(self, node: Node, label: str, emission: _Emission) -> Extent | None:
        if isinstance(node, ShapeNode):
            # Everything is canonicalized before the node emits anything.
            geometry_code = self._geometry_code(node.geometry)
            steps = self._plan_painter(node.painter)
        elif not isinstance(node, CompositeNode):
            raise UnsupportedNode(node)

        self._apply_composite(node.composite, emission)

        with self._transform_scope(node.transform, emission):
            if label:
                emission.emit(InstructionKind.COMMENT, f"// {label}")
            if isinstance(node, ShapeNode):
                extent = self._emit_shape(node.geometry, geometry_code, steps, emission)
            else:
                extent = self._visit_children(node, label, emission)

        if extent is not None and _has_transform(node.transform):
            extent = _transform_extent(extent, node.transform)
        return extent

    def _visit_children(
        self, node: CompositeNode, label: str, emission: _Emission,
    ) -> Extent | None:
        extent: Extent | None = None
        for index, child in enumerate(node.children):
            child_extent = self._visit(child, f"{label}_{index}", emission)
            extent = _union(extent, child_extent)
        return extent

    def _apply_composite(
        self, composite: AlphaComposite | None, emission: _Emission,
    ) -> None:
        if composite is None:
            return
        text = format_composite(composite)
        if composite == emission.composite:
            return
        if emission.composite is None and composite.alpha == 1:
            return
        emission.composite = composite
        emission.emit(InstructionKind.SET_COMPOSITE, f"g.setComposite({text});")

    @contextmanager
    def _transform_scope(
        self, transform: AffineTransform | None, emission: _Emission,
    ) -> Iterator[None]:
        if not _has_transform(transform):
            yield
            return

        text = format_transform(transform)
        emission.emit(
            InstructionKind.PUSH_TRANSFORM,
            "transformations.push(g.getTransform());",
        )
        emission.emit(InstructionKind.TRANSFORM, f"g.transform({text});")
        emission.open_transforms += 1
        try:
            yield
        finally:
            emission.emit(
                InstructionKind.POP_TRANSFORM,
                "g.setTransform(transformations.pop());",
            )
            emission.open_transforms -= 1

    # ------------------------------------------------------------------
    # Internal: shapes and painters
    # ------------------------------------------------------------------

    def _plan_painter(self, painter: Painter) -> list[_PaintStep]:
        """Flatten *painter* into validated steps, in application order."""
        steps: list[_PaintStep] = []
        for leaf in iter_painters(painter):
            if isinstance(leaf, Fill):
                steps.append(_PaintStep(InstructionKind.FILL, format_paint(leaf.paint)))
            elif isinstance(leaf, Stroke):
                steps.append(_PaintStep(
                    InstructionKind.DRAW,
                    format_paint(leaf.paint),
                    format_stroke(leaf.style),
                    leaf.style.width / 2.0,
                ))
            else:
                raise UnsupportedPainter(leaf)
        return steps

    def _emit_shape(
        self,
        geometry: Geometry,
        geometry_code: str,
        steps: list[_PaintStep],
        emission: _Emission,
    ) -> Extent | None:
        margin = 0.0
        for step in steps:
            if step.paint != emission.paint:
                emission.paint = step.paint
                emission.emit(InstructionKind.SET_PAINT, f"g.setPaint({step.paint});")

            if step.kind is InstructionKind.DRAW:
                if step.stroke != emission.stroke:
                    emission.stroke = step.stroke
                    emission.emit(
                        InstructionKind.SET_STROKE, f"g.setStroke({step.stroke});",
                    )

            if geometry is not emission.shape:
                emission.emit(InstructionKind.SHAPE, geometry_code)
                emission.shape = geometry

            if step.kind is InstructionKind.DRAW:
                emission.emit(InstructionKind.DRAW, "g.draw(shape);")
                margin = max(margin, step.margin)
            else:
                emission.emit(InstructionKind.FILL, "g.fill(shape);")

        return _inflate(geometry.extent(), margin)

    # ------------------------------------------------------------------
    # Internal: geometry
    # ------------------------------------------------------------------

    def _geometry_code(self, geometry: Geometry) -> str:
        d = format_double
        if isinstance(geometry, Path):
            return self._path_code(geometry)
        if isinstance(geometry, Rectangle):
            return (
                f"shape = new Rectangle2D.Double({d(geometry.x)}, {d(geometry.y)}, "
                f"{d(geometry.width)}, {d(geometry.height)});"
            )
        if isinstance(geometry, RoundRectangle):
            return (
                f"shape = new RoundRectangle2D.Double({d(geometry.x)}, {d(geometry.y)}, "
                f"{d(geometry.width)}, {d(geometry.height)}, "
                f"{d(geometry.arc_width)}, {d(geometry.arc_height)});"
            )
        if isinstance(geometry, Ellipse):
            return (
                f"shape = new Ellipse2D.Double({d(geometry.x)}, {d(geometry.y)}, "
                f"{d(geometry.width)}, {d(geometry.height)});"
            )
        if isinstance(geometry, Line):
            return (
                f"shape = new Line2D.Double({d(geometry.x1)}, {d(geometry.y1)}, "
                f"{d(geometry.x2)}, {d(geometry.y2)});"
            )
        raise UnsupportedGeometry(geometry)

    def _path_code(self, path: Path) -> str:
        f = format_float
        lines = ["shape = new GeneralPath();"]
        for seg in path.segments:
            if isinstance(seg, MoveTo):
                call = f"moveTo({f(seg.x)}, {f(seg.y)})"
            elif isinstance(seg, LineTo):
                call = f"lineTo({f(seg.x)}, {f(seg.y)})"
            elif isinstance(seg, QuadTo):
                call = f"quadTo({f(seg.x1)}, {f(seg.y1)}, {f(seg.x)}, {f(seg.y)})"
            elif isinstance(seg, CubicTo):
                call = (
                    f"curveTo({f(seg.x1)}, {f(seg.y1)}, {f(seg.x2)}, "
                    f"{f(seg.y2)}, {f(seg.x)}, {f(seg.y)})"
                )
            elif isinstance(seg, ClosePath):
                call = "closePath()"
            else:
                raise UnsupportedGeometry(seg)
            lines.append(f"((GeneralPath) shape).{call};")
        return "\n".join(lines)

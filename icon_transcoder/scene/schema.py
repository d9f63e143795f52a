"""Resolved-scene documents (``scene.v1``): YAML schema and loader.

A scene document is a fully resolved vector graphic written as YAML:
no units, styles or references, only geometry, paint and transforms.
It is validated with pydantic and converted to the immutable tree in
:mod:`icon_transcoder.scene.nodes`.

Document layout::

    schema: scene.v1
    width: 16
    height: 16
    root:
      type: group
      transform: [1, 0, 0, 1, 2, 2]     # m00 m10 m01 m11 m02 m12
      composite: {rule: SRC_OVER, alpha: 0.5}
      children:
        - type: shape
          geometry: {type: rect, x: 0, y: 0, width: 4, height: 4}
          painters:
            - {type: fill, paint: {type: color, rgba: [255, 0, 0, 255]}}

Geometry types: ``path`` (``segments: [[M, x, y], [L, x, y], [Q, x1, y1,
x, y], [C, x1, y1, x2, y2, x, y], [Z]]``), ``rect``, ``round_rect``,
``ellipse``, ``line``.  Paint types: ``color`` (``rgba`` or ``hex``),
``linear``, ``radial``.  Painter types: ``fill``, ``stroke``.

Every painter of one shape refers to the same geometry object, so a
fill followed by a stroke constructs the shape once.

Gradient fraction range and ordering are *not* checked here; the
transcoder reports them as ``InvalidGradient``.

Usage:
    from icon_transcoder.scene.schema import load_scene
    scene = load_scene("icons/close.scene.yaml.gz")
"""

from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from icon_transcoder.scene import nodes
from icon_transcoder.utils import fs


class SceneDocumentError(ValueError):
    """Raised when a scene document is malformed or fails validation."""

    pass


Transform = Tuple[float, float, float, float, float, float]
ColorValue = Union[str, Tuple[int, int, int], Tuple[int, int, int, int]]

_SEGMENT_ARITY = {"M": 2, "L": 2, "Q": 4, "C": 6, "Z": 0}


# ============================================================================
# GEOMETRY
# ============================================================================

class PathModel(BaseModel):
    """General path as a list of ``[op, *coords]`` segments."""
    type: Literal["path"]
    segments: List[List[Union[str, float]]] = Field(default_factory=list)

    @field_validator('segments')
    @classmethod
    def validate_segments(cls, v: List[List[Union[str, float]]]) -> List[List[Union[str, float]]]:
        for i, seg in enumerate(v):
            if not seg or not isinstance(seg[0], str):
                raise ValueError(f"Segment {i} must start with an operator, got {seg}")
            op = seg[0].upper()
            if op not in _SEGMENT_ARITY:
                raise ValueError(
                    f"Segment {i}: operator must be one of {sorted(_SEGMENT_ARITY)}, got '{seg[0]}'"
                )
            coords = seg[1:]
            if len(coords) != _SEGMENT_ARITY[op]:
                raise ValueError(
                    f"Segment {i}: '{op}' takes {_SEGMENT_ARITY[op]} coordinates, got {len(coords)}"
                )
            if any(isinstance(c, str) for c in coords):
                raise ValueError(f"Segment {i}: coordinates must be numbers, got {coords}")
        return v


class RectModel(BaseModel):
    type: Literal["rect"]
    x: float = 0.0
    y: float = 0.0
    width: float = Field(..., ge=0.0)
    height: float = Field(..., ge=0.0)


class RoundRectModel(BaseModel):
    type: Literal["round_rect"]
    x: float = 0.0
    y: float = 0.0
    width: float = Field(..., ge=0.0)
    height: float = Field(..., ge=0.0)
    arc_width: float = Field(..., ge=0.0)
    arc_height: float = Field(..., ge=0.0)


class EllipseModel(BaseModel):
    type: Literal["ellipse"]
    x: float = 0.0
    y: float = 0.0
    width: float = Field(..., ge=0.0)
    height: float = Field(..., ge=0.0)


class LineModel(BaseModel):
    type: Literal["line"]
    x1: float
    y1: float
    x2: float
    y2: float


GeometryModel = Annotated[
    Union[PathModel, RectModel, RoundRectModel, EllipseModel, LineModel],
    Field(discriminator="type"),
]


# ============================================================================
# PAINT
# ============================================================================

class ColorModel(BaseModel):
    """Solid color given as ``rgba: [r, g, b, a]`` or ``hex: "#RRGGBB[AA]"``."""
    type: Literal["color"]
    rgba: Optional[Tuple[int, int, int, int]] = None
    hex: Optional[str] = None

    @model_validator(mode='after')
    def validate_one_form(self) -> 'ColorModel':
        if (self.rgba is None) == (self.hex is None):
            raise ValueError("Color needs exactly one of 'rgba' or 'hex'")
        return self


class _GradientBase(BaseModel):
    fractions: List[float] = Field(..., min_length=2)
    colors: List[ColorValue] = Field(..., min_length=2)
    cycle: Literal["NO_CYCLE", "REFLECT", "REPEAT"] = "NO_CYCLE"
    color_space: Literal["SRGB", "LINEAR_RGB"] = "SRGB"
    transform: Optional[Transform] = None

    @model_validator(mode='after')
    def validate_stop_count(self) -> '_GradientBase':
        if len(self.fractions) != len(self.colors):
            raise ValueError(
                f"Gradient needs one color per fraction, got "
                f"{len(self.fractions)} fractions and {len(self.colors)} colors"
            )
        return self


class LinearModel(_GradientBase):
    type: Literal["linear"]
    start: Tuple[float, float]
    end: Tuple[float, float]


class RadialModel(_GradientBase):
    type: Literal["radial"]
    center: Tuple[float, float]
    radius: float = Field(..., gt=0.0)
    focus: Optional[Tuple[float, float]] = Field(None, description="Defaults to center")


PaintModel = Annotated[
    Union[ColorModel, LinearModel, RadialModel],
    Field(discriminator="type"),
]


# ============================================================================
# PAINTERS
# ============================================================================

class StrokeStyleModel(BaseModel):
    width: float = Field(1.0, ge=0.0)
    cap: Literal["BUTT", "ROUND", "SQUARE"] = "SQUARE"
    join: Literal["MITER", "ROUND", "BEVEL"] = "MITER"
    miter_limit: float = Field(10.0, ge=1.0)
    dash_array: Optional[List[float]] = None
    dash_phase: float = Field(0.0, ge=0.0)

    @field_validator('dash_array')
    @classmethod
    def validate_dashes(cls, v: Optional[List[float]]) -> Optional[List[float]]:
        if v is None:
            return v
        if not v or any(d < 0 for d in v) or all(d == 0 for d in v):
            raise ValueError(f"dash_array must be non-negative and not all zero, got {v}")
        return v


class FillModel(BaseModel):
    type: Literal["fill"]
    paint: PaintModel


class StrokeModel(BaseModel):
    type: Literal["stroke"]
    paint: PaintModel
    style: StrokeStyleModel = Field(default_factory=StrokeStyleModel)


PainterModel = Annotated[
    Union[FillModel, StrokeModel],
    Field(discriminator="type"),
]


# ============================================================================
# NODES
# ============================================================================

class CompositeModel(BaseModel):
    rule: Literal[
        "CLEAR", "SRC", "SRC_OVER", "DST_OVER", "SRC_IN", "DST_IN",
        "SRC_OUT", "DST_OUT", "DST", "SRC_ATOP", "DST_ATOP", "XOR",
    ] = "SRC_OVER"
    alpha: float = Field(1.0, ge=0.0, le=1.0)


class ShapeNodeModel(BaseModel):
    """Geometry plus one or more painters, applied in order."""
    type: Literal["shape"]
    geometry: GeometryModel
    painters: List[PainterModel] = Field(..., min_length=1)
    transform: Optional[Transform] = None
    composite: Optional[CompositeModel] = None


class GroupNodeModel(BaseModel):
    """Children in z-order (first drawn first)."""
    type: Literal["group"]
    children: List[Union[ShapeNodeModel, 'GroupNodeModel']] = Field(default_factory=list)
    transform: Optional[Transform] = None
    composite: Optional[CompositeModel] = None


GroupNodeModel.model_rebuild()


class SceneDocumentV1(BaseModel):
    """Top-level ``scene.v1`` document."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("scene.v1", alias="schema", description="Schema version")
    width: float = Field(..., ge=0.0, description="Declared document width")
    height: float = Field(..., ge=0.0, description="Declared document height")
    root: Union[ShapeNodeModel, GroupNodeModel]

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "scene.v1":
            raise ValueError(f"Expected schema 'scene.v1', got '{v}'")
        return v

    def to_scene(self) -> nodes.Scene:
        """Convert to the immutable scene tree."""
        return nodes.Scene(
            root=_convert_node(self.root),
            width=self.width,
            height=self.height,
        )


# ============================================================================
# CONVERSION
# ============================================================================

def _convert_transform(t: Optional[Transform]) -> Optional[nodes.AffineTransform]:
    if t is None:
        return None
    return nodes.AffineTransform(*t)


def _convert_composite(c: Optional[CompositeModel]) -> Optional[nodes.AlphaComposite]:
    if c is None:
        return None
    return nodes.AlphaComposite(rule=nodes.CompositeRule[c.rule], alpha=c.alpha)


def _convert_color_value(value: ColorValue) -> nodes.Color:
    if isinstance(value, str):
        return nodes.Color.from_hex(value)
    return nodes.Color(*value)


def _convert_geometry(g: Any) -> nodes.Geometry:
    if isinstance(g, PathModel):
        segments: List[nodes.PathSegment] = []
        for seg in g.segments:
            op = str(seg[0]).upper()
            coords = [float(c) for c in seg[1:]]
            if op == "M":
                segments.append(nodes.MoveTo(*coords))
            elif op == "L":
                segments.append(nodes.LineTo(*coords))
            elif op == "Q":
                segments.append(nodes.QuadTo(*coords))
            elif op == "C":
                segments.append(nodes.CubicTo(*coords))
            else:
                segments.append(nodes.ClosePath())
        return nodes.Path(tuple(segments))
    if isinstance(g, RectModel):
        return nodes.Rectangle(g.x, g.y, g.width, g.height)
    if isinstance(g, RoundRectModel):
        return nodes.RoundRectangle(g.x, g.y, g.width, g.height, g.arc_width, g.arc_height)
    if isinstance(g, EllipseModel):
        return nodes.Ellipse(g.x, g.y, g.width, g.height)
    return nodes.Line(g.x1, g.y1, g.x2, g.y2)


def _convert_paint(p: Any) -> nodes.Paint:
    if isinstance(p, ColorModel):
        if p.hex is not None:
            return nodes.Color.from_hex(p.hex)
        return nodes.Color(*p.rgba)

    common: Dict[str, Any] = dict(
        fractions=tuple(p.fractions),
        colors=tuple(_convert_color_value(c) for c in p.colors),
        cycle=nodes.CycleMethod(p.cycle),
        color_space=nodes.ColorSpace(p.color_space),
        transform=_convert_transform(p.transform) or nodes.IDENTITY,
    )
    if isinstance(p, LinearModel):
        return nodes.LinearGradient(
            start=nodes.Point(*p.start), end=nodes.Point(*p.end), **common,
        )
    focus = p.focus if p.focus is not None else p.center
    return nodes.RadialGradient(
        center=nodes.Point(*p.center), radius=p.radius,
        focus=nodes.Point(*focus), **common,
    )


def _convert_painter(p: Any) -> nodes.Painter:
    if isinstance(p, FillModel):
        return nodes.Fill(_convert_paint(p.paint))
    s = p.style
    style = nodes.StrokeStyle(
        width=s.width,
        cap=nodes.CapStyle[s.cap],
        join=nodes.JoinStyle[s.join],
        miter_limit=s.miter_limit,
        dash_array=tuple(s.dash_array) if s.dash_array is not None else None,
        dash_phase=s.dash_phase,
    )
    return nodes.Stroke(_convert_paint(p.paint), style)


def _convert_node(n: Union[ShapeNodeModel, GroupNodeModel]) -> nodes.Node:
    if isinstance(n, ShapeNodeModel):
        painters = [_convert_painter(p) for p in n.painters]
        painter = painters[0] if len(painters) == 1 else nodes.CompositePainter(tuple(painters))
        return nodes.ShapeNode(
            geometry=_convert_geometry(n.geometry),
            painter=painter,
            transform=_convert_transform(n.transform),
            composite=_convert_composite(n.composite),
        )
    return nodes.CompositeNode(
        children=tuple(_convert_node(c) for c in n.children),
        transform=_convert_transform(n.transform),
        composite=_convert_composite(n.composite),
    )


# ============================================================================
# PUBLIC API
# ============================================================================

def parse_scene(data: Any, source: str = "<document>") -> nodes.Scene:
    """Validate a parsed YAML mapping and convert it to a scene tree.

    Parameters
    ----------
    data : Any
        Output of ``yaml.safe_load`` for a scene document
    source : str
        Name used in error messages

    Returns
    -------
    Scene
        Immutable scene tree

    Raises
    ------
    SceneDocumentError
        If the document is not a mapping, fails validation, or holds
        out-of-range values (e.g. a color channel above 255)
    """
    if not isinstance(data, dict):
        raise SceneDocumentError(
            f"Scene document {source} must be a mapping, got {type(data).__name__}"
        )
    try:
        document = SceneDocumentV1.model_validate(data)
    except ValidationError as e:
        raise SceneDocumentError(f"Scene validation failed at {source}: {e}") from e
    try:
        return document.to_scene()
    except ValueError as e:
        raise SceneDocumentError(f"Invalid scene value at {source}: {e}") from e


def load_scene(path: Union[str, Path]) -> nodes.Scene:
    """Load and validate a scene document (plain or ``.gz``).

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    SceneDocumentError
        If parsing or validation fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scene document not found: {path}")
    try:
        data = fs.load_yaml(path)
    except yaml.YAMLError as e:
        raise SceneDocumentError(str(e)) from e
    return parse_scene(data, source=str(path))

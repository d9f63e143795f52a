"""
Scene tree module.

Defines every element of a resolved vector graphic as an immutable
dataclass. This vocabulary is the contract between a parsed document and
code generation.
"""

from icon_transcoder.scene.nodes import (
    AffineTransform,
    AlphaComposite,
    Color,
    CompositeNode,
    CompositePainter,
    Fill,
    Node,
    Scene,
    ShapeNode,
    Stroke,
    StrokeStyle,
)

__all__ = [
    "AffineTransform",
    "AlphaComposite",
    "Color",
    "CompositeNode",
    "CompositePainter",
    "Fill",
    "Node",
    "Scene",
    "ShapeNode",
    "Stroke",
    "StrokeStyle",
]

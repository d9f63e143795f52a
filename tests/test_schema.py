"""Tests for scene.v1 document validation and conversion.

Tests for icon_transcoder.scene.schema:
    - Valid documents convert to the expected tree
    - Structural errors surface as SceneDocumentError
    - Gzipped documents load transparently

Run:
    pytest tests/test_schema.py -v
"""

from __future__ import annotations

import gzip
from pathlib import Path
from typing import Any

import pytest
import yaml

from icon_transcoder.scene import nodes
from icon_transcoder.scene.schema import SceneDocumentError, load_scene, parse_scene


def _doc(root: dict[str, Any], **extra: Any) -> dict[str, Any]:
    return {"schema": "scene.v1", "width": 16, "height": 16, "root": root, **extra}


def _shape(geometry: dict[str, Any], *painters: dict[str, Any], **extra: Any) -> dict[str, Any]:
    return {"type": "shape", "geometry": geometry, "painters": list(painters), **extra}


RECT = {"type": "rect", "x": 0, "y": 0, "width": 4, "height": 4}
RED_FILL = {"type": "fill", "paint": {"type": "color", "rgba": [255, 0, 0, 255]}}


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


class TestConversion:
    def test_group_with_shape(self) -> None:
        scene = parse_scene(_doc({
            "type": "group",
            "transform": [1, 0, 0, 1, 2, 2],
            "composite": {"rule": "SRC_OVER", "alpha": 0.5},
            "children": [_shape(RECT, RED_FILL)],
        }))
        assert scene.width == 16
        root = scene.root
        assert isinstance(root, nodes.CompositeNode)
        assert root.transform == nodes.AffineTransform.translation(2, 2)
        assert root.composite == nodes.AlphaComposite(nodes.CompositeRule.SRC_OVER, 0.5)
        child = root.children[0]
        assert isinstance(child, nodes.ShapeNode)
        assert child.geometry == nodes.Rectangle(0, 0, 4, 4)
        assert child.painter == nodes.Fill(nodes.Color(255, 0, 0))

    def test_path_segments(self) -> None:
        geometry = {"type": "path", "segments": [
            ["M", 0, 0], ["L", 4, 0], ["Q", 4, 4, 0, 4], ["C", 0, 2, 1, 1, 0, 0], ["Z"],
        ]}
        scene = parse_scene(_doc(_shape(geometry, RED_FILL)))
        assert scene.root.geometry.segments == (
            nodes.MoveTo(0, 0),
            nodes.LineTo(4, 0),
            nodes.QuadTo(4, 4, 0, 4),
            nodes.CubicTo(0, 2, 1, 1, 0, 0),
            nodes.ClosePath(),
        )

    def test_hex_color(self) -> None:
        painter = {"type": "fill", "paint": {"type": "color", "hex": "#11223380"}}
        scene = parse_scene(_doc(_shape(RECT, painter)))
        assert scene.root.painter.paint == nodes.Color(0x11, 0x22, 0x33, 0x80)

    def test_fill_and_stroke_share_geometry(self) -> None:
        stroke = {
            "type": "stroke",
            "paint": {"type": "color", "hex": "#000000"},
            "style": {"width": 2, "cap": "ROUND", "join": "BEVEL", "dash_array": [1, 1]},
        }
        scene = parse_scene(_doc(_shape(RECT, RED_FILL, stroke)))
        painter = scene.root.painter
        assert isinstance(painter, nodes.CompositePainter)
        fill, stroke_painter = painter.painters
        assert isinstance(fill, nodes.Fill)
        assert stroke_painter.style == nodes.StrokeStyle(
            width=2, cap=nodes.CapStyle.ROUND, join=nodes.JoinStyle.BEVEL,
            dash_array=(1.0, 1.0),
        )

    def test_linear_gradient(self) -> None:
        paint = {
            "type": "linear", "start": [0, 0], "end": [16, 0],
            "fractions": [0, 0.5, 1], "colors": ["#FF0000", [0, 255, 0], [0, 0, 255, 128]],
            "cycle": "REPEAT",
        }
        scene = parse_scene(_doc(_shape(RECT, {"type": "fill", "paint": paint})))
        gradient = scene.root.painter.paint
        assert isinstance(gradient, nodes.LinearGradient)
        assert gradient.colors == (
            nodes.Color(255, 0, 0), nodes.Color(0, 255, 0), nodes.Color(0, 0, 255, 128),
        )
        assert gradient.cycle is nodes.CycleMethod.REPEAT
        assert gradient.transform.is_identity

    def test_radial_focus_defaults_to_center(self) -> None:
        paint = {
            "type": "radial", "center": [8, 8], "radius": 4,
            "fractions": [0, 1], "colors": ["#FFFFFF", "#000000"],
        }
        scene = parse_scene(_doc(_shape(RECT, {"type": "fill", "paint": paint})))
        gradient = scene.root.painter.paint
        assert gradient.focus == gradient.center == nodes.Point(8, 8)

    def test_decreasing_fractions_left_to_transcoder(self) -> None:
        paint = {
            "type": "linear", "start": [0, 0], "end": [1, 0],
            "fractions": [0.9, 0.1], "colors": ["#FF0000", "#0000FF"],
        }
        scene = parse_scene(_doc(_shape(RECT, {"type": "fill", "paint": paint})))
        assert scene.root.painter.paint.fractions == (0.9, 0.1)


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class TestValidation:
    def test_wrong_schema(self) -> None:
        with pytest.raises(SceneDocumentError, match="scene.v1"):
            parse_scene(_doc(_shape(RECT, RED_FILL), schema="scene.v2"))

    def test_not_a_mapping(self) -> None:
        with pytest.raises(SceneDocumentError, match="mapping"):
            parse_scene([1, 2, 3])

    def test_unknown_geometry_type(self) -> None:
        with pytest.raises(SceneDocumentError):
            parse_scene(_doc(_shape({"type": "star", "points": 5}, RED_FILL)))

    def test_bad_segment_arity(self) -> None:
        geometry = {"type": "path", "segments": [["M", 0]]}
        with pytest.raises(SceneDocumentError, match="takes 2 coordinates"):
            parse_scene(_doc(_shape(geometry, RED_FILL)))

    def test_shape_needs_a_painter(self) -> None:
        with pytest.raises(SceneDocumentError):
            parse_scene(_doc(_shape(RECT)))

    def test_color_channel_out_of_range(self) -> None:
        painter = {"type": "fill", "paint": {"type": "color", "rgba": [300, 0, 0, 255]}}
        with pytest.raises(SceneDocumentError, match="Invalid scene value"):
            parse_scene(_doc(_shape(RECT, painter)))

    def test_color_needs_one_form(self) -> None:
        painter = {"type": "fill", "paint": {"type": "color"}}
        with pytest.raises(SceneDocumentError, match="exactly one"):
            parse_scene(_doc(_shape(RECT, painter)))

    def test_gradient_stop_mismatch(self) -> None:
        paint = {
            "type": "linear", "start": [0, 0], "end": [1, 0],
            "fractions": [0, 0.5, 1], "colors": ["#FF0000", "#0000FF"],
        }
        with pytest.raises(SceneDocumentError, match="one color per fraction"):
            parse_scene(_doc(_shape(RECT, {"type": "fill", "paint": paint})))

    def test_composite_alpha_range(self) -> None:
        root = _shape(RECT, RED_FILL, composite={"rule": "SRC_OVER", "alpha": 2})
        with pytest.raises(SceneDocumentError):
            parse_scene(_doc(root))


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestLoadScene:
    def test_plain_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "red.scene.yaml"
        path.write_text(yaml.safe_dump(_doc(_shape(RECT, RED_FILL))), encoding="utf-8")
        assert isinstance(load_scene(path).root, nodes.ShapeNode)

    def test_gzipped_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "red.scene.yaml.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(yaml.safe_dump(_doc(_shape(RECT, RED_FILL))))
        assert isinstance(load_scene(path).root, nodes.ShapeNode)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_scene(tmp_path / "missing.scene.yaml")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.scene.yaml"
        path.write_text("root: [unclosed\n", encoding="utf-8")
        with pytest.raises(SceneDocumentError):
            load_scene(path)

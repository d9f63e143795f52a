"""Tests for the scene tree vocabulary.

Validates construction-time checks (color channels, composite alpha,
gradient stop counts), transform helpers, geometry extents and the
paint-operation counter.
"""

from __future__ import annotations

import math

import pytest

from icon_transcoder.scene.nodes import (
    AffineTransform,
    AlphaComposite,
    ClosePath,
    Color,
    CompositeNode,
    CompositePainter,
    CubicTo,
    Ellipse,
    Fill,
    LinearGradient,
    Line,
    LineTo,
    MoveTo,
    Path,
    Point,
    QuadTo,
    RadialGradient,
    Rectangle,
    ShapeNode,
    Stroke,
    StrokeStyle,
    count_paint_operations,
    iter_painters,
)

RED = Color(255, 0, 0)
BLUE = Color(0, 0, 255)


# ---------------------------------------------------------------------------
# Primitive values
# ---------------------------------------------------------------------------


class TestColor:
    def test_channel_out_of_range_rejected(self) -> None:
        with pytest.raises(ValueError, match="must be in"):
            Color(256, 0, 0)

    def test_from_hex_rgb(self) -> None:
        assert Color.from_hex("#123456") == Color(0x12, 0x34, 0x56, 255)

    def test_from_hex_rgba(self) -> None:
        assert Color.from_hex("#FF000080") == Color(255, 0, 0, 128)

    def test_from_hex_bad_length(self) -> None:
        with pytest.raises(ValueError, match="RRGGBB"):
            Color.from_hex("#1234")

    def test_packed_values(self) -> None:
        c = Color(0x12, 0x34, 0x56, 0x78)
        assert c.rgb == 0x123456
        assert c.argb == 0x78123456
        assert not c.is_opaque


class TestAffineTransform:
    def test_default_is_identity(self) -> None:
        assert AffineTransform().is_identity

    def test_translation_matrix_order(self) -> None:
        t = AffineTransform.translation(2.0, 3.0)
        assert t.matrix == (1.0, 0.0, 0.0, 1.0, 2.0, 3.0)
        assert not t.is_identity

    def test_rotation_quarter_turn(self) -> None:
        t = AffineTransform.rotation(math.pi / 2)
        assert t.m10 == pytest.approx(1.0)
        assert t.m01 == pytest.approx(-1.0)


class TestAlphaComposite:
    def test_alpha_range(self) -> None:
        with pytest.raises(ValueError, match="alpha"):
            AlphaComposite(alpha=1.5)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


class TestExtent:
    def test_rectangle(self) -> None:
        assert Rectangle(1, 2, 3, 4).extent() == (1, 2, 4, 6)

    def test_ellipse(self) -> None:
        assert Ellipse(0, 0, 10, 5).extent() == (0, 0, 10, 5)

    def test_line_is_normalized(self) -> None:
        assert Line(10, 5, 0, 0).extent() == (0, 0, 10, 5)

    def test_path_includes_control_points(self) -> None:
        path = Path((
            MoveTo(0, 0),
            QuadTo(5, -5, 10, 0),
            CubicTo(12, 2, 12, 8, 10, 10),
            LineTo(0, 10),
            ClosePath(),
        ))
        assert path.extent() == (0, -5, 12, 10)

    def test_empty_path_has_no_extent(self) -> None:
        assert Path(()).extent() is None

    def test_segments_become_tuple(self) -> None:
        path = Path([MoveTo(0, 0)])
        assert isinstance(path.segments, tuple)


# ---------------------------------------------------------------------------
# Paint
# ---------------------------------------------------------------------------


class TestGradients:
    def test_mismatched_stops_rejected(self) -> None:
        with pytest.raises(ValueError, match="one color per fraction"):
            LinearGradient(Point(0, 0), Point(1, 0), (0.0, 0.5, 1.0), (RED, BLUE))

    def test_single_stop_rejected(self) -> None:
        with pytest.raises(ValueError, match=">= 2 stops"):
            LinearGradient(Point(0, 0), Point(1, 0), (0.0,), (RED,))

    def test_radial_radius_positive(self) -> None:
        with pytest.raises(ValueError, match="radius"):
            RadialGradient(Point(0, 0), 0.0, Point(0, 0), (0, 1), (RED, BLUE))

    def test_decreasing_fractions_accepted_at_construction(self) -> None:
        """Ordering is checked when the paint is formatted."""
        g = LinearGradient(Point(0, 0), Point(1, 0), (0.8, 0.2), (RED, BLUE))
        assert g.fractions == (0.8, 0.2)


class TestStrokeStyle:
    def test_negative_width_rejected(self) -> None:
        with pytest.raises(ValueError, match="width"):
            StrokeStyle(width=-1)

    def test_dash_array_becomes_tuple(self) -> None:
        assert StrokeStyle(dash_array=[2, 1]).dash_array == (2, 1)


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------


class TestTreeHelpers:
    def test_iter_painters_flattens(self) -> None:
        fill = Fill(RED)
        stroke = Stroke(BLUE)
        nested = CompositePainter((fill, CompositePainter((stroke, fill))))
        assert list(iter_painters(nested)) == [fill, stroke, fill]

    def test_count_paint_operations(self) -> None:
        rect = Rectangle(0, 0, 1, 1)
        tree = CompositeNode((
            ShapeNode(rect, Fill(RED)),
            CompositeNode((
                ShapeNode(rect, CompositePainter((Fill(RED), Stroke(BLUE)))),
            )),
        ))
        assert count_paint_operations(tree) == 3

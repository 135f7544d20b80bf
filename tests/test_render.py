"""Tests for colors and SVG rendering."""

import math

import pytest

from edge_bundling.geom import Line
from edge_bundling.layout import (
    THEMES,
    BundledEdgeRouter,
    CircleLayout,
    Gradient,
    RadialLabeler,
    Rgb,
    SvgPathContext,
    crossing_splines,
    edge_alpha,
    gradient_stroke,
    node_styles,
    render_svg,
)
from edge_bundling.layout.color import GREEN, RED
from edge_bundling.tree import Tree


class TestColor:
    """Tests for Rgb and Gradient."""

    def test_str_is_css(self):
        assert str(Rgb(1, 2, 3, 0.5)) == "rgba(1, 2, 3, 0.5)"

    def test_hex(self):
        assert Rgb(255, 0, 16).hex == "#ff0010"

    def test_parse(self):
        assert Rgb.parse("#ff0010") == Rgb(255, 0, 16)
        assert Rgb.parse("#f00") == Rgb(255, 0, 0)

    @pytest.mark.parametrize("value", ["#ff00", "red", "#gggggg"])
    def test_parse_invalid(self, value):
        with pytest.raises(ValueError):
            Rgb.parse(value)

    def test_with_alpha_is_a_copy(self):
        c = Rgb(1, 2, 3)
        assert c.with_alpha(0.2) == Rgb(1, 2, 3, 0.2)
        assert c.a == 1.0

    def test_gradient_ends(self):
        g = Gradient(GREEN, RED)
        assert g.color(0) == GREEN
        assert g.color(1) == RED

    def test_gradient_midpoint_rounds(self):
        g = Gradient(Rgb(0, 0, 0, 0.0), Rgb(255, 10, 1, 1.0))
        assert g.color(0.5) == Rgb(128, 5, 0, 0.5)


class TestGradientStroke:
    """Tests for the gradient draw strategy."""

    def test_one_element_per_step(self):
        tree, layout = _two_leaf_layout()
        router = BundledEdgeRouter(tree, layout)
        router.init()
        context = SvgPathContext()
        draw = gradient_stroke(Gradient(GREEN, RED), 4, alpha=0.5)
        draw(context, router.splines[0])
        assert len(context.elements) == 4
        assert "rgba(0, 255, 0, 0.5)" not in context.elements[0]
        assert "rgba(32, 223, 0, 0.5)" in context.elements[0]
        assert "rgba(223, 32, 0, 0.5)" in context.elements[-1]

    def test_does_not_flatten_spline(self):
        tree, layout = _two_leaf_layout()
        router = BundledEdgeRouter(tree, layout)
        router.init()
        spline = router.splines[0]
        gradient_stroke(Gradient(GREEN, RED), 3)(SvgPathContext(), spline)
        assert not spline.flat()

    def test_edge_alpha(self):
        assert edge_alpha(1) == pytest.approx(1.0)
        assert edge_alpha(0) == pytest.approx(1.0)
        assert 0.17 < edge_alpha(10_000) < 0.2


def _two_leaf_layout():
    """root -> {p -> {x, y}, q -> {z}}, with x -> z."""
    tree = Tree()
    p = tree.add_child()
    q = tree.add_child()
    x = p.add_child()
    p.add_child()
    z = q.add_child()
    x.add_edge(z)
    layout = CircleLayout(tree)
    layout.init()
    return tree, layout


class TestCrossingAndStyles:
    """Tests for edge selection by a cut line and node coloring."""

    def test_crossing_splines(self, small_tree):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        router = BundledEdgeRouter(s.tree, layout)
        router.init()
        # Vertical line through the centre separates A's leaves from B's leaf
        cut = Line(0, -2, 0, 2)
        selected = crossing_splines(router.splines, cut)
        assert [(sp.start, sp.end) for sp in selected] == [(3, 5)]

    def test_node_styles(self, small_tree):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        router = BundledEdgeRouter(s.tree, layout)
        router.init()
        theme = THEMES["light"]
        edge = [sp for sp in router.splines if sp.start == s.leaf1.index]
        styles = node_styles(s.tree, edge, theme)
        assert styles[s.leaf1.index] == theme.label_start
        assert styles[s.leaf3.index] == theme.label_end
        assert styles[s.leaf2.index] == theme.label_inactive
        # Counts propagate up: A holds the start, B the end, root both
        assert styles[s.a.index] == theme.label_start
        assert styles[s.b.index] == theme.label_end
        assert styles[s.root.index] == theme.label_active


class TestRenderSvg:
    """Tests for render_svg."""

    def _render(self, small_tree, tmp_path, **kwargs):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        router = BundledEdgeRouter(s.tree, layout)
        router.init()
        labeler = RadialLabeler(s.tree, layout, name=lambda node: f"<n{node.index}>")
        output = tmp_path / "out.svg"
        render_svg(router, labeler, output, **kwargs)
        return output.read_text()

    def test_writes_svg(self, small_tree, tmp_path):
        svg = self._render(small_tree, tmp_path)
        assert svg.startswith("<svg")
        assert svg.rstrip().endswith("</svg>")
        assert svg.count("<path") == 2
        assert svg.count("<text") == 3

    def test_labels_escaped(self, small_tree, tmp_path):
        svg = self._render(small_tree, tmp_path)
        assert "&lt;n3&gt;" in svg
        assert "<n3>" not in svg

    def test_left_labels_anchor_end(self, small_tree, tmp_path):
        svg = self._render(small_tree, tmp_path)
        assert 'text-anchor="end"' in svg
        assert 'text-anchor="start"' in svg

    def test_inactive_edges_drawn_faintly(self, small_tree, tmp_path):
        theme = THEMES["light"]
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        router = BundledEdgeRouter(s.tree, layout)
        router.init()
        output = tmp_path / "out.svg"
        render_svg(router, RadialLabeler(s.tree, layout), output, active=router.splines[:1])
        svg = output.read_text()
        assert svg.count(theme.edge_inactive) == 1

    def test_outline_and_cut(self, small_tree, tmp_path):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        svg = self._render(s, tmp_path, outline=layout.outline(), cut=Line(0, -2, 0, 2))
        assert svg.count("<path") == 4


class TestSvgPathContext:
    """Tests for SvgPathContext recording."""

    def test_begin_path_resets(self):
        context = SvgPathContext()
        context.move_to(0, 0)
        context.begin_path()
        assert context.path_data == ""

    def test_empty_stroke_ignored(self):
        context = SvgPathContext()
        context.begin_path()
        context.stroke()
        assert context.elements == []

    def test_fill_style(self):
        context = SvgPathContext()
        context.fill_style = "red"
        context.move_to(0, 0)
        context.line_to(1, 1)
        context.fill()
        assert 'fill="red"' in context.elements[0]

    def test_formats_numbers_compactly(self):
        context = SvgPathContext()
        context.move_to(1.0, math.pi)
        assert context.path_data == "M1,3.14"


class TestRenderHtml:
    """Tests for the pyvis HTML view."""

    def test_writes_html(self, small_tree, tmp_path):
        pytest.importorskip("pyvis")
        from edge_bundling.layout import render_html

        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        labeler = RadialLabeler(s.tree, layout)
        output = tmp_path / "out.html"
        render_html(s.tree, labeler, output, {s.leaf1.index: "red"})
        html = output.read_text()
        assert "vis-network" in html or "vis.Network" in html
        assert "data:image/svg+xml;base64" in html

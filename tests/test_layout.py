"""Tests for the circle layout, edge router and labels."""

import math

import pytest

from edge_bundling.geom import AffineTransform, Vector
from edge_bundling.layout import (
    BundledEdgeRouter,
    CircleLayout,
    EdgeSpline,
    RadialLabeler,
    upside_down,
)
from edge_bundling.tree import Tree


def _polar(layout: CircleLayout, index: int) -> tuple[float, float]:
    p = layout.position(index)
    return math.hypot(p.x, p.y), layout.angle(index)


class TestCircleLayout:
    """Tests for CircleLayout."""

    def test_angles(self, small_tree):
        """Leaves share the circle by weight; parents sit mid-range."""
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        expected = {
            s.root: math.pi,
            s.a: 3 * math.pi / 5,
            s.b: 8 * math.pi / 5,
            s.leaf1: math.pi / 5,
            s.leaf2: 3 * math.pi / 5,
            s.leaf3: 7 * math.pi / 5,
        }
        for node, angle in expected.items():
            assert layout.angle(node.index) == pytest.approx(angle - math.pi / 2)

    def test_radii(self, small_tree):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        assert _polar(layout, s.root.index)[0] == 0
        assert _polar(layout, s.a.index)[0] == pytest.approx(0.5)
        assert _polar(layout, s.b.index)[0] == pytest.approx(0.5)
        for leaf in (s.leaf1, s.leaf2, s.leaf3):
            assert _polar(layout, leaf.index)[0] == pytest.approx(1.0)

    def test_position_matches_angle(self, small_tree):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        p = layout.position(s.leaf1.index)
        a = layout.angle(s.leaf1.index)
        assert p.x == pytest.approx(math.cos(a))
        assert p.y == pytest.approx(math.sin(a))

    def test_angle_zero_points_up(self):
        """A leaf placed at angle 0 sits straight above the centre."""
        tree = Tree()
        leaf = tree.add_child()
        tree.add_child()
        # Root weight is 3, so the first leaf spans [-pi/3, pi/3]
        layout = CircleLayout(tree, start_angle=-math.pi / 3, end_angle=5 * math.pi / 3)
        layout.init()
        p = layout.position(leaf.index)
        assert p.x == pytest.approx(0, abs=1e-12)
        assert p.y == pytest.approx(-1)

    def test_start_radius(self, small_tree):
        s = small_tree
        layout = CircleLayout(s.tree, start_radius=0.6)
        layout.init()
        assert _polar(layout, s.a.index)[0] == pytest.approx(0.8)
        assert _polar(layout, s.leaf1.index)[0] == pytest.approx(1.0)

    def test_single_node(self):
        """A lone root sits at the centre."""
        layout = CircleLayout(Tree())
        layout.init()
        assert layout.position(0) == Vector(0, 0)

    def test_single_child_chain_collapses_to_centre(self):
        """Only-children at the top do not get a ring of their own."""
        tree = Tree()
        package = tree.add_child()
        leaf1 = package.add_child()
        leaf2 = package.add_child()
        layout = CircleLayout(tree)
        layout.init()
        assert _polar(layout, package.index)[0] == 0
        assert _polar(layout, leaf1.index)[0] == pytest.approx(1.0)
        assert _polar(layout, leaf2.index)[0] == pytest.approx(1.0)

    def test_sort_key_orders_siblings(self, small_tree):
        """Sorting reverses the sibling order without touching the tree."""
        s = small_tree
        layout = CircleLayout(s.tree, sort_key=lambda node: -node.index)
        layout.init()
        assert layout.angle(s.b.index) < layout.angle(s.a.index)
        assert s.root.children == [s.a, s.b]

    def test_positions_is_a_copy(self, small_tree):
        layout = CircleLayout(small_tree.tree)
        layout.init()
        positions = layout.positions()
        positions.clear()
        assert len(layout.positions()) == len(small_tree.tree)

    def test_outline_visits_leaves_in_angle_order(self, small_tree):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        outline = [seg.end for seg in layout.outline().segments()]
        assert outline == [layout.position(n.index) for n in (s.leaf1, s.leaf2, s.leaf3)]

    def test_init_after_tree_change(self, small_tree):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        s.b.add_child()
        layout.init()
        assert len(layout.positions()) == len(s.tree)


class TestBundledEdgeRouter:
    """Tests for BundledEdgeRouter."""

    def _router(self, small_tree, **kwargs) -> BundledEdgeRouter:
        layout = CircleLayout(small_tree.tree)
        layout.init()
        return BundledEdgeRouter(small_tree.tree, layout, **kwargs)

    def test_control_points_climb_to_common_ancestor(self, small_tree):
        s = small_tree
        router = self._router(s)
        position = router.layout.position
        points = router.control_points(s.leaf1.index, s.leaf3.index)
        expected = [s.leaf1, s.a, s.root, s.b, s.leaf3]
        assert points == [position(n.index) for n in expected]

    def test_control_points_between_siblings(self, small_tree):
        s = small_tree
        router = self._router(s)
        position = router.layout.position
        points = router.control_points(s.leaf2.index, s.leaf1.index)
        assert points == [position(n.index) for n in (s.leaf2, s.a, s.leaf1)]

    def test_control_points_to_ancestor(self, small_tree):
        s = small_tree
        router = self._router(s)
        position = router.layout.position
        assert router.control_points(s.leaf1.index, s.a.index) == [
            position(s.leaf1.index),
            position(s.a.index),
        ]

    def test_self_loop_has_one_point(self, small_tree):
        s = small_tree
        router = self._router(s)
        assert len(router.control_points(s.leaf1.index, s.leaf1.index)) == 1

    def test_transform_point_applied(self, small_tree):
        s = small_tree
        affine = AffineTransform().translate(100, 100).scale(50)
        router = self._router(s, transform_point=affine.transform)
        points = router.control_points(s.leaf1.index, s.leaf3.index)
        assert points[2] == Vector(100, 100)

    def test_init_builds_one_spline_per_edge(self, small_tree):
        router = self._router(small_tree)
        router.init()
        assert [(sp.start, sp.end) for sp in router.splines] == [(3, 5), (4, 3)]
        assert all(isinstance(sp, EdgeSpline) for sp in router.splines)

    def test_spline_is_straightened(self, small_tree):
        s = small_tree
        router = self._router(s, beta=0.0)
        spline = router.spline(s.leaf1.index, s.leaf3.index)
        start, end = spline.points()[0], spline.points()[-1]
        middle = spline.points()[2]
        assert middle.x == pytest.approx((start.x + end.x) / 2)
        assert middle.y == pytest.approx((start.y + end.y) / 2)

    def test_spline_keeps_layout_positions(self, small_tree):
        """Straightening never moves the layout's own points."""
        s = small_tree
        router = self._router(s, beta=0.5)
        before = router.layout.position(s.root.index)
        router.init()
        assert router.layout.position(s.root.index) == before == Vector(0, 0)

    def test_draw_uses_strategy(self, small_tree):
        drawn = []
        router = self._router(small_tree, draw_spline=lambda ctx, sp: drawn.append(sp))
        router.init()
        router.draw(None)
        assert drawn == router.splines


class TestRadialLabeler:
    """Tests for RadialLabeler."""

    def test_upside_down(self):
        assert not upside_down(0)
        assert not upside_down(-math.pi / 3)
        assert upside_down(math.pi)
        assert upside_down(-math.pi)
        assert not upside_down(1.6 * math.pi)

    def test_one_label_per_leaf(self, small_tree):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        labels = RadialLabeler(s.tree, layout).labels()
        assert [label.node for label in labels] == [s.leaf1, s.leaf2, s.leaf3]
        assert [label.text for label in labels] == ["3", "4", "5"]

    def test_left_half_is_flipped(self, small_tree):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        labeler = RadialLabeler(s.tree, layout)
        right = labeler.label(s.leaf1)
        left = labeler.label(s.leaf3)
        assert right.anchor == "start"
        assert right.angle == pytest.approx(layout.angle(s.leaf1.index))
        assert left.anchor == "end"
        assert left.angle == pytest.approx(layout.angle(s.leaf3.index) + math.pi)

    def test_hooks(self, small_tree):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        labeler = RadialLabeler(
            s.tree,
            layout,
            name=lambda node: f"n{node.index}",
            style=lambda node: "red",
            transform_point=AffineTransform().translate(10, 10).transform,
        )
        label = labeler.label(s.leaf1)
        p = layout.position(s.leaf1.index)
        assert (label.text, label.style) == ("n3", "red")
        assert (label.x, label.y) == (p.x + 10, p.y + 10)

    def test_node_at(self, small_tree):
        s = small_tree
        layout = CircleLayout(s.tree)
        layout.init()
        labeler = RadialLabeler(s.tree, layout)
        p = layout.position(s.leaf3.index)
        assert labeler.node_at(p.x * 1.1, p.y * 1.1) is s.leaf3

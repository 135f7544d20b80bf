"""Radial tree layout on concentric rings."""

import math
from collections.abc import Callable
from typing import Any

from ..geom import Path, Vector
from ..tree import Node, Tree


class CircleLayout:
    """Place tree nodes on concentric rings, one ring per depth.

    Leaves share the angular range between ``start_angle`` and ``end_angle``
    in proportion to subtree weight, and each inner node sits at the middle
    of its children's range. Chains of single children at the centre are
    collapsed onto the root so no ring is wasted on them.

    Positions live in [-1, 1] x [-1, 1]; angle 0 points up. Use an
    ``AffineTransform`` to map them to device space. Call ``init`` after
    changing the tree or any parameter.
    """

    def __init__(
        self,
        tree: Tree,
        start_angle: float = 0.0,
        end_angle: float = 2.0 * math.pi,
        start_radius: float = 0.0,
        sort_key: Callable[[Node], Any] | None = None,
    ) -> None:
        """
        Args:
            tree: The tree to lay out.
            start_angle: Start of the angular range, in radians.
            end_angle: End of the angular range, in radians.
            start_radius: Radius of the innermost ring in [0, 1).
            sort_key: Optional key ordering siblings; the tree's own child
                order is left untouched.
        """
        self.tree = tree
        self.start_angle = start_angle
        self.end_angle = end_angle
        self.start_radius = start_radius
        self.sort_key = sort_key
        self._positions: list[Vector] = []
        self._angles: list[float] = []

    def init(self) -> None:
        """Compute every node's position and angle from scratch."""
        n = len(self.tree.nodes)
        weights = [0] * n
        depths = [0] * n
        positions: list[Vector] = [Vector(0.0, 0.0)] * n
        angles = [0.0] * n
        max_depth = 0

        def count(node: Node, depth: int) -> int:
            nonlocal max_depth
            max_depth = max(max_depth, depth)
            depths[node.index] = depth
            if depth > 0 or len(node.children) > 1:
                depth += 1
            total = 1 if node.is_leaf else 0
            for child in node.children:
                total += count(child, depth)
            # A node whose children are all leaves gets one extra share
            if total == len(node.children):
                total += 1
            weights[node.index] = total
            return total

        def place(node: Node, angle: float) -> None:
            angle -= math.pi / 2.0
            depth = depths[node.index]
            radius = 0.0 if depth == 0 else self.start_radius + radius_scale * depth
            positions[node.index] = Vector(math.cos(angle) * radius, math.sin(angle) * radius)
            angles[node.index] = angle

        def place_all(node: Node, start: float, end: float) -> None:
            place(node, (start + end) / 2.0)
            step = (end - start) / weights[node.index]
            children = node.children
            if self.sort_key is not None:
                children = sorted(children, key=self.sort_key)
            i = 0
            for child in children:
                j = i + weights[child.index]
                place_all(child, start + i * step, start + j * step)
                i = j

        count(self.tree.root, 0)
        radius_scale = (1.0 - self.start_radius) / max_depth if max_depth else 0.0
        place_all(self.tree.root, self.start_angle, self.end_angle)
        self._positions = positions
        self._angles = angles

    def position(self, index: int) -> Vector:
        """Return the position of the node with the given index."""
        return self._positions[index]

    def angle(self, index: int) -> float:
        """Return the angle, in radians, of the node with the given index."""
        return self._angles[index]

    def positions(self) -> list[Vector]:
        return list(self._positions)

    def outline(self) -> Path:
        """Return a polygon through the leaves in angular order.

        Typically close to, but not guaranteed to be, the convex hull of the
        leaves.
        """
        nodes = sorted(self.tree.nodes, key=lambda node: self.angle(node.index))
        path = Path()
        for node in nodes:
            if not node.is_leaf:
                continue
            p = self.position(node.index)
            if path.segments():
                path.line_to(p.x, p.y)
            else:
                path.move_to(p.x, p.y)
        return path

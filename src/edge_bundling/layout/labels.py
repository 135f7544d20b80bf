"""Radial labels for the leaves of a circle layout."""

import math
from collections.abc import Callable
from dataclasses import dataclass

from ..geom import Vector
from ..tree import Node, Tree
from .circle import CircleLayout


@dataclass
class Label:
    """A leaf label: anchor point, rotation and text alignment."""

    node: Node
    text: str
    x: float
    y: float
    angle: float  # rotation in radians, already flipped to read left-to-right
    anchor: str  # "start" or "end"
    style: str | None = None


def upside_down(angle: float) -> bool:
    """Return True if text rotated by angle would read upside-down."""
    angle %= 2.0 * math.pi
    return math.pi / 2.0 < angle < 1.5 * math.pi


class RadialLabeler:
    """Label each leaf at its layout position, rotated to its layout angle.

    Hooks mirror the edge router: ``transform_point`` and
    ``transform_angle`` map layout space to device space, ``name`` supplies
    the text (the node index by default) and ``style`` an optional fill.
    """

    def __init__(
        self,
        tree: Tree,
        layout: CircleLayout,
        name: Callable[[Node], str] | None = None,
        style: Callable[[Node], str | None] | None = None,
        transform_point: Callable[[Vector], Vector] | None = None,
        transform_angle: Callable[[float], float] | None = None,
    ) -> None:
        self.tree = tree
        self.layout = layout
        self.name = name or (lambda node: str(node.index))
        self.style = style or (lambda node: None)
        self.transform_point = transform_point or (lambda point: point)
        self.transform_angle = transform_angle or (lambda angle: angle)

    def label(self, node: Node) -> Label:
        p = self.transform_point(self.layout.position(node.index))
        angle = self.transform_angle(self.layout.angle(node.index))
        if upside_down(angle):
            angle, anchor = angle + math.pi, "end"
        else:
            anchor = "start"
        return Label(node, self.name(node), p.x, p.y, angle, anchor, self.style(node))

    def labels(self) -> list[Label]:
        """Return one label per leaf, in node-index order."""
        return [self.label(node) for node in self.tree.nodes if node.is_leaf]

    def node_at(self, x: float, y: float) -> Node:
        """Return the node closest to (x, y); the root only if it is alone.

        May return an inner node.
        """
        best, best_distance = self.tree.root, math.inf
        for node in self.tree.nodes[1:]:
            d = self.transform_point(self.layout.position(node.index)).distance(x, y)
            if d < best_distance:
                best, best_distance = node, d
        return best

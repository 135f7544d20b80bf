"""Hierarchical edge bundling (Holten) over a radial tree layout."""

from collections.abc import Callable

from ..geom import BasisSpline, PathContext, Vector
from ..tree import Tree
from .circle import CircleLayout

DEFAULT_BETA = 0.85


class EdgeSpline(BasisSpline):
    """The bundled spline of one directed edge, tagged with its node indices."""

    def __init__(self, start: int, end: int) -> None:
        super().__init__()
        self.start = start
        self.end = end

    def __repr__(self) -> str:
        return f"EdgeSpline({self.start} -> {self.end}, {len(self.points())} points)"


def _stroke(context: PathContext, spline: EdgeSpline) -> None:
    spline.stroke(context)


class BundledEdgeRouter:
    """Route every directed edge of a tree through its ancestor hierarchy.

    Each edge becomes an open uniform b-spline whose control points climb
    from the start node to the least common ancestor of both ends and then
    descend to the end node. The spline is then straightened by ``beta``:
    1.0 keeps the full bundling, 0.0 draws straight chords.
    """

    def __init__(
        self,
        tree: Tree,
        layout: CircleLayout,
        beta: float = DEFAULT_BETA,
        transform_point: Callable[[Vector], Vector] | None = None,
        draw_spline: Callable[[PathContext, EdgeSpline], None] | None = None,
    ) -> None:
        """
        Args:
            tree: Tree whose edges are routed.
            layout: Initialized layout giving node positions.
            beta: Bundling strength in [0, 1].
            transform_point: Applied to every layout position before it
                becomes a control point, e.g. ``affine.transform``.
            draw_spline: Draws one spline; strokes it by default.
        """
        self.tree = tree
        self.layout = layout
        self.beta = beta
        self.transform_point = transform_point or (lambda point: point)
        self.draw_spline = draw_spline or _stroke
        self.splines: list[EdgeSpline] = []

    def control_points(self, i: int, j: int) -> list[Vector]:
        """Return the control points for edge i -> j before straightening."""
        start, end = self.tree.nodes[i], self.tree.nodes[j]
        lca = self.tree.least_common_ancestor(start, end)
        position = self.layout.position

        ascent = [self.transform_point(position(start.index))]
        while start is not lca:
            start = start.parent
            ascent.append(self.transform_point(position(start.index)))

        descent = []
        while end is not lca:
            descent.append(self.transform_point(position(end.index)))
            end = end.parent
        descent.reverse()
        return ascent + descent

    def spline(self, i: int, j: int) -> EdgeSpline:
        """Build the straightened spline for edge i -> j."""
        spline = EdgeSpline(i, j)
        spline.add_all(self.control_points(i, j)).straighten(self.beta)
        return spline

    def init(self) -> None:
        """Rebuild one spline per directed edge, in node-index order."""
        self.splines = [self.spline(i, j) for i, j in self.tree.edges()]

    def draw(self, context: PathContext) -> None:
        for spline in self.splines:
            self.draw_spline(context, spline)

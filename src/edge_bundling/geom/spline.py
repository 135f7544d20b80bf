"""Uniform cubic b-splines, converted lazily to Bezier paths."""

from collections.abc import Iterable

from .path import Path, Segment, weight_curve
from .vector import Vector

# Converts four uniform b-spline control points to Bezier control points.
# Row 0 (the curve start) is implied by the previous segment's end.
BASIS_TO_BEZIER = (
    (1.0 / 6.0, 4.0 / 6.0, 1.0 / 6.0, 0.0 / 6.0),
    (0.0 / 6.0, 4.0 / 6.0, 2.0 / 6.0, 0.0 / 6.0),
    (0.0 / 6.0, 2.0 / 6.0, 4.0 / 6.0, 0.0 / 6.0),
    (0.0 / 6.0, 1.0 / 6.0, 4.0 / 6.0, 1.0 / 6.0),
)


class BasisSpline(Path):
    """An open uniform b-spline with clamped ends.

    Control points are added with ``add``/``add_all``; the Bezier segments
    are rebuilt on demand whenever the control points change. The first and
    last control points are repeated as phantom anchors, so the curve starts
    and ends exactly at them::

        s = BasisSpline().add(10, 10).add(20, 20).add(30, 10)
    """

    def __init__(self) -> None:
        super().__init__()
        self._points: list[Vector] = []

    def add(self, x: float, y: float) -> "BasisSpline":
        """Append the control point (x, y)."""
        self._points.append(Vector(x, y))
        self._segments = None
        return self

    def add_all(self, points: Iterable[Vector]) -> "BasisSpline":
        """Append all of the given control points."""
        self._points.extend(points)
        self._segments = None
        return self

    def clear(self) -> "BasisSpline":
        """Remove all control points."""
        self._points = []
        self._segments = None
        return self

    def points(self) -> list[Vector]:
        """Return the control points. Callers must not modify the list."""
        return self._points

    def straighten(self, beta: float) -> "BasisSpline":
        """Pull interior control points towards the chord from first to last.

        Each interior point becomes ``beta * P_i + (1 - beta) * L_i`` where
        ``L_i`` lies at fraction ``i / (N - 1)`` along the chord. ``beta = 1``
        leaves the spline unchanged and ``beta = 0`` makes it straight.

        Args:
            beta: Straightness parameter in [0, 1].

        Returns:
            This spline.
        """
        z = self._points
        e = len(z) - 1
        if e < 2:
            return self
        first, last = z[0], z[e]
        dx = last.x - first.x
        dy = last.y - first.y
        for i in range(1, e):
            p = z[i]
            z[i] = Vector(
                beta * p.x + (1.0 - beta) * (first.x + i * dx / e),
                beta * p.y + (1.0 - beta) * (first.y + i * dy / e),
            )
        self._segments = None
        return self

    def segments(self) -> list[Segment]:
        if self._segments is not None:
            return self._segments
        self._segments = []
        points = self._points
        if len(points) == 1:
            self.move_to(points[0].x, points[0].y)
        elif len(points) == 2:
            self.move_to(points[0].x, points[0].y)
            self.line_to(points[1].x, points[1].y)
        elif points:
            first, last = points[0], points[-1]
            padded = [first, first, *points, last, last]
            self.move_to(first.x, first.y)
            for k in range(len(padded) - 3):
                self._basis_curve_to(*padded[k : k + 4])
        return self._segments

    def _basis_curve_to(self, p0: Vector, p1: Vector, p2: Vector, p3: Vector) -> None:
        """Append the Bezier equivalent of one b-spline window."""
        b1 = weight_curve(BASIS_TO_BEZIER[1], p0, p1, p2, p3)
        b2 = weight_curve(BASIS_TO_BEZIER[2], p0, p1, p2, p3)
        b3 = weight_curve(BASIS_TO_BEZIER[3], p0, p1, p2, p3)
        self.bezier_curve_to(b1.x, b1.y, b2.x, b2.y, b3.x, b3.y)

"""Segment-based paths with Bezier flattening, splitting and intersection.

Paths follow the canvas path model: a sequence of move, line and cubic
Bezier segments, where every line or curve starts wherever the previous
segment ended. Paths are built with chained calls::

    p = Path().move_to(10, 10).line_to(20, 20).line_to(30, 10)

Drawing is delegated to a ``PathContext``, which receives the segments one
call at a time via ``replay``.
"""

from enum import Enum
from typing import Protocol

from .vector import Vector

DEFAULT_FLATNESS = 1.0

# Subdivide a cubic Bezier at t = 1/2 (de Casteljau); rows weight the four
# control points of the original curve.
BEZIER_LEFT = (
    (8.0 / 8.0, 0.0 / 8.0, 0.0 / 8.0, 0.0 / 8.0),
    (4.0 / 8.0, 4.0 / 8.0, 0.0 / 8.0, 0.0 / 8.0),
    (2.0 / 8.0, 4.0 / 8.0, 2.0 / 8.0, 0.0 / 8.0),
    (1.0 / 8.0, 3.0 / 8.0, 3.0 / 8.0, 1.0 / 8.0),
)

BEZIER_RIGHT = (
    (1.0 / 8.0, 3.0 / 8.0, 3.0 / 8.0, 1.0 / 8.0),
    (0.0 / 8.0, 2.0 / 8.0, 4.0 / 8.0, 2.0 / 8.0),
    (0.0 / 8.0, 0.0 / 8.0, 4.0 / 8.0, 4.0 / 8.0),
    (0.0 / 8.0, 0.0 / 8.0, 0.0 / 8.0, 8.0 / 8.0),
)


class SegmentType(Enum):
    """Kind of path segment."""

    MOVE = "move"  # one point
    LINE = "line"  # one point
    BEZIER = "bezier"  # destination, cp1, cp2


class Segment:
    """A path segment: a type and the points needed to draw it."""

    __slots__ = ("type", "points")

    def __init__(self, type: SegmentType, points: list[Vector]) -> None:
        self.type = type
        self.points = points

    @property
    def end(self) -> Vector:
        """The point this segment ends at."""
        return self.points[0]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.type is other.type and self.points == other.points

    def __repr__(self) -> str:
        return f"Segment({self.type.value}, {[str(p) for p in self.points]})"


class PathContext(Protocol):
    """Drawing surface that paths replay their segments into."""

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def bezier_curve_to(
        self, cp1x: float, cp1y: float, cp2x: float, cp2y: float, x: float, y: float
    ) -> None: ...

    def fill(self) -> None: ...

    def stroke(self) -> None: ...

    def is_point_in_path(self, x: float, y: float) -> bool: ...


def weight_curve(
    w: tuple[float, float, float, float], p1: Vector, p2: Vector, p3: Vector, p4: Vector
) -> Vector:
    """Return the weighted sum of four control points."""
    return Vector(
        w[0] * p1.x + w[1] * p2.x + w[2] * p3.x + w[3] * p4.x,
        w[0] * p1.y + w[1] * p2.y + w[2] * p3.y + w[3] * p4.y,
    )


def _interpolate(p0: Vector, p1: Vector, t: float) -> Vector:
    return Vector(p0.x * (1 - t) + p1.x * t, p0.y * (1 - t) + p1.y * t)


class Path:
    """An ordered sequence of move, line and cubic Bezier segments.

    Subclasses whose segments derive from other geometry (e.g. spline
    control points) override ``segments`` to rebuild ``_segments`` lazily
    whenever it is None.
    """

    def __init__(self) -> None:
        self._segments: list[Segment] | None = None

    def segments(self) -> list[Segment]:
        """Return the segments of this path."""
        if self._segments is None:
            self._segments = []
        return self._segments

    def move_to(self, x: float, y: float) -> "Path":
        """Start a new subpath at (x, y)."""
        self.segments().append(Segment(SegmentType.MOVE, [Vector(x, y)]))
        return self

    def line_to(self, x: float, y: float) -> "Path":
        """Connect the last point to (x, y) with a straight line."""
        self.segments().append(Segment(SegmentType.LINE, [Vector(x, y)]))
        return self

    def bezier_curve_to(
        self, cp1x: float, cp1y: float, cp2x: float, cp2y: float, x: float, y: float
    ) -> "Path":
        """Connect the last point to (x, y) with a cubic Bezier curve."""
        self.segments().append(
            Segment(SegmentType.BEZIER, [Vector(x, y), Vector(cp1x, cp1y), Vector(cp2x, cp2y)])
        )
        return self

    def clear(self) -> "Path":
        """Remove all segments."""
        self.segments().clear()
        return self

    def replay(self, context: PathContext) -> None:
        """Issue one drawing call per segment into context.

        Calls ``begin_path`` first but never closes the path: stroking should
        not close it, and filling closes it implicitly.
        """
        context.begin_path()
        for segment in self.segments():
            p = segment.points[0]
            if segment.type is SegmentType.MOVE:
                context.move_to(p.x, p.y)
            elif segment.type is SegmentType.LINE:
                context.line_to(p.x, p.y)
            else:
                cp1, cp2 = segment.points[1], segment.points[2]
                context.bezier_curve_to(cp1.x, cp1.y, cp2.x, cp2.y, p.x, p.y)

    def fill(self, context: PathContext) -> "Path":
        self.replay(context)
        context.fill()
        return self

    def stroke(self, context: PathContext) -> "Path":
        self.replay(context)
        context.stroke()
        return self

    def contains(self, context: PathContext, x: float, y: float) -> bool:
        """Return True if (x, y) is inside this path per the context's hit test."""
        self.replay(context)
        return context.is_point_in_path(x, y)

    def transform(self, affine) -> "Path":
        """Apply an affine transform to every point of every segment, in place."""
        for segment in self.segments():
            segment.points = [affine.transform(p) for p in segment.points]
        return self

    def flat(self) -> bool:
        """Return True if this path contains no Bezier segments."""
        return all(s.type is not SegmentType.BEZIER for s in self.segments())

    def flatten(self, flatness: float | None = None) -> "Path":
        """Replace every Bezier segment with line segments, in place.

        Curves are subdivided recursively at their midpoint until both inner
        control points lie within ``flatness`` of the chord.

        Args:
            flatness: Distance threshold for subdivision; defaults to 1.0.

        Returns:
            This path.

        Raises:
            ValueError: If flatness is negative.
        """
        if self.flat():
            return self
        if not flatness:
            flatness = DEFAULT_FLATNESS
        if flatness < 0:
            raise ValueError(f"flatness must be positive, got {flatness}")

        flattened: list[Segment] = []

        def add_curve(a: Vector, b: Vector, c: Vector, d: Vector) -> None:
            chord = Line(a.x, a.y, d.x, d.y)
            if chord.distance(b.x, b.y) <= flatness and chord.distance(c.x, c.y) <= flatness:
                flattened.append(Segment(SegmentType.LINE, [Vector(d.x, d.y)]))
                return
            bl = weight_curve(BEZIER_LEFT[1], a, b, c, d)
            cl = weight_curve(BEZIER_LEFT[2], a, b, c, d)
            dl = weight_curve(BEZIER_LEFT[3], a, b, c, d)
            add_curve(a, bl, cl, dl)
            br = weight_curve(BEZIER_RIGHT[1], a, b, c, d)
            cr = weight_curve(BEZIER_RIGHT[2], a, b, c, d)
            add_curve(dl, br, cr, d)

        segments = self.segments()
        for i, s in enumerate(segments):
            if s.type is SegmentType.BEZIER:
                add_curve(segments[i - 1].points[0], s.points[1], s.points[2], s.points[0])
            else:
                flattened.append(s)
        self._segments = flattened
        return self

    def length(self, flatness: float | None = None) -> float:
        """Return the length of the flattened polyline."""
        segments = self._clone().flatten(flatness).segments()
        total = 0.0
        for prev, s in zip(segments, segments[1:]):
            if s.type is SegmentType.LINE:
                total += prev.end.distance(s.end.x, s.end.y)
        return total

    def split(self, n: int, flatness: float | None = None) -> list["Path"]:
        """Split this path into n subpaths of equal arc length.

        The path is flattened first (on a copy), so every subpath is a
        polyline. Concatenating the subpaths reproduces the flattened path.

        Args:
            n: Number of subpaths to return.
            flatness: Distance threshold for curve subdivision.

        Returns:
            List of n subpaths.

        Raises:
            ValueError: If n < 1 or this path has no segments.
        """
        if n < 1:
            raise ValueError(f"cannot split a path into {n} pieces")
        segments = self._clone().flatten(flatness).segments()
        if not segments:
            raise ValueError("cannot split an empty path")

        # Cumulative length fraction at the end of each segment
        total = 0.0
        lengths = [0.0] * len(segments)
        for i in range(1, len(segments)):
            p0 = segments[i - 1].end
            p1 = segments[i].end
            total += p0.distance(p1.x, p1.y)
            lengths[i] = total

        p0 = segments[0].end
        if total == 0:
            return [Path().move_to(p0.x, p0.y).line_to(p0.x, p0.y) for _ in range(n)]
        lengths = [length / total for length in lengths]

        paths: list[Path] = []
        p = p0
        j = 1
        for i in range(n):
            path = Path().move_to(p.x, p.y)
            t1 = (i + 1) / n
            while lengths[j] < t1:
                p0 = segments[j].end
                j += 1
                path.line_to(p0.x, p0.y)
            p1 = segments[j].end
            if lengths[j] == t1:
                p0 = p1
                p = p1
                j = min(j + 1, len(segments) - 1)
            else:
                t = (t1 - lengths[j - 1]) / (lengths[j] - lengths[j - 1])
                p = _interpolate(p0, p1, t)
            path.line_to(p.x, p.y)
            paths.append(path)
        return paths

    def intersects(self, other: "Path", flatness: float | None = None) -> bool:
        """Return True if any line of this path crosses any line of other.

        Both paths are flattened (on copies) before testing; touching
        endpoints count as an intersection.
        """
        a = self._clone().flatten(flatness).segments()
        b = other._clone().flatten(flatness).segments()
        for i in range(1, len(a)):
            if a[i].type is not SegmentType.LINE:
                continue
            p1, p2 = a[i - 1].end, a[i].end
            for j in range(1, len(b)):
                if b[j].type is not SegmentType.LINE:
                    continue
                if Line.intersect(p1, p2, b[j - 1].end, b[j].end):
                    return True
        return False

    def _clone(self) -> "Path":
        """Return a path sharing this path's segments in a new list."""
        clone = Path()
        clone._segments = list(self.segments())
        return clone


class Line(Path):
    """A straight line segment from (x1, y1) to (x2, y2)."""

    def __init__(self, x1: float, y1: float, x2: float, y2: float) -> None:
        super().__init__()
        self._segments = [
            Segment(SegmentType.MOVE, [Vector(x1, y1)]),
            Segment(SegmentType.LINE, [Vector(x2, y2)]),
        ]

    def start(self) -> Vector:
        return self._segments[0].points[0]

    def end(self) -> Vector:
        return self._segments[1].points[0]

    def length(self, flatness: float | None = None) -> float:
        e = self.end()
        return self.start().distance(e.x, e.y)

    def distance(self, x: float, y: float) -> float:
        """Return the distance from (x, y) to the infinite line through this segment.

        A zero-length line falls back to the distance to its start point.
        """
        s, e = self.start(), self.end()
        dx, dy = e.x - s.x, e.y - s.y
        if dx == 0.0 and dy == 0.0:
            return s.distance(x, y)
        return abs(dx * (s.y - y) - dy * (s.x - x)) / (dx * dx + dy * dy) ** 0.5

    @staticmethod
    def intersect(p1: Vector, p2: Vector, q1: Vector, q2: Vector) -> bool:
        """Return True if segment p1-p2 intersects segment q1-q2.

        Both intersection parameters must fall in [0, f] (or [f, 0]) where f
        is the unnormalised denominator, so touching endpoints intersect.
        """
        a = Vector(q2.x - q1.x, q2.y - q1.y)
        b = Vector(p1.y - p2.y, p2.x - p1.x)  # perpendicular of p2 - p1
        c = Vector(p1.x - q1.x, p1.y - q1.y)

        d = c.dot(a.perp())
        f = a.dot(b)
        if f > 0:
            if d < 0 or d > f:
                return False
        elif d > 0 or d < f:
            return False

        e = c.dot(b)
        if f > 0:
            if e < 0 or e > f:
                return False
        elif e > 0 or e < f:
            return False

        return True

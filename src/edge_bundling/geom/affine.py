"""Affine transformations of the plane."""

import math

from .vector import Vector


class AffineTransform:
    """Mutable affine transform built up with chained calls.

    Transformations are post-multiplied, so the last one added is applied
    first::

        affine = AffineTransform().translate(w / 2, h / 2).scale(radius)

    maps the unit layout space to a canvas centred at (w / 2, h / 2).
    """

    def __init__(self) -> None:
        # Row-major [a, b, c, d, e, f] for x' = ax + by + c, y' = dx + ey + f
        self._matrix = [1.0, 0.0, 0.0, 0.0, 1.0, 0.0]

    def rotate(self, angle: float) -> "AffineTransform":
        """Rotate by angle radians."""
        cos = math.cos(angle)
        sin = math.sin(angle)
        m = list(self._matrix)
        self._matrix[0] = m[0] * cos - m[1] * sin
        self._matrix[1] = m[0] * sin + m[1] * cos
        self._matrix[3] = m[3] * cos - m[4] * sin
        self._matrix[4] = m[3] * sin + m[4] * cos
        return self

    def scale(self, x: float, y: float | None = None) -> "AffineTransform":
        """Scale by x and y; uniform scaling when y is omitted."""
        if y is None:
            y = x
        self._matrix[0] *= x
        self._matrix[1] *= y
        self._matrix[3] *= x
        self._matrix[4] *= y
        return self

    def shear(self, x: float, y: float) -> "AffineTransform":
        m = list(self._matrix)
        self._matrix[0] = m[0] + m[1] * y
        self._matrix[1] = m[0] * x + m[1]
        self._matrix[3] = m[3] + m[4] * y
        self._matrix[4] = m[3] * x + m[4]
        return self

    def translate(self, x: float, y: float) -> "AffineTransform":
        m = self._matrix
        m[2] = m[0] * x + m[1] * y + m[2]
        m[5] = m[3] * x + m[4] * y + m[5]
        return self

    def transform(self, p: Vector) -> Vector:
        """Apply this transform to point p, returning a new Vector."""
        m = self._matrix
        return Vector(
            m[0] * p.x + m[1] * p.y + m[2],
            m[3] * p.x + m[4] * p.y + m[5],
        )

    @property
    def matrix(self) -> tuple[float, ...]:
        """The (a, b, c, d, e, f) coefficients of this transform."""
        return tuple(self._matrix)

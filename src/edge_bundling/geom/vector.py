"""Points and vectors in two dimensions."""

import math
from dataclasses import dataclass


@dataclass
class Vector:
    """A vector (or point) in two dimensions."""

    x: float
    y: float

    def distance(self, x: float, y: float) -> float:
        """Return the distance from this vector to the point (x, y)."""
        dx = self.x - x
        dy = self.y - y
        return math.sqrt(dx * dx + dy * dy)

    def perp(self) -> "Vector":
        """Return the perpendicular vector (-y, x)."""
        return Vector(-self.y, self.x)

    def dot(self, v: "Vector") -> float:
        return self.x * v.x + self.y * v.y

    def cross(self, v: "Vector") -> float:
        """Return the z component of the cross product with v."""
        return self.x * v.y - self.y * v.x

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

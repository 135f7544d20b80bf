"""Two-dimensional geometry: points, affine transforms, paths and splines."""

from .affine import AffineTransform
from .path import BEZIER_LEFT, BEZIER_RIGHT, Line, Path, PathContext, Segment, SegmentType
from .spline import BasisSpline
from .vector import Vector

__all__ = [
    "Vector",
    "AffineTransform",
    "SegmentType",
    "Segment",
    "PathContext",
    "Path",
    "Line",
    "BEZIER_LEFT",
    "BEZIER_RIGHT",
    "BasisSpline",
]

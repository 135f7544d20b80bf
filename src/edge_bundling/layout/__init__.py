"""Radial layout and bundled edge routing for dependency trees.

Nodes are placed on concentric rings by tree depth, and each dependency
edge is routed through the package hierarchy as a b-spline.
"""

from .bundle import DEFAULT_BETA, BundledEdgeRouter, EdgeSpline
from .circle import CircleLayout
from .color import Gradient, Rgb
from .filter import FilterResult, apply_filter
from .labels import Label, RadialLabeler, upside_down
from .render import (
    THEMES,
    RenderOptions,
    SvgPathContext,
    Theme,
    crossing_splines,
    edge_alpha,
    gradient_stroke,
    node_styles,
    render_html,
    render_svg,
)

__all__ = [
    "CircleLayout",
    "DEFAULT_BETA",
    "BundledEdgeRouter",
    "EdgeSpline",
    "Rgb",
    "Gradient",
    "FilterResult",
    "apply_filter",
    "Label",
    "RadialLabeler",
    "upside_down",
    "THEMES",
    "Theme",
    "RenderOptions",
    "SvgPathContext",
    "crossing_splines",
    "edge_alpha",
    "gradient_stroke",
    "node_styles",
    "render_html",
    "render_svg",
]

"""Generate visualization outputs."""

import json
from dataclasses import dataclass
from pathlib import Path

from .geom import AffineTransform, Line, Vector
from .graph import DependencyTree
from .layout import (
    DEFAULT_BETA,
    THEMES,
    BundledEdgeRouter,
    CircleLayout,
    EdgeSpline,
    Gradient,
    RadialLabeler,
    RenderOptions,
    crossing_splines,
    edge_alpha,
    gradient_stroke,
    node_styles,
    render_html,
    render_svg,
)
from .tree import Node


@dataclass
class BundleView:
    """A laid-out, routed tree mapped onto a square canvas."""

    tree: DependencyTree
    layout: CircleLayout
    router: BundledEdgeRouter
    labeler: RadialLabeler
    affine: AffineTransform
    active: list[EdgeSpline]
    cut: Line | None = None


def _sort_by_name(node: Node) -> str:
    return node.name or ""


def build_view(
    tree: DependencyTree,
    options: RenderOptions | None = None,
    start_radius: float = 0.6,
    beta: float = DEFAULT_BETA,
) -> BundleView:
    """Lay out tree, route its edges and prepare labels for a canvas.

    Siblings are ordered by name. The canvas is ``options.size`` square with
    ``options.padding`` left around the outer ring for labels.

    Args:
        tree: Dependency tree to visualize.
        options: Canvas and styling options.
        start_radius: Radius of the innermost ring, in layout units.
        beta: Bundling strength.

    Returns:
        The assembled view.
    """
    options = options or RenderOptions()
    theme = THEMES[options.theme]
    half = options.size / 2.0
    affine = (
        AffineTransform()
        .translate(half, half)
        .scale(half - options.padding)
        .rotate(-options.rotation)
    )

    layout = CircleLayout(tree, start_radius=start_radius, sort_key=_sort_by_name)
    layout.init()

    router = BundledEdgeRouter(tree, layout, beta=beta, transform_point=affine.transform)
    router.init()

    cut = None
    active = router.splines
    if options.cut:
        x1, y1, x2, y2 = options.cut
        p1 = affine.transform(Vector(x1, y1))
        p2 = affine.transform(Vector(x2, y2))
        cut = Line(p1.x, p1.y, p2.x, p2.y)
        active = crossing_splines(router.splines, cut)

    router.draw_spline = gradient_stroke(
        Gradient(theme.edge_start, theme.edge_end),
        options.gradient_steps,
        alpha=edge_alpha(len(active)),
        line_width=options.line_width,
    )

    styles = node_styles(tree, active, theme)
    labeler = RadialLabeler(
        tree,
        layout,
        name=lambda node: node.name or "",
        style=lambda node: styles.get(node.index),
        transform_point=affine.transform,
        transform_angle=lambda angle: angle + options.rotation,
    )
    return BundleView(tree, layout, router, labeler, affine, active, cut)


def generate_svg(view: BundleView, output_file: Path, options: RenderOptions | None = None) -> None:
    """Write the bundled edge diagram as SVG.

    Args:
        view: View from ``build_view``.
        output_file: Path to write the SVG file.
        options: The options the view was built with.
    """
    options = options or RenderOptions()
    outline = None
    if options.show_outline:
        outline = view.layout.outline().transform(view.affine)
    active = None if view.cut is None else view.active
    render_svg(view.router, view.labeler, output_file, options, outline, active, view.cut)


def generate_html(view: BundleView, output_file: Path) -> None:
    """Write an interactive pyvis view of the layout."""
    styles = {
        node.index: view.labeler.style(node) or "black" for node in view.tree.nodes
    }
    render_html(view.tree, view.labeler, output_file, styles)


def _depth(node: Node) -> int:
    return len(node.ancestors()) - 1


def generate_json(view: BundleView, output_file: Path) -> None:
    """Write node positions and edge geometry as JSON.

    Positions are in canvas space. Each edge lists its control points and
    the segments of its spline (``points`` are destination first, then
    Bezier control points).

    Args:
        view: View from ``build_view``.
        output_file: Path to write the JSON file.
    """
    nodes = []
    for node in view.tree.nodes:
        p = view.affine.transform(view.layout.position(node.index))
        nodes.append(
            {
                "index": node.index,
                "name": node.name,
                "full_name": node.full_name,
                "parent": node.parent.index if node.parent else None,
                "depth": _depth(node),
                "leaf": node.is_leaf,
                "x": p.x,
                "y": p.y,
                "angle": view.layout.angle(node.index),
            }
        )

    active_ids = {id(s) for s in view.active}
    edges = []
    for spline in view.router.splines:
        edges.append(
            {
                "start": spline.start,
                "end": spline.end,
                "active": id(spline) in active_ids,
                "control_points": [[p.x, p.y] for p in spline.points()],
                "segments": [
                    {"type": s.type.value, "points": [[p.x, p.y] for p in s.points]}
                    for s in spline.segments()
                ],
            }
        )

    with open(output_file, "w") as f:
        json.dump({"nodes": nodes, "edges": edges}, f, indent=2)


def generate_summary(tree: DependencyTree, output_file: Path) -> None:
    """Generate human-readable summary file.

    Args:
        tree: The dependency tree.
        output_file: Path to write the summary file.
    """
    leaves = tree.leaves()
    packages = [n for n in tree.nodes if not n.is_leaf and n is not tree.root]
    edge_count = sum(len(n.outgoing) for n in tree.nodes)
    max_depth = max((_depth(n) for n in tree.nodes), default=0)
    named = [n for n in tree.nodes if n.full_name]

    with open(output_file, "w") as f:
        f.write("=" * 60 + "\n")
        f.write("Edge Bundling Summary\n")
        f.write("=" * 60 + "\n\n")

        f.write(f"Modules (leaves): {len(leaves)}\n")
        f.write(f"Packages: {len(packages)}\n")
        f.write(f"Dependency edges: {edge_count}\n")
        f.write(f"Maximum depth: {max_depth}\n\n")

        f.write("Top 20 Most-Imported:\n")
        f.write("-" * 40 + "\n")
        for node in sorted(named, key=lambda n: (-len(n.incoming), n.full_name))[:20]:
            if not node.incoming:
                break
            f.write(f"  {len(node.incoming):4d}x  {node.full_name}\n")

        f.write("\nTop 20 Most-Importing:\n")
        f.write("-" * 40 + "\n")
        for node in sorted(named, key=lambda n: (-len(n.outgoing), n.full_name))[:20]:
            if not node.outgoing:
                break
            f.write(f"  {len(node.outgoing):4d}   {node.full_name}\n")

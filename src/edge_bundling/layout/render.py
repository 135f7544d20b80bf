"""SVG and pyvis rendering of bundled dependency trees."""

import base64
import html
import math
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..geom import Line, PathContext, SegmentType
from ..geom import Path as GeomPath
from ..tree import Node, Tree
from .bundle import BundledEdgeRouter, EdgeSpline
from .color import BLACK, GREEN, RED, WHITE, Gradient, Rgb
from .labels import RadialLabeler

_EPSILON = 1e-9


@dataclass(frozen=True)
class Theme:
    """Colors for one rendering style."""

    background: str
    edge_start: Rgb
    edge_end: Rgb
    edge_inactive: str
    label_start: str  # only outgoing edges
    label_end: str  # only incoming edges
    label_active: str
    label_inactive: str
    cut_stroke: str


THEMES: dict[str, Theme] = {
    "light": Theme(
        background="white",
        edge_start=GREEN,
        edge_end=RED,
        edge_inactive="rgba(0, 0, 0, 0.02)",
        label_start="rgb(0, 128, 0)",
        label_end="rgb(128, 0, 0)",
        label_active="black",
        label_inactive="rgba(0, 0, 0, 0.2)",
        cut_stroke="black",
    ),
    "dark": Theme(
        background="black",
        edge_start=GREEN,
        edge_end=RED,
        edge_inactive="rgba(192, 192, 192, 0.02)",
        label_start="rgb(0, 192, 0)",
        label_end="rgb(192, 0, 0)",
        label_active="rgb(192, 192, 192)",
        label_inactive="rgba(192, 192, 192, 0.2)",
        cut_stroke="white",
    ),
    "alt": Theme(
        background="white",
        edge_start=Rgb(28, 0, 252),
        edge_end=Rgb(249, 128, 22),
        edge_inactive="rgba(0, 0, 0, 0.02)",
        label_start="rgb(28, 0, 252)",
        label_end="rgb(176, 91, 16)",
        label_active="black",
        label_inactive="rgba(0, 0, 0, 0.2)",
        cut_stroke="black",
    ),
    "mono": Theme(
        background="rgb(128, 128, 128)",
        edge_start=WHITE,
        edge_end=BLACK,
        edge_inactive="rgba(0, 0, 0, 0.02)",
        label_start="white",
        label_end="black",
        label_active="rgb(64, 64, 64)",
        label_inactive="rgba(0, 0, 0, 0.2)",
        cut_stroke="black",
    ),
}


@dataclass
class RenderOptions:
    """Canvas geometry and styling for ``render_svg``."""

    size: float = 800.0
    padding: float = 80.0
    gradient_steps: int = 8
    font_size: float = 8.0
    line_width: float = 1.0
    rotation: float = 0.0  # radians
    theme: str = "light"
    show_outline: bool = False
    cut: tuple[float, float, float, float] | None = None  # layout space x1, y1, x2, y2
    title: str | None = None


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _is_left(a, b, x: float, y: float) -> float:
    return (b.x - a.x) * (y - a.y) - (x - a.x) * (b.y - a.y)


def _on_segment(a, b, x: float, y: float) -> bool:
    if abs(_is_left(a, b, x, y)) > _EPSILON:
        return False
    return min(a.x, b.x) - _EPSILON <= x <= max(a.x, b.x) + _EPSILON and (
        min(a.y, b.y) - _EPSILON <= y <= max(a.y, b.y) + _EPSILON
    )


class SvgPathContext:
    """A ``PathContext`` that records SVG ``<path>`` elements.

    Stroke and fill styles are plain attributes, as on a canvas context.
    Hit testing flattens the last replayed path and applies the non-zero
    winding rule, counting points on the boundary as inside.
    """

    def __init__(self) -> None:
        self.elements: list[str] = []
        self.stroke_style = "black"
        self.fill_style = "black"
        self.line_width = 1.0
        self._commands: list[str] = []
        self._path = GeomPath()

    def begin_path(self) -> None:
        self._commands = []
        self._path = GeomPath()

    def move_to(self, x: float, y: float) -> None:
        self._commands.append(f"M{_fmt(x)},{_fmt(y)}")
        self._path.move_to(x, y)

    def line_to(self, x: float, y: float) -> None:
        self._commands.append(f"L{_fmt(x)},{_fmt(y)}")
        self._path.line_to(x, y)

    def bezier_curve_to(
        self, cp1x: float, cp1y: float, cp2x: float, cp2y: float, x: float, y: float
    ) -> None:
        self._commands.append(
            f"C{_fmt(cp1x)},{_fmt(cp1y)} {_fmt(cp2x)},{_fmt(cp2y)} {_fmt(x)},{_fmt(y)}"
        )
        self._path.bezier_curve_to(cp1x, cp1y, cp2x, cp2y, x, y)

    @property
    def path_data(self) -> str:
        return " ".join(self._commands)

    def stroke(self) -> None:
        if not self._commands:
            return
        self.elements.append(
            f'<path d="{self.path_data}" fill="none" stroke="{self.stroke_style}" '
            f'stroke-width="{_fmt(self.line_width)}"/>'
        )

    def fill(self) -> None:
        if not self._commands:
            return
        self.elements.append(f'<path d="{self.path_data}" fill="{self.fill_style}" stroke="none"/>')

    def is_point_in_path(self, x: float, y: float) -> bool:
        segments = self._path.flatten().segments()
        winding = 0
        start = prev = None
        # Each subpath is implicitly closed back to its first point
        edges = []
        for segment in segments:
            p = segment.end
            if segment.type is SegmentType.MOVE:
                if start is not None and prev is not start:
                    edges.append((prev, start))
                start = prev = p
            else:
                edges.append((prev, p))
                prev = p
        if start is not None and prev is not start:
            edges.append((prev, start))

        for a, b in edges:
            if _on_segment(a, b, x, y):
                return True
            if a.y <= y:
                if b.y > y and _is_left(a, b, x, y) > 0:
                    winding += 1
            elif b.y <= y and _is_left(a, b, x, y) < 0:
                winding -= 1
        return winding != 0


def gradient_stroke(
    gradient: Gradient, steps: int, alpha: float = 1.0, line_width: float = 1.0
) -> Callable[[PathContext, EdgeSpline], None]:
    """Return a ``draw_spline`` strategy coloring each edge from start to end.

    The spline is split into steps pieces of equal length, each stroked with
    the gradient color at its midpoint.
    """

    def draw(context: SvgPathContext, spline: EdgeSpline) -> None:
        if not spline.segments():
            return
        context.line_width = line_width
        pieces = spline.split(steps)
        for i, piece in enumerate(pieces):
            context.stroke_style = str(gradient.color((i + 0.5) / steps).with_alpha(alpha))
            piece.stroke(context)

    return draw


def edge_alpha(active_count: int) -> float:
    """Opacity for edges so dense drawings stay readable."""
    return 0.17 + 0.83 / math.sqrt(max(active_count, 1))


def crossing_splines(splines: list[EdgeSpline], cut: Line) -> list[EdgeSpline]:
    """Return the splines that intersect the cut line."""
    return [spline for spline in splines if cut.intersects(spline)]


def node_styles(tree: Tree, splines: list[EdgeSpline], theme: Theme) -> dict[int, str]:
    """Color each node by the direction of its active edges.

    Edge counts propagate to ancestors, so a package is colored by the
    edges of everything inside it. Nodes with only outgoing edges get
    ``label_start``, only incoming ``label_end``, both ``label_active``.
    """
    n = len(tree.nodes)
    incoming = [0] * n
    outgoing = [0] * n
    for spline in splines:
        outgoing[spline.start] += 1
        incoming[spline.end] += 1

    # Children always follow their parents, so one reverse pass is enough
    for node in reversed(tree.nodes):
        if node.parent is not None:
            incoming[node.parent.index] += incoming[node.index]
            outgoing[node.parent.index] += outgoing[node.index]

    styles = {}
    for i in range(n):
        if incoming[i] > 0 and outgoing[i] == 0:
            styles[i] = theme.label_end
        elif outgoing[i] > 0 and incoming[i] == 0:
            styles[i] = theme.label_start
        elif incoming[i] + outgoing[i] > 0:
            styles[i] = theme.label_active
        else:
            styles[i] = theme.label_inactive
    return styles


def render_svg(
    router: BundledEdgeRouter,
    labeler: RadialLabeler,
    output_path: Path,
    options: RenderOptions | None = None,
    outline: GeomPath | None = None,
    active: list[EdgeSpline] | None = None,
    cut: Line | None = None,
) -> None:
    """Render bundled edges and leaf labels to a standalone SVG file.

    Router and labeler must already map layout space to the canvas (via
    their ``transform_point`` hooks).

    Args:
        router: Initialized edge router; its ``draw_spline`` draws active edges.
        labeler: Labeler for leaf nodes.
        output_path: Path to write the SVG file.
        options: Canvas and styling options.
        outline: Optional outline polygon in canvas space.
        active: Edges to highlight; all edges when None. Inactive edges are
            drawn faintly underneath.
        cut: Optional cut line in canvas space, drawn over the edges.
    """
    options = options or RenderOptions()
    theme = THEMES[options.theme]
    splines = router.splines if active is None else active
    active_ids = {id(s) for s in splines}

    context = SvgPathContext()
    context.line_width = options.line_width

    if outline is not None:
        context.fill_style = "none"
        context.stroke_style = theme.label_inactive
        outline.stroke(context)

    context.stroke_style = theme.edge_inactive
    for spline in router.splines:
        if id(spline) not in active_ids:
            spline.stroke(context)
    context.stroke_style = theme.label_active
    for spline in splines:
        router.draw_spline(context, spline)
    if cut is not None:
        context.stroke_style = theme.cut_stroke
        cut.stroke(context)

    size = _fmt(options.size)
    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
        f'viewBox="0 0 {size} {size}">',
        f'  <rect width="100%" height="100%" fill="{theme.background}"/>',
    ]
    if options.title:
        lines.append(f"  <title>{html.escape(options.title)}</title>")
    lines.append('  <g class="edges">')
    lines.extend(f"    {element}" for element in context.elements)
    lines.append("  </g>")

    lines.append(
        f'  <g class="labels" font-family="sans-serif" font-size="{_fmt(options.font_size)}">'
    )
    for label in labeler.labels():
        offset = -2 if label.anchor == "end" else 2
        fill = label.style or theme.label_active
        lines.append(
            f'    <text transform="translate({_fmt(label.x)},{_fmt(label.y)}) '
            f'rotate({_fmt(math.degrees(label.angle))})" x="{offset}" dy="0.35em" '
            f'text-anchor="{label.anchor}" fill="{fill}">{html.escape(label.text)}</text>'
        )
    lines.append("  </g>")
    lines.append("</svg>")

    output_path.write_text("\n".join(lines) + "\n")


def _create_rotated_label_svg(label: str, angle: float, color: str, font_size: int = 10) -> str:
    """Create an SVG data URL with text rotated to the radial direction.

    Text on the left half is flipped so it is never upside-down.
    """
    angle_deg = math.degrees(angle)
    if angle_deg > 90 or angle_deg < -90:
        angle_deg += 180

    char_width = font_size * 0.6
    text_width = len(label) * char_width
    text_height = font_size * 1.4
    padding = 4

    # Square canvas large enough for the text at any rotation
    svg_size = max(text_width, text_height) + padding * 2 + 10
    center = svg_size / 2

    svg = f'''<svg xmlns="http://www.w3.org/2000/svg" width="{svg_size}" height="{svg_size}">
  <g transform="translate({center}, {center}) rotate({angle_deg})">
    <text x="0" y="{font_size * 0.35}"
          text-anchor="middle" font-family="monospace" font-size="{font_size}"
          fill="{color}">{html.escape(label)}</text>
  </g>
</svg>'''

    encoded = base64.b64encode(svg.encode()).decode()
    return f"data:image/svg+xml;base64,{encoded}"


def render_html(
    tree: Tree,
    labeler: RadialLabeler,
    output_path: Path,
    styles: dict[int, str] | None = None,
) -> None:
    """Render an interactive pyvis view of the laid-out tree.

    Nodes sit at their (canvas-space) radial positions; leaves show rotated
    labels, and dependency edges are drawn as straight arrows. Selecting a
    node highlights its edges.

    Args:
        tree: The dependency tree.
        labeler: Labeler providing positions, angles and names.
        output_path: Path to write the HTML file.
        styles: Optional label color per node index.
    """
    from pyvis.network import Network

    styles = styles or {}
    net = Network(height="100vh", width="100%", bgcolor="#ffffff", directed=True)
    net.toggle_physics(False)

    def node_id(node: Node) -> str:
        return node.full_name or str(node.index)

    for node in tree.nodes:
        p = labeler.transform_point(labeler.layout.position(node.index))
        title = node.full_name or "(root)"
        if node.is_leaf and node is not tree.root:
            angle = labeler.transform_angle(labeler.layout.angle(node.index))
            color = styles.get(node.index, "black")
            net.add_node(
                node_id(node),
                label=" ",
                title=title,
                x=p.x,
                y=p.y,
                fixed=True,
                shape="image",
                image=_create_rotated_label_svg(labeler.name(node), angle, color),
                size=20,
            )
        else:
            net.add_node(
                node_id(node),
                label=node.name or " ",
                title=title,
                x=p.x,
                y=p.y,
                fixed=True,
                shape="dot",
                size=3,
                color="#cccccc",
            )

    for node in tree.nodes:
        for target in node.outgoing:
            net.add_edge(node_id(node), node_id(target), color="rgba(128,128,128,0.3)", width=0.5)

    net.set_options("""
    {
        "physics": {"enabled": false},
        "interaction": {"hover": true, "selectConnectedEdges": true, "zoomView": true},
        "edges": {
            "arrows": {"to": {"enabled": true, "scaleFactor": 0.3}},
            "smooth": false,
            "selectionWidth": 1.5
        }
    }
    """)

    net.save_graph(str(output_path))

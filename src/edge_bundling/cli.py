"""CLI for edge-bundling."""

import argparse
import json
import math
import sys
from pathlib import Path

from .graph import (
    DependencyTree,
    build_dependency_tree,
    find_dependency_paths,
    load_dependency_data,
    save_dependency_data,
)
from .layout import DEFAULT_BETA, THEMES, RenderOptions, apply_filter
from .parse_imports import scan_package
from .visualize import build_view, generate_html, generate_json, generate_summary, generate_svg

# Config keys that map directly onto render flags, with their converters
_RENDER_CONFIG = {
    "start-radius": ("start_radius", float),
    "beta": ("beta", float),
    "size": ("size", float),
    "padding": ("padding", float),
    "gradient-steps": ("gradient_steps", int),
    "rotation": ("rotation", float),
    "theme": ("theme", str),
}


def load_config(config_path: Path) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Dictionary of configuration values.
    """
    try:
        import yaml

        with open(config_path) as f:
            return yaml.safe_load(f) or {}
    except ImportError as err:
        raise ImportError("PyYAML required for config files: pip install pyyaml") from err


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments shared between subcommands."""
    parser.add_argument("--data", type=Path, help="Dependency data JSON file")
    parser.add_argument("--source", type=Path, help="Directory of Python packages to scan")
    parser.add_argument(
        "--include-external",
        action="store_true",
        help="Keep imports of modules outside --source as top-level packages",
    )
    parser.add_argument(
        "--prefix",
        type=str,
        action="append",
        help="Only show modules under this package (can be repeated)",
    )
    parser.add_argument("--config", type=Path, help="Path to YAML config file")


def resolve_common_args(args: argparse.Namespace, parser: argparse.ArgumentParser) -> dict:
    """Resolve common arguments: load config and validate inputs.

    Returns:
        The loaded config (empty without --config), for subcommand extras.
    """
    config = {}
    if args.config:
        try:
            config = load_config(args.config)
        except OSError as err:
            parser.error(f"cannot read config {args.config}: {err}")
        if not isinstance(config, dict):
            parser.error(f"config {args.config} must be a mapping")
        if not args.data and "data" in config:
            args.data = Path(config["data"])
        if not args.source and "source" in config:
            args.source = Path(config["source"])
        if not args.prefix and "prefix" in config:
            val = config["prefix"]
            args.prefix = val if isinstance(val, list) else [val]

    if args.data and args.source:
        parser.error("--data and --source are mutually exclusive")
    if not args.data and not args.source:
        parser.error("one of --data or --source is required")
    if args.source and not args.source.is_dir():
        parser.error(f"--source {args.source} is not a directory")

    return config


def load_tree(args: argparse.Namespace, parser: argparse.ArgumentParser) -> DependencyTree:
    """Load or scan dependency data, filter it and build the tree."""
    if args.data:
        print(f"Loading {args.data}...")
        try:
            entries = load_dependency_data(args.data)
        except (OSError, ValueError) as err:
            parser.error(str(err))
    else:
        print(f"Scanning {args.source}...")
        entries = scan_package(args.source, include_external=args.include_external)
    print(f"Found {len(entries)} modules")

    if args.prefix:
        result = apply_filter(entries, args.prefix)
        for warning in result.warnings:
            print(f"Warning: {warning}", file=sys.stderr)
        entries = result.entries
        print(f"Kept {len(entries)} modules under {', '.join(args.prefix)}")

    tree = build_dependency_tree(entries)
    edge_count = sum(1 for _ in tree.edges())
    print(f"Built tree with {len(tree)} nodes and {edge_count} edges")
    return tree


def cmd_render(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Run the render subcommand."""
    config = resolve_common_args(args, parser)
    if args.output == Path("results") and "output" in config:
        args.output = Path(config["output"])
    for key, (attr, convert) in _RENDER_CONFIG.items():
        if getattr(args, attr) is None and key in config:
            setattr(args, attr, convert(config[key]))

    if args.theme is not None and args.theme not in THEMES:
        parser.error(f"unknown theme {args.theme!r} (choose from {', '.join(THEMES)})")
    if args.gradient_steps is not None and args.gradient_steps < 1:
        parser.error("--gradient-steps must be at least 1")

    defaults = RenderOptions()
    options = RenderOptions(
        size=args.size if args.size is not None else defaults.size,
        padding=args.padding if args.padding is not None else defaults.padding,
        gradient_steps=args.gradient_steps or defaults.gradient_steps,
        rotation=math.radians(args.rotation or 0.0),
        theme=args.theme or defaults.theme,
        show_outline=args.outline,
        cut=tuple(args.cut) if args.cut else None,
        title=args.title,
    )
    if options.padding * 2 >= options.size:
        parser.error("--padding must be less than half of --size")

    tree = load_tree(args, parser)
    if len(tree) == 1:
        print("Error: No modules to render", file=sys.stderr)
        sys.exit(1)

    args.output = args.output.resolve()
    args.output.mkdir(parents=True, exist_ok=True)

    view = build_view(
        tree,
        options,
        start_radius=args.start_radius if args.start_radius is not None else 0.6,
        beta=args.beta if args.beta is not None else DEFAULT_BETA,
    )
    if view.cut is not None:
        print(f"Cut crosses {len(view.active)} of {len(view.router.splines)} edges")

    generate_svg(view, args.output / "bundles.svg", options)
    print("Wrote bundles.svg")

    generate_json(view, args.output / "bundles.json")
    print("Wrote bundles.json")

    if args.html:
        generate_html(view, args.output / "bundles.html")
        print("Wrote bundles.html")

    generate_summary(tree, args.output / "summary.txt")
    print("\nWrote summary.txt")
    print(f"\nAll outputs written to {args.output}/")


def cmd_scan(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Scan a source tree and write dependency data JSON."""
    if not args.source.is_dir():
        parser.error(f"--source {args.source} is not a directory")

    print(f"Scanning {args.source}...")
    entries = scan_package(args.source, include_external=args.include_external)
    edge_count = sum(len(e.imports) for e in entries)
    print(f"Found {len(entries)} modules with {edge_count} imports")

    args.output.parent.mkdir(parents=True, exist_ok=True)
    save_dependency_data(entries, args.output)
    print(f"Wrote {args.output}")


def find_matching_module(tree: DependencyTree, pattern: str) -> str | None:
    """Find module matching pattern (exact name, else substring). Error if ambiguous."""
    if tree.find(pattern) is not None:
        return pattern
    matches = [n.full_name for n in tree.nodes if n.full_name and pattern in n.full_name]
    if len(matches) == 0:
        print(f"Error: No module matching '{pattern}'", file=sys.stderr)
        return None
    if len(matches) > 1:
        print(f"Error: Ambiguous pattern '{pattern}' matches:", file=sys.stderr)
        for m in sorted(matches)[:10]:
            print(f"  {m}", file=sys.stderr)
        if len(matches) > 10:
            print(f"  ... and {len(matches) - 10} more", file=sys.stderr)
        return None
    return matches[0]


def print_dependency_chain(path: list[str]) -> None:
    """Print the dependency chain with indentation."""
    for i, name in enumerate(path):
        indent = "  " * i
        arrow = "-> " if i > 0 else ""
        print(f"{indent}{arrow}{name}")


def cmd_trace(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Find and display the dependency path between two modules."""
    resolve_common_args(args, parser)
    if args.max_paths < 1:
        parser.error("--max-paths must be at least 1")

    tree = load_tree(args, parser)

    from_module = find_matching_module(tree, args.from_module)
    to_module = find_matching_module(tree, args.to_module)
    if not from_module or not to_module:
        sys.exit(1)

    paths, total_count = find_dependency_paths(tree, from_module, to_module, args.max_paths)

    if not paths:
        print(f"No path found from {from_module} to {to_module}")
        return

    path_len = len(paths[0])
    not_shown = total_count - len(paths)
    extra_msg = f", {not_shown} more not shown" if not_shown > 0 else ""

    print(f"\n{total_count} shortest path(s) of length {path_len}{extra_msg}:\n")

    for i, path in enumerate(paths):
        if i > 0:
            print()
        print(f"Path {i + 1}:")
        print_dependency_chain(path)


def cmd_lca(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Print the edge route between two modules: up to their common package and back down."""
    resolve_common_args(args, parser)
    tree = load_tree(args, parser)

    a_name = find_matching_module(tree, args.a)
    b_name = find_matching_module(tree, args.b)
    if not a_name or not b_name:
        sys.exit(1)

    a, b = tree.find(a_name), tree.find(b_name)
    shared = tree.least_common_ancestor(a, b)
    up = a.ancestors()
    down = b.ancestors()
    route = up[: up.index(shared) + 1] + list(reversed(down[: down.index(shared)]))

    print(f"Common package: {shared.full_name or '(root)'}")
    print(json.dumps([n.full_name or "(root)" for n in route]))


def main() -> None:
    """Main entry point for edge-bundling CLI."""
    parser = argparse.ArgumentParser(
        description="Draw module dependencies as hierarchically bundled edges"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser(
        "render",
        help="Lay out the package tree radially and render bundled dependency edges",
    )
    add_common_args(render_parser)
    render_parser.add_argument(
        "--output",
        type=Path,
        default=Path("results"),
        help="Output directory (default: results)",
    )
    render_parser.add_argument(
        "--start-radius",
        type=float,
        help="Radius of the innermost ring as a fraction of the outer (default: 0.6)",
    )
    render_parser.add_argument(
        "--beta",
        type=float,
        help=f"Bundling strength, 0 = straight lines, 1 = fully bundled (default: {DEFAULT_BETA})",
    )
    render_parser.add_argument("--size", type=float, help="Canvas width and height in pixels")
    render_parser.add_argument("--padding", type=float, help="Space left for labels in pixels")
    render_parser.add_argument(
        "--gradient-steps", type=int, help="Pieces per edge for the color gradient"
    )
    render_parser.add_argument("--rotation", type=float, help="Rotate the drawing by degrees")
    render_parser.add_argument("--theme", type=str, help=f"Color theme ({', '.join(THEMES)})")
    render_parser.add_argument(
        "--outline", action="store_true", help="Draw the outline of the layout"
    )
    render_parser.add_argument(
        "--cut",
        type=float,
        nargs=4,
        metavar=("X1", "Y1", "X2", "Y2"),
        help="Highlight edges crossing this line (layout coordinates, unit circle)",
    )
    render_parser.add_argument("--title", type=str, help="Title embedded in the SVG")
    render_parser.add_argument(
        "--html", action="store_true", help="Also write an interactive pyvis HTML view"
    )

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan Python sources and write dependency data JSON",
    )
    scan_parser.add_argument("--source", type=Path, required=True, help="Directory to scan")
    scan_parser.add_argument(
        "--include-external",
        action="store_true",
        help="Keep imports of modules outside --source as top-level packages",
    )
    scan_parser.add_argument(
        "--output",
        type=Path,
        default=Path("dependencies.json"),
        help="Output JSON path (default: dependencies.json)",
    )

    trace_parser = subparsers.add_parser(
        "trace",
        help="Find the dependency path between two modules",
    )
    add_common_args(trace_parser)
    trace_parser.add_argument(
        "--from",
        dest="from_module",
        required=True,
        help="Importing module (substring match)",
    )
    trace_parser.add_argument(
        "--to",
        dest="to_module",
        required=True,
        help="Imported module (substring match)",
    )
    trace_parser.add_argument(
        "-n",
        "--max-paths",
        type=int,
        default=10,
        help="Maximum number of paths to show (default: 10)",
    )

    lca_parser = subparsers.add_parser(
        "lca",
        help="Show the common package and edge route between two modules",
    )
    add_common_args(lca_parser)
    lca_parser.add_argument("a", help="First module (substring match)")
    lca_parser.add_argument("b", help="Second module (substring match)")

    args = parser.parse_args()

    if args.command == "render":
        cmd_render(args, render_parser)
    elif args.command == "scan":
        cmd_scan(args, scan_parser)
    elif args.command == "trace":
        cmd_trace(args, trace_parser)
    elif args.command == "lca":
        cmd_lca(args, lca_parser)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

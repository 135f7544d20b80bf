"""Build dependency trees from (module, imports) data."""

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import networkx as nx

from .tree import Node, Tree


@dataclass
class ModuleEntry:
    """A module and the fully-qualified names it imports."""

    name: str
    imports: list[str] = field(default_factory=list)


class DependencyTree(Tree):
    """Tree of dotted names organized by package, with dependency edges.

    Nodes are normally created through ``get``, which synthesizes the
    package nodes of a dotted name on demand: ``get("flare.util.Arrays")``
    creates ``flare`` and ``flare.util`` if needed. Each node's ``name`` is
    the last component and ``full_name`` the dotted name; the root has
    neither.
    """

    def clear(self) -> None:
        super().clear()
        self._by_name: dict[str, Node] = {}

    def get(self, full_name: str) -> Node:
        """Return the node for full_name, creating it and its packages as needed."""
        node = self._by_name.get(full_name)
        if node is not None:
            return node
        package, _, name = full_name.rpartition(".")
        parent = self.get(package) if package else self.root
        node = parent.add_child()
        node.name = name
        node.full_name = full_name
        self._by_name[full_name] = node
        return node

    def find(self, full_name: str) -> Node | None:
        """Return the node for full_name, or None if it does not exist."""
        return self._by_name.get(full_name)

    def remove_child(self, parent: Node, child: Node) -> None:
        removed = {id(n) for n in _subtree(child)}
        super().remove_child(parent, child)
        self._by_name = {k: v for k, v in self._by_name.items() if id(v) not in removed}

    def leaves(self) -> list[Node]:
        return [node for node in self.nodes if node.is_leaf and node is not self.root]


def _subtree(node: Node) -> list[Node]:
    nodes = [node]
    for child in node.children:
        nodes.extend(_subtree(child))
    return nodes


def load_dependency_data(path: Path) -> list[ModuleEntry]:
    """Load dependency data from a JSON file.

    The file holds a list of objects with a ``name`` string and an
    ``imports`` list of names, e.g.
    ``[{"name": "flare.vis.Visualization", "imports": ["flare.util.Arrays"]}]``.

    Args:
        path: Path to the JSON file.

    Returns:
        List of module entries in file order.

    Raises:
        ValueError: If the JSON does not have the expected structure.
    """
    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list, got {type(data).__name__}")

    entries = []
    for i, item in enumerate(data):
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            raise ValueError(f"{path}: entry {i} has no 'name' string")
        imports = item.get("imports", [])
        if not isinstance(imports, list) or not all(isinstance(x, str) for x in imports):
            raise ValueError(f"{path}: entry {i} ({item['name']}) has invalid 'imports'")
        entries.append(ModuleEntry(item["name"], list(imports)))
    return entries


def save_dependency_data(entries: Iterable[ModuleEntry], path: Path) -> None:
    """Write entries in the format read by ``load_dependency_data``."""
    data = [{"name": e.name, "imports": sorted(e.imports)} for e in entries]
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def build_dependency_tree(entries: Iterable[ModuleEntry]) -> DependencyTree:
    """Create one node per module and import, and one edge per import."""
    tree = DependencyTree()
    for entry in entries:
        node = tree.get(entry.name)
        for name in entry.imports:
            node.add_edge(tree.get(name))
    return tree


def to_networkx(tree: Tree) -> nx.DiGraph:
    """Export the dependency edges of tree as a DiGraph keyed by full name.

    Nodes without a full name (the root) are keyed by index.
    """
    G = nx.DiGraph()
    for node in tree.nodes[1:]:
        G.add_node(node.full_name or node.index, index=node.index, leaf=node.is_leaf)
    for node in tree.nodes:
        for target in node.outgoing:
            G.add_edge(node.full_name or node.index, target.full_name or target.index)
    return G


def find_dependency_paths(
    tree: Tree, start: str, end: str, max_paths: int
) -> tuple[list[list[str]], int]:
    """Find shortest dependency paths and their total count.

    Args:
        tree: Dependency tree.
        start: Full name of the importing module.
        end: Full name of the imported module.
        max_paths: Maximum number of paths to return.

    Returns:
        Tuple of (list_of_paths, total_count_of_shortest_paths).
        If no path exists, returns ([], 0).
    """
    G = to_networkx(tree)
    if start not in G or end not in G or not nx.has_path(G, start, end):
        return [], 0

    paths: list[list[str]] = []
    total = 0
    for path in nx.all_shortest_paths(G, start, end):
        if len(paths) < max_paths:
            paths.append(path)
        total += 1
    return paths, total

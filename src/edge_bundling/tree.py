"""Heap-ordered trees with an overlay of directed edges.

A ``Tree`` always has a single root that cannot be removed. Every node has
an integer ``index`` into ``Tree.nodes``; indices are contiguous and heap
ordered, so a parent's index is always lower than its descendants'.
Besides the parent/child structure, nodes can be connected by arbitrary
directed edges (dependencies), kept in ``outgoing``/``incoming``.
"""

from collections.abc import Iterator


class Node:
    """A vertex in a ``Tree``."""

    def __init__(self, tree: "Tree", parent: "Node | None") -> None:
        self.tree = tree
        self.parent = parent
        self.index = len(tree.nodes)
        self.children: list[Node] = []
        self.outgoing: list[Node] = []
        self.incoming: list[Node] = []
        # Set by graph builders, e.g. the package and class names
        self.name: str | None = None
        self.full_name: str | None = None
        tree.nodes.append(self)

    def __repr__(self) -> str:
        label = f" {self.full_name}" if self.full_name else ""
        return f"<Node {self.index}{label}>"

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def add_child(self) -> "Node":
        """Create and return a new child node with no edges."""
        child = Node(self.tree, self)
        self.children.append(child)
        return child

    def remove_child(self, child: "Node") -> None:
        """Remove child, its descendants and every edge touching them.

        Remaining nodes are renumbered so indices stay contiguous.

        Raises:
            ValueError: If child is not a child of this node.
        """
        self.children.remove(child)
        child.clear_edges()
        child.clear_children()
        nodes = self.tree.nodes
        del nodes[child.index]
        for i in range(child.index, len(nodes)):
            nodes[i].index = i
        child.parent = None

    def clear_children(self) -> None:
        """Remove all children of this node."""
        for child in list(self.children):
            self.remove_child(child)

    def add_edge(self, node: "Node") -> None:
        """Add a directed edge from this node to node; existing edges are kept once."""
        if node in self.outgoing:
            return
        node.incoming.append(self)
        self.outgoing.append(node)

    def remove_edge(self, node: "Node") -> bool:
        """Remove the directed edge from this node to node.

        Returns:
            True if the edge existed.
        """
        if self not in node.incoming:
            return False
        node.incoming.remove(self)
        self.outgoing.remove(node)
        return True

    def clear_edges(self) -> None:
        """Remove every edge touching this node; parent/child links are kept."""
        for node in self.incoming:
            node.outgoing.remove(self)
        for node in self.outgoing:
            node.incoming.remove(self)
        self.incoming = []
        self.outgoing = []

    def ancestors(self) -> list["Node"]:
        """Return this node, its parent, grandparent and so on up to the root."""
        ancestors = []
        node: Node | None = self
        while node is not None:
            ancestors.append(node)
            node = node.parent
        return ancestors


class Tree:
    """A tree of ``Node`` objects, created with a single root."""

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        """Reset to a single root with no edges.

        Nodes obtained before the call must not be used afterwards.
        """
        self.nodes: list[Node] = []
        self.root = Node(self, None)

    def __len__(self) -> int:
        return len(self.nodes)

    def add_child(self, parent: Node | None = None) -> Node:
        """Add a child to parent (the root by default)."""
        return (parent or self.root).add_child()

    def remove_child(self, parent: Node, child: Node) -> None:
        parent.remove_child(child)

    def edges(self) -> Iterator[tuple[int, int]]:
        """Yield (start, end) index pairs for every directed edge."""
        for node in self.nodes:
            for target in node.outgoing:
                yield node.index, target.index

    def least_common_ancestor(self, a: Node, b: Node) -> Node:
        """Return the deepest node that is an ancestor of both a and b.

        Both nodes must belong to this tree.
        """
        if a is b:
            return a
        shared = self.root
        for a_node, b_node in zip(reversed(a.ancestors()), reversed(b.ancestors())):
            if a_node is not b_node:
                break
            shared = a_node
        return shared

"""Pytest fixtures for edge bundling tests."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from edge_bundling.graph import ModuleEntry
from edge_bundling.tree import Node, Tree


@dataclass
class SmallTree:
    """root -> {A -> {leaf1, leaf2}, B -> {leaf3}} with edges leaf1->leaf3, leaf2->leaf1."""

    tree: Tree
    root: Node
    a: Node
    b: Node
    leaf1: Node
    leaf2: Node
    leaf3: Node


@pytest.fixture
def small_tree() -> SmallTree:
    """Two packages under the root, three leaves, two dependency edges."""
    tree = Tree()
    a = tree.add_child()
    b = tree.add_child()
    leaf1 = a.add_child()
    leaf2 = a.add_child()
    leaf3 = b.add_child()
    leaf1.add_edge(leaf3)
    leaf2.add_edge(leaf1)
    return SmallTree(tree, tree.root, a, b, leaf1, leaf2, leaf3)


@pytest.fixture
def flare_entries() -> list[ModuleEntry]:
    """A few modules in two packages, with one cross-package cycle."""
    return [
        ModuleEntry("flare.vis.Visualization", ["flare.util.Arrays", "flare.vis.data.Data"]),
        ModuleEntry("flare.vis.data.Data", ["flare.util.Arrays"]),
        ModuleEntry("flare.util.Arrays", []),
        ModuleEntry("flare.util.Strings", ["flare.vis.Visualization"]),
    ]


@pytest.fixture
def external_path_entries() -> list[ModuleEntry]:
    """app.a -> ext.x -> app.c goes through a package outside ``app``."""
    return [
        ModuleEntry("app.a", ["app.b", "ext.x"]),
        ModuleEntry("app.b", []),
        ModuleEntry("ext.x", ["app.c"]),
        ModuleEntry("app.c", []),
    ]


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A small importable package layout on disk."""
    pkg = tmp_path / "pkg"
    (pkg / "sub").mkdir(parents=True)
    (pkg / "__init__.py").write_text("from .core import run\n")
    (pkg / "core.py").write_text(
        "import os\n"
        "import json, sys\n"
        "from pkg.sub import helpers\n"
        "from .sub.helpers import format_name as fmt\n"
    )
    (pkg / "sub" / "__init__.py").write_text("")
    (pkg / "sub" / "helpers.py").write_text(
        "from __future__ import annotations\n"
        "from .. import core\n"
        "import collections.abc\n"
    )
    return tmp_path

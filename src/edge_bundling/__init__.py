"""Hierarchical edge bundling for dependency graphs."""

from .graph import DependencyTree, ModuleEntry, build_dependency_tree
from .tree import Node, Tree

__version__ = "0.1.0"

__all__ = ["Tree", "Node", "DependencyTree", "ModuleEntry", "build_dependency_tree"]

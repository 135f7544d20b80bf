"""Package prefix filtering with warning detection for external paths."""

from collections import deque
from dataclasses import dataclass, field

from ..graph import ModuleEntry


@dataclass
class FilterResult:
    """Result of applying a package prefix filter to module entries."""

    entries: list[ModuleEntry] = field(default_factory=list)
    included_modules: set[str] = field(default_factory=set)
    intermediate_modules: set[str] = field(default_factory=set)  # Filtered-out but on path
    warnings: list[str] = field(default_factory=list)  # "Path through external: a -> x -> b"


def matches_prefix(name: str, prefix: str) -> bool:
    """Return True if dotted name is prefix or lies inside it (``a.b`` is in ``a``, ``ab`` is not)."""
    return name == prefix or name.startswith(prefix + ".")


def apply_filter(entries: list[ModuleEntry], prefixes: str | list[str]) -> FilterResult:
    """Keep modules under the given package prefix(es).

    Imports are kept only between included modules. Dependency paths that
    leave the included set and come back through external modules are
    reported as warnings, since the filtered view hides them.

    Args:
        entries: Module entries to filter.
        prefixes: Dotted package prefix or list of prefixes.

    Returns:
        FilterResult with filtered entries, intermediate modules and warnings.
    """
    result = FilterResult()

    if isinstance(prefixes, str):
        prefixes = [prefixes]

    edges: dict[str, list[str]] = {}
    all_modules: set[str] = set()
    for entry in entries:
        edges.setdefault(entry.name, []).extend(entry.imports)
        all_modules.add(entry.name)
        all_modules.update(entry.imports)

    for name in all_modules:
        if any(matches_prefix(name, p) for p in prefixes):
            result.included_modules.add(name)

    for entry in entries:
        if entry.name in result.included_modules:
            imports = [name for name in entry.imports if name in result.included_modules]
            result.entries.append(ModuleEntry(entry.name, imports))

    # Find paths: included -> excluded -> ... -> included
    for start in sorted(result.included_modules):
        for excluded in edges.get(start, []):
            if excluded in result.included_modules:
                continue

            visited: set[str] = set()
            queue: deque[tuple[str, list[str]]] = deque([(excluded, [excluded])])
            while queue:
                name, path = queue.popleft()
                if name in visited:
                    continue
                visited.add(name)

                for target in edges.get(name, []):
                    if target in result.included_modules:
                        path_str = " -> ".join([start, *path, target])
                        warning = f"Path through external: {path_str}"
                        if warning not in result.warnings:
                            result.warnings.append(warning)
                        result.intermediate_modules.update(path)
                    elif target not in visited:
                        queue.append((target, path + [target]))

    return result

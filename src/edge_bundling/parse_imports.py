"""Parse import statements from Python source files."""

import re
from pathlib import Path

from .graph import ModuleEntry

_IMPORT_PATTERN = re.compile(r"^\s*import\s+([\w.]+(?:\s+as\s+\w+)?(?:\s*,\s*[\w.]+(?:\s+as\s+\w+)?)*)")
_FROM_PATTERN = re.compile(r"^\s*from\s+(\.*)([\w.]*)\s+import\s+\(?([\w\s,*]*)")


def _resolve_relative(dots: str, target: str, module: str | None, is_package: bool) -> str | None:
    """Resolve a relative import against the importing module's name."""
    if not dots:
        return target
    if module is None:
        return None
    parts = module.split(".")
    # A package's __init__ is its own base; a module's base is its package
    keep = len(parts) - len(dots) + (1 if is_package else 0)
    if keep <= 0:
        return None
    base = ".".join(parts[:keep])
    return f"{base}.{target}" if target else base


def parse_imports(source_path: Path, module: str | None = None) -> list[str]:
    """Extract fully-qualified imported names from a Python source file.

    ``import a.b`` yields ``a.b``; ``from a import b, c`` yields ``a.b`` and
    ``a.c`` (which may be modules or attributes). Relative imports are
    resolved against module when it is given and skipped otherwise.

    Args:
        source_path: Path to the .py file to parse.
        module: Dotted name of the module in source_path.

    Returns:
        List of imported names, in order of appearance.
    """
    is_package = source_path.name == "__init__.py"
    imports = []

    with open(source_path, encoding="utf-8") as f:
        for line in f:
            match = _FROM_PATTERN.match(line)
            if match:
                base = _resolve_relative(match.group(1), match.group(2), module, is_package)
                if not base:
                    continue
                names = [part.split()[0] for part in match.group(3).split(",") if part.split()]
                names = [n for n in names if n != "*"]
                if names:
                    imports.extend(f"{base}.{n}" for n in names)
                else:
                    imports.append(base)
                continue
            match = _IMPORT_PATTERN.match(line)
            if match:
                for part in match.group(1).split(","):
                    imports.append(part.split()[0])

    return imports


def module_name(source_path: Path, root: Path) -> str:
    """Return the dotted module name of source_path relative to root.

    ``root/pkg/__init__.py`` is ``pkg``; ``root/pkg/mod.py`` is ``pkg.mod``.
    """
    parts = list(source_path.relative_to(root).with_suffix("").parts)
    if parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts)


def _known_prefix(name: str, known: set[str]) -> str | None:
    """Return the longest dotted prefix of name that is a known module."""
    parts = name.split(".")
    for i in range(len(parts), 0, -1):
        candidate = ".".join(parts[:i])
        if candidate in known:
            return candidate
    return None


def scan_package(root: Path, include_external: bool = False) -> list[ModuleEntry]:
    """Scan every .py file under root into module entries.

    Imported names are mapped onto the longest scanned module prefix, so
    ``from pkg.mod import func`` becomes a dependency on ``pkg.mod``.
    Imports outside root are dropped, or with include_external recorded as
    their top-level package (``os.path`` becomes ``os``).

    Args:
        root: Directory containing top-level packages or modules.
        include_external: Keep imports that do not resolve to scanned modules.

    Returns:
        List of module entries sorted by module name.
    """
    sources = {module_name(p, root): p for p in sorted(root.rglob("*.py"))}
    sources.pop("", None)
    known = set(sources)

    entries = []
    for name, path in sorted(sources.items()):
        try:
            raw = parse_imports(path, name)
        except (OSError, UnicodeDecodeError):
            continue

        imports: list[str] = []
        for target in raw:
            if target.startswith("__future__"):
                continue
            resolved = _known_prefix(target, known)
            if resolved is None and include_external:
                resolved = target.split(".")[0]
            if resolved and resolved != name and resolved not in imports:
                imports.append(resolved)
        entries.append(ModuleEntry(name, imports))

    return entries

"""Shared helpers for coverscope."""

from __future__ import annotations

from pathlib import Path


def path_to_module(file_path: str | Path) -> str:
    """Convert a source file path to the dotted module name used as namespace.

    Examples:
        >>> path_to_module("src/covered/shapes.py")
        'covered.shapes'
        >>> path_to_module("covered/__init__.py")
        'covered'
        >>> path_to_module(Path("pkg/sub/tool.py"))
        'pkg.sub.tool'
    """
    path_str = file_path.as_posix() if isinstance(file_path, Path) else str(file_path)
    parts = [part for part in path_str.replace("\\", "/").split("/") if part]

    # src/<package>/... maps to <package>...
    if len(parts) >= 2 and parts[0] == "src":
        parts = parts[1:]

    if parts and parts[-1].endswith(".py"):
        parts[-1] = parts[-1][:-3]

    if parts and parts[-1] == "__init__":
        parts = parts[:-1]

    if not parts:
        msg = f"Cannot derive a non-empty module name from {path_str!r}"
        raise ValueError(msg)

    return ".".join(parts)


def split_qualified(name: str) -> tuple[str, str]:
    """Split ``pkg.mod.Name`` into ``("pkg.mod", "Name")``; namespace may be empty."""
    namespace, _, simple = name.rpartition(".")
    return namespace, simple


def simple_name(name: str) -> str:
    return name.rpartition(".")[2]

"""AST-based import tables used to qualify names written in test metadata."""

from __future__ import annotations

import ast

ImportTable = dict[str, str]


def resolve_relative_import(
    importing_module: str,
    relative_module: str,
    level: int,
    *,
    is_package: bool = False,
) -> str:
    """Resolve a relative import to an absolute module name.

    Examples:
        >>> resolve_relative_import("pkg.sub.mod", "foo", 1)
        'pkg.sub.foo'
        >>> resolve_relative_import("pkg.sub.mod", "", 1)
        'pkg.sub'
        >>> resolve_relative_import("pkg.sub.mod", "bar", 2)
        'pkg.bar'
        >>> resolve_relative_import("pkg.sub", "foo", 1, is_package=True)
        'pkg.sub.foo'
    """
    parts = importing_module.split(".")
    if is_package:
        level -= 1

    if level > len(parts):
        return relative_module or importing_module

    base_parts = parts[: len(parts) - level]

    if relative_module:
        return ".".join([*base_parts, relative_module])
    if base_parts:
        return ".".join(base_parts)
    return importing_module


def build_import_table(
    source: str,
    module_name: str,
    *,
    is_package: bool = False,
) -> ImportTable:
    """Map each module-level local name bound by an import to its qualified name.

    ``import a.b`` binds ``a``; ``import a.b as c`` binds ``c -> a.b``;
    ``from .x import Y as Z`` binds ``Z -> <pkg>.x.Y``. Star imports bind nothing.
    Unparseable sources yield an empty table.
    """
    try:
        tree = ast.parse(source, module_name)
    except (SyntaxError, ValueError):
        return {}

    table: ImportTable = {}
    for node in tree.body:
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname:
                    table[alias.asname] = alias.name
                else:
                    head = alias.name.split(".", 1)[0]
                    table[head] = head
        elif isinstance(node, ast.ImportFrom):
            base = node.module or ""
            if node.level > 0:
                base = resolve_relative_import(
                    module_name, base, node.level, is_package=is_package
                )
            for alias in node.names:
                if alias.name == "*":
                    continue
                local = alias.asname or alias.name
                table[local] = f"{base}.{alias.name}" if base else alias.name
    return table


def qualify(name: str, imports: ImportTable) -> str:
    """Rewrite the leading segment of a dotted name through the import table.

    >>> qualify("Greeter", {"Greeter": "pkg.core.Greeter"})
    'pkg.core.Greeter'
    >>> qualify("core.Greeter", {"core": "pkg.core"})
    'pkg.core.Greeter'
    >>> qualify("Other", {})
    'Other'
    """
    head, dot, rest = name.partition(".")
    target = imports.get(head)
    if target is None:
        return name
    return f"{target}{dot}{rest}"

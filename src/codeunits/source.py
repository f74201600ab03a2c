"""Structural index built from a tree of Python source files."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import structlog

from codeunits.cache import OnceCache
from codeunits.models import ClassUnit, FunctionUnit, MethodUnit
from metadata.normalize import is_unit_ignored
from parse.ast_imports import qualify
from parse.treesitter_units import extract_units
from rules.config import CoverScopeConfig
from scan.files import find_python_files
from utils import path_to_module, simple_name, split_qualified

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from codeunits.models import CodeUnit
    from parse.records import ClassRecord, FunctionRecord, ModuleRecord

logger = structlog.get_logger(__name__)

_Kind = Literal["class", "function"]


class SourceIndex:
    """StructuralIndex over the Python files below ``root``.

    Modules are parsed on first use and at most once. Class and function
    lookups are cached per requested name. A name without a dot is looked up
    in the global namespace: the unique top-level definition with that simple
    name anywhere in the tree.
    """

    def __init__(self, root: Path, config: CoverScopeConfig | None = None) -> None:
        config = config or CoverScopeConfig()
        self.root = root
        self._trait_suffixes = tuple(config.trait_suffixes)
        self._interface_bases = frozenset(config.interface_bases)

        self._paths: dict[str, Path] = {}
        for path in find_python_files(
            root,
            include_patterns=config.include or None,
            exclude_patterns=config.exclude or None,
            nested_gitignore=config.nested_gitignore,
        ):
            try:
                module = path_to_module(path.relative_to(root))
            except ValueError:
                continue
            self._paths.setdefault(module, path)

        self._modules: OnceCache[str, ModuleRecord] = OnceCache()
        self._classes: OnceCache[str, ClassUnit | None] = OnceCache()
        self._functions: OnceCache[str, FunctionUnit | None] = OnceCache()
        self._globals: OnceCache[_Kind, dict[str, list[str]]] = OnceCache()

        logger.info("index.scanned", root=str(root), modules=len(self._paths))

    @property
    def modules(self) -> list[str]:
        return sorted(self._paths)

    def module_record(self, module: str) -> ModuleRecord | None:
        if module not in self._paths:
            return None
        return self._modules.get(module, self._parse)

    def _parse(self, module: str) -> ModuleRecord:
        path = self._paths[module]
        return extract_units(path, path.relative_to(self.root).as_posix(), module)

    def _global_table(self, kind: _Kind) -> dict[str, list[str]]:
        table: dict[str, list[str]] = {}
        for module in self.modules:
            record = self.module_record(module)
            if record is None:
                continue
            definitions = record.classes if kind == "class" else record.functions
            for definition in definitions:
                table.setdefault(definition.name, []).append(
                    f"{module}.{definition.name}"
                )
        return table

    def _global_name(self, kind: _Kind, name: str) -> str | None:
        candidates = self._globals.get(kind, self._global_table).get(name, [])
        if len(candidates) > 1:
            logger.warning(
                "index.ambiguous_global_name",
                kind=kind,
                name=name,
                candidates=candidates,
            )
            return None
        return candidates[0] if candidates else None

    def _qualified(self, kind: _Kind, name: str) -> str | None:
        if "." in name:
            return name
        return self._global_name(kind, name)

    def class_record(self, name: str) -> tuple[ModuleRecord, ClassRecord] | None:
        """Locate the parsed class statement for a qualified or global name."""
        qualified = self._qualified("class", name)
        if qualified is None:
            return None
        namespace, simple = split_qualified(qualified)
        module = self.module_record(namespace)
        if module is None:
            return None
        record = module.class_named(simple)
        return (module, record) if record is not None else None

    def _function_record(self, name: str) -> tuple[ModuleRecord, FunctionRecord] | None:
        qualified = self._qualified("function", name)
        if qualified is None:
            return None
        namespace, simple = split_qualified(qualified)
        module = self.module_record(namespace)
        if module is None:
            return None
        record = module.function_named(simple)
        return (module, record) if record is not None else None

    def lookup_class(self, name: str) -> ClassUnit | None:
        return self._classes.get(name, self._build_class)

    def lookup_function(self, qualified_name: str) -> FunctionUnit | None:
        return self._functions.get(qualified_name, self._build_function)

    def _build_class(self, name: str) -> ClassUnit | None:
        located = self.class_record(name)
        if located is None:
            logger.debug("index.class_missing", name=name)
            return None
        module, record = located

        qualified_bases = [qualify(base, module.imports) for base in record.bases]
        is_interface = any(
            base in self._interface_bases or qualified in self._interface_bases
            for base, qualified in zip(record.bases, qualified_bases)
        )

        return ClassUnit(
            name=f"{module.module}.{record.name}",
            file=module.path,
            start_line=record.start_line,
            end_line=record.end_line,
            ignored=is_unit_ignored(record),
            methods=tuple(
                MethodUnit(
                    name=method.name,
                    file=module.path,
                    start_line=method.start_line,
                    end_line=method.end_line,
                    ignored=is_unit_ignored(method),
                )
                for method in record.methods
            ),
            traits=tuple(
                self._trait_name(module, base)
                for base in record.bases
                if self._trait_suffixes and simple_name(base).endswith(self._trait_suffixes)
            ),
            is_interface=is_interface,
            is_trait=bool(self._trait_suffixes)
            and record.name.endswith(self._trait_suffixes),
        )

    @staticmethod
    def _trait_name(module: ModuleRecord, base: str) -> str:
        qualified = qualify(base, module.imports)
        if qualified == base and "." not in base and module.class_named(base):
            return f"{module.module}.{base}"
        return qualified

    def _build_function(self, name: str) -> FunctionUnit | None:
        located = self._function_record(name)
        if located is None:
            logger.debug("index.function_missing", name=name)
            return None
        module, record = located
        return FunctionUnit(
            qualified_name=f"{module.module}.{record.name}",
            file=module.path,
            start_line=record.start_line,
            end_line=record.end_line,
            ignored=is_unit_ignored(record),
        )

    def ignored_units(self) -> Iterator[CodeUnit]:
        for module_name in self.modules:
            module = self.module_record(module_name)
            if module is None:
                continue
            for record in module.classes:
                unit = self.lookup_class(f"{module_name}.{record.name}")
                if unit is None:
                    continue
                if unit.ignored:
                    yield unit
                yield from (method for method in unit.methods if method.ignored)
            for function in module.functions:
                if is_unit_ignored(function):
                    found = self.lookup_function(f"{module_name}.{function.name}")
                    if found is not None:
                        yield found

"""In-memory structural index over synthetic code units."""

from __future__ import annotations

from typing import TYPE_CHECKING

from codeunits.models import ClassUnit, FunctionUnit, MethodUnit

if TYPE_CHECKING:
    from collections.abc import Iterator

    from codeunits.models import CodeUnit


class InMemoryIndex:
    """A StructuralIndex whose classes and functions are registered directly.

    Units are registered under their qualified name and, unless told
    otherwise, under their simple name in the global namespace.

    Example:
        >>> index = InMemoryIndex()
        >>> _ = index.add_class("pkg.Greeter", "pkg/greeter.py", 3, 9,
        ...                     methods={"greet": (5, 9)})
        >>> index.lookup_class("Greeter").methods[0].start_line
        5
    """

    def __init__(self) -> None:
        self._classes: dict[str, ClassUnit] = {}
        self._functions: dict[str, FunctionUnit] = {}

    def add_class(
        self,
        name: str,
        file: str,
        start_line: int,
        end_line: int,
        *,
        methods: dict[str, tuple[int, int]] | None = None,
        traits: list[str] | None = None,
        is_interface: bool = False,
        is_trait: bool = False,
        ignored: bool = False,
        ignored_methods: set[str] | None = None,
        global_alias: bool = True,
    ) -> ClassUnit:
        ignored_methods = ignored_methods or set()
        unit = ClassUnit(
            name=name,
            file=file,
            start_line=start_line,
            end_line=end_line,
            methods=tuple(
                MethodUnit(
                    name=method_name,
                    file=file,
                    start_line=start,
                    end_line=end,
                    ignored=method_name in ignored_methods,
                )
                for method_name, (start, end) in (methods or {}).items()
            ),
            traits=tuple(traits or ()),
            is_interface=is_interface,
            is_trait=is_trait,
            ignored=ignored,
        )
        self._register(self._classes, name, unit, global_alias=global_alias)
        return unit

    def add_function(
        self,
        qualified_name: str,
        file: str,
        start_line: int,
        end_line: int,
        *,
        exists: bool = True,
        ignored: bool = False,
        global_alias: bool = True,
    ) -> FunctionUnit:
        unit = FunctionUnit(
            qualified_name=qualified_name,
            file=file,
            start_line=start_line,
            end_line=end_line,
            exists=exists,
            ignored=ignored,
        )
        self._register(self._functions, qualified_name, unit, global_alias=global_alias)
        return unit

    @staticmethod
    def _register(
        table: dict, name: str, unit: ClassUnit | FunctionUnit, *, global_alias: bool
    ) -> None:
        table[name] = unit
        simple = name.rpartition(".")[2]
        if global_alias and simple != name:
            table.setdefault(simple, unit)

    def lookup_class(self, name: str) -> ClassUnit | None:
        return self._classes.get(name)

    def lookup_function(self, qualified_name: str) -> FunctionUnit | None:
        return self._functions.get(qualified_name)

    def ignored_units(self) -> Iterator[CodeUnit]:
        classes = {id(unit): unit for unit in self._classes.values()}.values()
        functions = {id(unit): unit for unit in self._functions.values()}.values()
        for cls in classes:
            if cls.ignored:
                yield cls
            yield from (method for method in cls.methods if method.ignored)
        yield from (function for function in functions if function.ignored)

"""Records produced by parsing one Python module.

These are the raw, per-module facts (spans, docstrings, decorators, bases)
from which the structural index and the metadata provider are built.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DecoratorRecord(BaseModel):
    """A decorator as written: dotted name plus positional arguments."""

    name: str
    args: list[str] = Field(default_factory=list)
    called: bool = False

    @property
    def simple_name(self) -> str:
        return self.name.rpartition(".")[2]


class DefinitionRecord(BaseModel):
    """A ``def`` or ``class`` statement with its 1-based inclusive line span."""

    name: str
    start_line: int
    end_line: int
    docstring: str | None = None
    decorators: list[DecoratorRecord] = Field(default_factory=list)
    pragma_no_cover: bool = False


class FunctionRecord(DefinitionRecord):
    pass


class ClassRecord(DefinitionRecord):
    bases: list[str] = Field(default_factory=list)
    methods: list[FunctionRecord] = Field(default_factory=list)

    def method(self, name: str) -> FunctionRecord | None:
        return next((m for m in self.methods if m.name == name), None)


class ModuleRecord(BaseModel):
    module: str
    path: str
    is_package: bool = False
    classes: list[ClassRecord] = Field(default_factory=list)
    functions: list[FunctionRecord] = Field(default_factory=list)
    imports: dict[str, str] = Field(default_factory=dict)

    def class_named(self, name: str) -> ClassRecord | None:
        return next((c for c in self.classes if c.name == name), None)

    def function_named(self, name: str) -> FunctionRecord | None:
        return next((f for f in self.functions if f.name == name), None)


__all__ = [
    "ClassRecord",
    "DecoratorRecord",
    "DefinitionRecord",
    "FunctionRecord",
    "ModuleRecord",
]

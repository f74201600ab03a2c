"""Code unit models: classes, methods and functions with their line spans."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

Visibility = Literal["public", "protected", "private"]


def visibility_of(name: str) -> Visibility:
    """Python naming convention: ``__x`` private, ``_x`` protected, dunders public."""
    if name.startswith("__") and not name.endswith("__"):
        return "private"
    if name.startswith("_") and not name.startswith("__"):
        return "protected"
    return "public"


class _SpanUnit(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    start_line: int
    end_line: int
    ignored: bool = Field(default=False, description="Tagged ignore-for-coverage")

    def lines(self) -> range:
        return range(self.start_line, self.end_line + 1)


class MethodUnit(_SpanUnit):
    name: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def visibility(self) -> Visibility:
        return visibility_of(self.name)


class ClassUnit(_SpanUnit):
    name: str = Field(description="Qualified class name")
    methods: tuple[MethodUnit, ...] = ()
    traits: tuple[str, ...] = Field(
        default=(), description="Qualified names of the traits mixed into the class"
    )
    is_interface: bool = False
    is_trait: bool = False


class FunctionUnit(_SpanUnit):
    qualified_name: str
    exists: bool = True

    @property
    def namespace(self) -> str:
        return self.qualified_name.rpartition(".")[0]


CodeUnit = ClassUnit | MethodUnit | FunctionUnit

__all__ = [
    "ClassUnit",
    "CodeUnit",
    "FunctionUnit",
    "MethodUnit",
    "Visibility",
    "visibility_of",
]

"""Structural index of code units (classes, methods, functions)."""

from codeunits.cache import OnceCache
from codeunits.index import StructuralIndex
from codeunits.memory import InMemoryIndex
from codeunits.models import (
    ClassUnit,
    CodeUnit,
    FunctionUnit,
    MethodUnit,
    Visibility,
    visibility_of,
)
from codeunits.source import SourceIndex

__all__ = [
    "ClassUnit",
    "CodeUnit",
    "FunctionUnit",
    "InMemoryIndex",
    "MethodUnit",
    "OnceCache",
    "SourceIndex",
    "StructuralIndex",
    "Visibility",
    "visibility_of",
]

"""Parsing utilities for coverscope."""

from parse.ast_imports import build_import_table, qualify, resolve_relative_import
from parse.docblock import DocTag, parse_doc_tags
from parse.records import (
    ClassRecord,
    DecoratorRecord,
    DefinitionRecord,
    FunctionRecord,
    ModuleRecord,
)
from parse.treesitter_units import extract_units

__all__ = [
    "ClassRecord",
    "DecoratorRecord",
    "DefinitionRecord",
    "DocTag",
    "FunctionRecord",
    "ModuleRecord",
    "build_import_table",
    "extract_units",
    "parse_doc_tags",
    "qualify",
    "resolve_relative_import",
]

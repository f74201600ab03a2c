"""Convert docstring tags and decorator markers into RawMetadata.

Both surfaces end up in the same RawMetadata shape, so nothing downstream
branches on how a test author spelled a tag. Leading names that the test
module imports are qualified through the module's import table.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from metadata.models import RawMetadata
from parse.ast_imports import qualify
from parse.docblock import parse_doc_tags

if TYPE_CHECKING:
    from parse.ast_imports import ImportTable
    from parse.records import DecoratorRecord, DefinitionRecord

IGNORE_TAG = "codeCoverageIgnore"
IGNORE_DECORATOR = "code_coverage_ignore"

_LIST_TAGS = {
    "covers": "covers",
    "uses": "uses",
    "coversDefaultClass": "covers_default_class",
    "usesDefaultClass": "uses_default_class",
    "ignoreClassForCodeCoverage": "ignore",
    "ignoreMethodForCodeCoverage": "ignore",
    "ignoreFunctionForCodeCoverage": "ignore",
}
_FLAG_TAGS = {
    "coversNothing": "covers_nothing",
    "usesNothing": "uses_nothing",
}

_DECORATOR_FIELDS = {
    "covers": ("covers", "target"),
    "covers_class": ("covers", "class"),
    "covers_method": ("covers", "method"),
    "covers_function": ("covers", "function"),
    "uses": ("uses", "target"),
    "uses_class": ("uses", "class"),
    "uses_method": ("uses", "method"),
    "uses_function": ("uses", "function"),
    "covers_default_class": ("covers_default_class", "class"),
    "uses_default_class": ("uses_default_class", "class"),
    "ignore_class_for_code_coverage": ("ignore", "class"),
    "ignore_method_for_code_coverage": ("ignore", "method"),
    "ignore_function_for_code_coverage": ("ignore", "function"),
}
_DECORATOR_FLAGS = {
    "covers_nothing": "covers_nothing",
    "uses_nothing": "uses_nothing",
}


def as_function_text(name: str) -> str:
    """Spell a bare function name in its unambiguous ``name()`` form."""
    name = name.strip()
    if not name or "::" in name or name.endswith(")"):
        return name
    return f"{name}()"


def qualify_target(text: str, imports: ImportTable) -> str:
    """Qualify the class or function part of a target text through imports."""
    stripped = text.strip()
    if not stripped or stripped.startswith(("\\", ".", "::")):
        return stripped

    if "::" in stripped:
        left, _, right = stripped.partition("::")
        return f"{qualify(left.strip(), imports)}::{right}"

    if "(" in stripped:
        name, paren, rest = stripped.partition("(")
        return f"{qualify(name.strip(), imports)}{paren}{rest}"

    return qualify(stripped, imports)


def from_docstring(docstring: str | None, imports: ImportTable | None = None) -> RawMetadata:
    imports = imports or {}
    values: dict[str, list[str]] = {}
    flags: dict[str, bool] = {}

    for tag in parse_doc_tags(docstring):
        if tag.name in _FLAG_TAGS:
            flags[_FLAG_TAGS[tag.name]] = True
        elif tag.name in _LIST_TAGS:
            text = tag.value
            if tag.name == "ignoreFunctionForCodeCoverage":
                text = as_function_text(text)
            values.setdefault(_LIST_TAGS[tag.name], []).append(
                qualify_target(text, imports)
            )

    return RawMetadata(**values, **flags)


def _decorator_text(shape: str, args: list[str]) -> str:
    first = args[0] if args else ""
    if shape == "method":
        second = args[1] if len(args) > 1 else ""
        return f"{first}::{second}"
    if shape == "function":
        return as_function_text(first)
    return first


def from_decorators(
    decorators: list[DecoratorRecord], imports: ImportTable | None = None
) -> RawMetadata:
    imports = imports or {}
    values: dict[str, list[str]] = {}
    flags: dict[str, bool] = {}

    for decorator in decorators:
        name = decorator.simple_name
        if name in _DECORATOR_FLAGS:
            flags[_DECORATOR_FLAGS[name]] = True
        elif name in _DECORATOR_FIELDS and decorator.called:
            field_name, shape = _DECORATOR_FIELDS[name]
            text = _decorator_text(shape, decorator.args)
            values.setdefault(field_name, []).append(qualify_target(text, imports))

    return RawMetadata(**values, **flags)


def normalize(record: DefinitionRecord, imports: ImportTable | None = None) -> RawMetadata:
    """RawMetadata of one class or method statement, docstring tags first."""
    return from_docstring(record.docstring, imports).merge(
        from_decorators(record.decorators, imports)
    )


def is_unit_ignored(record: DefinitionRecord) -> bool:
    """Whether a production code unit is tagged to be left out of coverage."""
    if record.pragma_no_cover:
        return True
    if any(tag.name == IGNORE_TAG for tag in parse_doc_tags(record.docstring)):
        return True
    return any(d.simple_name == IGNORE_DECORATOR for d in record.decorators)

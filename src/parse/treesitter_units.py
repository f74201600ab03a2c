"""Tree-sitter based extraction of classes, methods and functions with line spans."""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

import structlog
from tree_sitter import Language, Node, Parser
from tree_sitter_python import language as get_python_language

from parse.ast_imports import build_import_table
from parse.records import ClassRecord, DecoratorRecord, FunctionRecord, ModuleRecord

if TYPE_CHECKING:
    from pathlib import Path

logger = structlog.get_logger(__name__)

PRAGMA_NO_COVER = "pragma: no cover"

_PARSER: Parser | None = None


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with Python language."""
    global _PARSER
    if _PARSER is None:
        _PARSER = Parser(Language(get_python_language()))
    return _PARSER


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf8")


def _string_value(node: Node) -> str:
    raw = _text(node)
    try:
        value = ast.literal_eval(raw)
    except (ValueError, SyntaxError):
        return raw
    return value if isinstance(value, str) else raw


def _docstring(node: Node) -> str | None:
    """Return the docstring of a class/function definition, if any."""
    body = node.child_by_field_name("body")
    if body is None:
        return None

    for child in body.named_children:
        if child.type == "comment":
            continue
        if child.type == "expression_statement" and child.named_child_count > 0:
            first = child.named_children[0]
            if first.type in ("string", "concatenated_string"):
                return _string_value(first)
        return None

    return None


def _argument_text(node: Node) -> str:
    if node.type in ("string", "concatenated_string"):
        return _string_value(node)
    return _text(node)


def _decorator(node: Node) -> DecoratorRecord | None:
    expr = next((c for c in node.named_children if c.type != "comment"), None)
    if expr is None:
        return None

    if expr.type == "call":
        arguments = expr.child_by_field_name("arguments")
        args = []
        if arguments is not None:
            args = [
                _argument_text(arg)
                for arg in arguments.named_children
                if arg.type not in ("comment", "keyword_argument")
            ]
        return DecoratorRecord(
            name=_text(expr.child_by_field_name("function")),
            args=args,
            called=True,
        )

    return DecoratorRecord(name=_text(expr))


def _unwrap(node: Node) -> tuple[Node, list[DecoratorRecord]]:
    """Split a possibly decorated definition into the definition and its decorators."""
    if node.type != "decorated_definition":
        return node, []

    decorators = [
        record
        for child in node.children
        if child.type == "decorator"
        for record in [_decorator(child)]
        if record is not None
    ]
    definition = node.child_by_field_name("definition")
    return (definition if definition is not None else node), decorators


def _bases(node: Node) -> list[str]:
    superclasses = node.child_by_field_name("superclasses")
    if superclasses is None:
        return []

    bases: list[str] = []
    for child in superclasses.named_children:
        if child.type in ("identifier", "attribute"):
            bases.append(_text(child))
        elif child.type == "subscript":
            # Generic[T], Protocol[T]
            bases.append(_text(child.child_by_field_name("value")))
    return bases


def _has_pragma(lines: list[str], line_number: int) -> bool:
    if 0 < line_number <= len(lines):
        return PRAGMA_NO_COVER in lines[line_number - 1]
    return False


def _function_record(
    node: Node, decorators: list[DecoratorRecord], lines: list[str]
) -> FunctionRecord:
    start_line = node.start_point[0] + 1
    return FunctionRecord(
        name=_text(node.child_by_field_name("name")),
        start_line=start_line,
        end_line=node.end_point[0] + 1,
        docstring=_docstring(node),
        decorators=decorators,
        pragma_no_cover=_has_pragma(lines, start_line),
    )


def _class_record(
    node: Node, decorators: list[DecoratorRecord], lines: list[str]
) -> ClassRecord:
    """Build a class record; only methods directly in the class body are kept."""
    methods: list[FunctionRecord] = []
    body = node.child_by_field_name("body")
    if body is not None:
        for child in body.named_children:
            definition, method_decorators = _unwrap(child)
            if definition.type == "function_definition":
                methods.append(_function_record(definition, method_decorators, lines))

    start_line = node.start_point[0] + 1
    return ClassRecord(
        name=_text(node.child_by_field_name("name")),
        start_line=start_line,
        end_line=node.end_point[0] + 1,
        docstring=_docstring(node),
        decorators=decorators,
        pragma_no_cover=_has_pragma(lines, start_line),
        bases=_bases(node),
        methods=methods,
    )


def _collect_top_level(node: Node, record: ModuleRecord, lines: list[str]) -> None:
    """Collect module-level definitions, looking through if/try blocks."""
    for child in node.named_children:
        definition, decorators = _unwrap(child)
        if definition.type == "class_definition":
            record.classes.append(_class_record(definition, decorators, lines))
        elif definition.type == "function_definition":
            record.functions.append(_function_record(definition, decorators, lines))
        elif definition.type in (
            "if_statement",
            "try_statement",
            "else_clause",
            "elif_clause",
            "except_clause",
            "finally_clause",
            "block",
        ):
            _collect_top_level(definition, record, lines)


def extract_units(
    file_path: Path,
    relative_path: str,
    module_name: str,
) -> ModuleRecord:
    """Parse one Python file into a ModuleRecord.

    Args:
        file_path: Absolute path to the Python file
        relative_path: Path relative to the index root, used as the LineMap key
        module_name: Dotted module name (the file's namespace)

    Returns:
        The module's top-level classes (with their methods) and functions.
        Unreadable files yield an empty record.
    """
    is_package = file_path.name == "__init__.py"
    record = ModuleRecord(module=module_name, path=relative_path, is_package=is_package)

    try:
        source_bytes = file_path.read_bytes()
    except OSError as exc:
        logger.warning("parse.unreadable", path=relative_path, error=str(exc))
        return record

    source = source_bytes.decode("utf8", errors="replace")
    tree = _get_parser().parse(source_bytes)
    _collect_top_level(tree.root_node, record, source.splitlines())
    record.imports = build_import_table(source, module_name, is_package=is_package)

    logger.debug(
        "parse.module",
        module=module_name,
        classes=len(record.classes),
        functions=len(record.functions),
    )
    return record

"""Turn target specifiers into line maps using a structural index."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from targets.errors import (
    InterfaceTargetError,
    UndefinedClassError,
    UndefinedFunctionError,
    UndefinedMethodError,
)
from targets.linemap import LineMapBuilder
from targets.specifiers import (
    NOTHING,
    ClassTarget,
    FunctionTarget,
    MethodTarget,
    VisibilityTarget,
)

if TYPE_CHECKING:
    from codeunits.index import StructuralIndex
    from codeunits.models import ClassUnit, FunctionUnit, MethodUnit
    from metadata.models import Relation
    from targets.linemap import LineMap
    from targets.specifiers import Resolution, TargetSpecifier

logger = structlog.get_logger(__name__)


def candidate_names(name: str, namespace: str | None) -> list[str]:
    """Lookup order for a name: the test's namespace first, then the global one.

    Dotted names are already qualified and must match exactly.
    """
    if "." in name or not namespace:
        return [name]
    return [f"{namespace}.{name}", name]


def find_class(
    index: StructuralIndex,
    name: str,
    *,
    namespace: str | None = None,
    relation: Relation | None = None,
) -> ClassUnit:
    for candidate in candidate_names(name, namespace):
        unit = index.lookup_class(candidate)
        if unit is not None:
            if unit.is_interface:
                raise InterfaceTargetError(name, relation)
            return unit
    raise UndefinedClassError(name, relation)


def find_function(
    index: StructuralIndex,
    target: FunctionTarget,
    *,
    namespace: str | None = None,
    relation: Relation | None = None,
) -> FunctionUnit:
    name = target.qualified_name
    for candidate in candidate_names(name, namespace):
        unit = index.lookup_function(candidate)
        if unit is not None and unit.exists:
            return unit
    raise UndefinedFunctionError(name, relation)


def _traits(index: StructuralIndex, unit: ClassUnit) -> list[ClassUnit]:
    """Traits of ``unit`` known to the index; third-party mixins are skipped."""
    traits: list[ClassUnit] = []
    for name in unit.traits:
        trait = index.lookup_class(name)
        if trait is None:
            logger.debug("materializer.trait_missing", cls=unit.name, trait=name)
            continue
        traits.append(trait)
    return traits


def class_methods(index: StructuralIndex, unit: ClassUnit) -> list[MethodUnit]:
    """Methods declared by the class followed by those its traits contribute.

    A method declared on the class hides a trait method of the same name.
    """
    methods = list(unit.methods)
    seen = {method.name for method in methods}
    for trait in _traits(index, unit):
        for method in trait.methods:
            if method.name not in seen:
                seen.add(method.name)
                methods.append(method)
    return methods


def _include_class(
    builder: LineMapBuilder, index: StructuralIndex, unit: ClassUnit
) -> None:
    builder.add_span(unit.file, unit.start_line, unit.end_line)
    # Trait methods count as lines of every class that mixes them in.
    for trait in _traits(index, unit):
        for method in trait.methods:
            builder.add_span(unit.file, method.start_line, method.end_line)


def include_target(
    builder: LineMapBuilder,
    target: TargetSpecifier,
    index: StructuralIndex,
    *,
    namespace: str | None = None,
    relation: Relation | None = None,
) -> None:
    """Add the lines of one specifier to ``builder`` or raise its error."""
    if isinstance(target, ClassTarget):
        unit = find_class(index, target.name, namespace=namespace, relation=relation)
        _include_class(builder, index, unit)

    elif isinstance(target, MethodTarget):
        unit = find_class(
            index, target.class_name, namespace=namespace, relation=relation
        )
        method = next(
            (
                m
                for m in class_methods(index, unit)
                if m.name == target.method_name
            ),
            None,
        )
        if method is None:
            raise UndefinedMethodError(target.class_name, target.method_name, relation)
        builder.add_span(method.file, method.start_line, method.end_line)

    elif isinstance(target, VisibilityTarget):
        unit = find_class(
            index, target.class_name, namespace=namespace, relation=relation
        )
        for method in class_methods(index, unit):
            if target.matches(method.visibility):
                builder.add_span(method.file, method.start_line, method.end_line)

    elif isinstance(target, FunctionTarget):
        function = find_function(
            index, target, namespace=namespace, relation=relation
        )
        builder.add_span(function.file, function.start_line, function.end_line)

    else:
        raise TypeError(f"Unsupported target specifier: {target!r}")


def materialize(
    specifiers: Resolution,
    index: StructuralIndex,
    *,
    relation: Relation = "covers",
    namespace: str | None = None,
) -> LineMap:
    """Resolve specifiers against ``index`` into one merged LineMap.

    NOTHING yields the empty map. Any invalid target raises, and no partial
    map is returned.
    """
    if specifiers is NOTHING:
        return {}

    builder = LineMapBuilder()
    for target in specifiers:
        include_target(
            builder, target, index, namespace=namespace, relation=relation
        )

    line_map = builder.build()
    logger.debug(
        "materializer.resolved",
        relation=relation,
        targets=len(specifiers),
        files=len(line_map),
    )
    return line_map


__all__ = [
    "candidate_names",
    "class_methods",
    "find_class",
    "find_function",
    "include_target",
    "materialize",
]

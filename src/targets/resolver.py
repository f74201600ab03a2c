"""Effective coverage targets of one test from class- and method-level metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING

from targets.errors import AmbiguousDefaultClassError
from targets.specifiers import NOTHING, ClassTarget, normalize_name, parse_target

if TYPE_CHECKING:
    from metadata.models import RawMetadata, Relation
    from targets.specifiers import Resolution, TargetSpecifier


def default_class(
    relation: Relation, class_metadata: RawMetadata, class_name: str
) -> str | None:
    """The single default class declared for ``relation``, if any."""
    declared = class_metadata.default_classes(relation)
    if len(declared) > 1:
        raise AmbiguousDefaultClassError(relation, class_name)
    return normalize_name(declared[0]) if declared else None


def _parse_all(
    texts: list[str], default: str | None, relation: Relation
) -> list[TargetSpecifier]:
    return [parse_target(text, default, relation=relation) for text in texts]


def resolve(
    relation: Relation,
    class_metadata: RawMetadata,
    method_metadata: RawMetadata,
    class_name: str,
    *,
    class_under_test: str | None = None,
) -> Resolution:
    """Return the ordered target specifiers of a test for one relation, or NOTHING.

    Precedence, first match wins:
      1. more than one class-level default class is an error, always;
      2. explicit method-level targets replace everything declared on the class;
      3. a method-level "nothing" marker;
      4. a class-level "nothing" marker;
      5. class-level explicit targets, or ``class_under_test`` when the class
         declares neither targets nor a default class.

    Bare ``::method`` references are qualified by the class-level default class.
    """
    default = default_class(relation, class_metadata, class_name)

    method_targets = method_metadata.targets(relation)
    if method_targets:
        return _parse_all(method_targets, default, relation)

    if method_metadata.nothing(relation) or class_metadata.nothing(relation):
        return NOTHING

    class_targets = class_metadata.targets(relation)
    if class_targets:
        return _parse_all(class_targets, default, relation)

    if default is None and class_under_test is not None:
        return [ClassTarget(class_under_test, raw=class_under_test)]

    return []


__all__ = ["default_class", "resolve"]

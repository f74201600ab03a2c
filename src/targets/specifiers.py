"""Typed coverage target specifiers and the parser for target text."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Literal, Union

from targets.errors import MalformedTargetSyntaxError

if TYPE_CHECKING:
    from codeunits.models import Visibility
    from metadata.models import Relation

_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
_DOTTED = re.compile(rf"^{_IDENT}(?:\.{_IDENT})*$")
_CALLABLE = re.compile(r"^(?P<name>[^\s()]+?)\s*(?:\(\s*\))?$")
_CALL = re.compile(r"^(?P<name>[^\s()]+?)\s*\(\s*\)$")
_VISIBILITY = re.compile(r"^<(?P<negated>!?)(?P<visibility>public|protected|private)>$")


class Sentinel(Enum):
    NOTHING = "nothing"

    def __repr__(self) -> str:
        return "NOTHING"


NOTHING = Sentinel.NOTHING


@dataclass(frozen=True)
class ClassTarget:
    name: str
    raw: str = field(default="", compare=False, repr=False)


@dataclass(frozen=True)
class MethodTarget:
    class_name: str
    method_name: str
    raw: str = field(default="", compare=False, repr=False)


@dataclass(frozen=True)
class FunctionTarget:
    namespace: str | None
    name: str
    raw: str = field(default="", compare=False, repr=False)

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name


@dataclass(frozen=True)
class VisibilityTarget:
    """Every method of a class with (or, negated, without) one visibility."""

    class_name: str
    visibility: Visibility
    negated: bool = False
    raw: str = field(default="", compare=False, repr=False)

    def matches(self, visibility: Visibility) -> bool:
        return (visibility == self.visibility) != self.negated


TargetSpecifier = Union[ClassTarget, MethodTarget, FunctionTarget, VisibilityTarget]
Resolution = Union[list[TargetSpecifier], Literal[Sentinel.NOTHING]]


def normalize_name(text: str) -> str:
    """Trim, turn ``\\`` namespace separators into dots and drop a leading separator."""
    name = text.strip().replace("\\", ".")
    return name[1:] if name.startswith(".") else name


def _callable_name(text: str, *, require_parens: bool = False) -> str | None:
    match = (_CALL if require_parens else _CALLABLE).match(text.strip())
    if match is None:
        return None
    name = match.group("name")
    return name if _DOTTED.match(name) else None


def parse_target(
    text: str,
    default_class: str | None = None,
    *,
    relation: Relation | None = None,
) -> TargetSpecifier:
    """Parse target text into a specifier by its syntactic shape.

    ``Class::method`` (parentheses and whitespace around them optional),
    ``::method`` with a default class, ``Class::<public>`` selectors,
    ``::function`` without a default class, ``pkg.mod.function()`` and bare
    ``pkg.mod.Class``. Anything else raises MalformedTargetSyntaxError.
    """
    normalized = normalize_name(text)
    if not normalized:
        raise MalformedTargetSyntaxError(text, relation)

    if "::" in normalized:
        left, _, right = normalized.partition("::")
        left = left.strip()
        if left and not _DOTTED.match(left):
            raise MalformedTargetSyntaxError(text, relation)
        owner = left or default_class

        selector = _VISIBILITY.match(right.strip())
        if selector is not None:
            if owner is None:
                raise MalformedTargetSyntaxError(text, relation)
            return VisibilityTarget(
                owner,
                selector.group("visibility"),  # type: ignore[arg-type]
                negated=bool(selector.group("negated")),
                raw=text,
            )

        member = _callable_name(right)
        if member is None or "." in member:
            raise MalformedTargetSyntaxError(text, relation)
        if owner is None:
            return FunctionTarget(None, member, raw=text)
        return MethodTarget(owner, member, raw=text)

    function = _callable_name(normalized, require_parens=True)
    if function is not None:
        namespace, _, name = function.rpartition(".")
        return FunctionTarget(namespace or None, name, raw=text)

    if _DOTTED.match(normalized):
        return ClassTarget(normalized, raw=text)

    raise MalformedTargetSyntaxError(text, relation)


__all__ = [
    "NOTHING",
    "ClassTarget",
    "FunctionTarget",
    "MethodTarget",
    "Resolution",
    "Sentinel",
    "TargetSpecifier",
    "VisibilityTarget",
    "normalize_name",
    "parse_target",
]

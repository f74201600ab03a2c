"""Coverage target errors.

Every error here is a test-authoring fault in coverage metadata. None is
retried or recovered; each aborts resolution for the relation at hand.

Exception Hierarchy:
    CodeCoverageError (base)
    ├── AmbiguousDefaultClassError  # more than one default class for a relation
    ├── InterfaceTargetError        # target is an interface
    ├── UndefinedClassError         # class not in the structural index
    ├── UndefinedMethodError        # method not on the class or its traits
    ├── UndefinedFunctionError      # function not in the structural index
    └── MalformedTargetSyntaxError  # target text has no recognized shape
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metadata.models import Relation


class CodeCoverageError(Exception):
    """Base class for invalid coverage metadata.

    Attributes:
        target: The offending name or target text.
        relation: ``covers`` or ``uses`` when the error belongs to one.
        test: ``Class::method`` of the test being resolved, once known.
    """

    def __init__(
        self, message: str, *, target: str, relation: Relation | None = None
    ) -> None:
        self.message = message
        self.target = target
        self.relation = relation
        self.test: str | None = None
        super().__init__(message)

    def for_test(self, test_id: str) -> CodeCoverageError:
        if self.test is None:
            self.test = test_id
        return self

    def __str__(self) -> str:
        if self.test is None:
            return self.message
        return f"{self.test}: {self.message}"


class AmbiguousDefaultClassError(CodeCoverageError):
    def __init__(self, relation: Relation, class_name: str) -> None:
        self.class_name = class_name
        super().__init__(
            f'More than one @{relation}DefaultClass annotation for class "{class_name}"',
            target=class_name,
            relation=relation,
        )


class InterfaceTargetError(CodeCoverageError):
    """An interface has no executable lines and is never a valid coverage target."""

    def __init__(self, name: str, relation: Relation | None = None) -> None:
        super().__init__(
            f'Trying to @{relation or "covers"} interface "{name}".',
            target=name,
            relation=relation,
        )


class UndefinedClassError(CodeCoverageError):
    def __init__(self, name: str, relation: Relation | None = None) -> None:
        super().__init__(
            f'Class "{name}" is not a valid target for code coverage',
            target=name,
            relation=relation,
        )


class UndefinedMethodError(CodeCoverageError):
    def __init__(
        self, class_name: str, method_name: str, relation: Relation | None = None
    ) -> None:
        self.class_name = class_name
        self.method_name = method_name
        name = f"{class_name}::{method_name}"
        super().__init__(
            f'Method "{name}" is not a valid target for code coverage',
            target=name,
            relation=relation,
        )


class UndefinedFunctionError(CodeCoverageError):
    def __init__(self, name: str, relation: Relation | None = None) -> None:
        super().__init__(
            f'Function "{name}" is not a valid target for code coverage',
            target=name,
            relation=relation,
        )


class MalformedTargetSyntaxError(CodeCoverageError):
    def __init__(self, text: str, relation: Relation | None = None) -> None:
        super().__init__(
            f'"@{relation or "covers"} {text}" is invalid',
            target=text,
            relation=relation,
        )


__all__ = [
    "AmbiguousDefaultClassError",
    "CodeCoverageError",
    "InterfaceTargetError",
    "MalformedTargetSyntaxError",
    "UndefinedClassError",
    "UndefinedFunctionError",
    "UndefinedMethodError",
]

"""Coverage target resolution: specifiers, resolver, materializer and facade."""

from targets.errors import (
    AmbiguousDefaultClassError,
    CodeCoverageError,
    InterfaceTargetError,
    MalformedTargetSyntaxError,
    UndefinedClassError,
    UndefinedFunctionError,
    UndefinedMethodError,
)
from targets.facade import CodeCoverage
from targets.ignored import collect_ignored
from targets.linemap import LineMap, LineMapBuilder, merge_line_maps
from targets.materializer import materialize
from targets.resolver import resolve
from targets.specifiers import (
    NOTHING,
    ClassTarget,
    FunctionTarget,
    MethodTarget,
    Resolution,
    TargetSpecifier,
    VisibilityTarget,
    parse_target,
)

__all__ = [
    "NOTHING",
    "AmbiguousDefaultClassError",
    "ClassTarget",
    "CodeCoverage",
    "CodeCoverageError",
    "FunctionTarget",
    "InterfaceTargetError",
    "LineMap",
    "LineMapBuilder",
    "MalformedTargetSyntaxError",
    "MethodTarget",
    "Resolution",
    "TargetSpecifier",
    "UndefinedClassError",
    "UndefinedFunctionError",
    "UndefinedMethodError",
    "VisibilityTarget",
    "collect_ignored",
    "materialize",
    "merge_line_maps",
    "parse_target",
    "resolve",
]

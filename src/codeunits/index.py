"""The structural index capability consumed by target resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from codeunits.models import ClassUnit, CodeUnit, FunctionUnit


class StructuralIndex(Protocol):
    """Name -> code unit lookups over some body of source code.

    Names are dotted and fully qualified (``pkg.module.Name``); a name without
    a dot addresses the index's global namespace. Implementations own and may
    cache the units they return; callers never mutate them.
    """

    def lookup_class(self, name: str) -> ClassUnit | None: ...

    def lookup_function(self, qualified_name: str) -> FunctionUnit | None: ...

    def ignored_units(self) -> Iterable[CodeUnit]: ...

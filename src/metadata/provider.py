"""Sources of raw coverage metadata for test classes and test methods."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from metadata.models import RawMetadata
from metadata.normalize import normalize

if TYPE_CHECKING:
    from codeunits.source import SourceIndex
    from parse.records import ClassRecord, ModuleRecord


class UnknownTestError(LookupError):
    """Raised when a test class or test method cannot be found."""


class MetadataProvider(Protocol):
    def for_class(self, class_name: str) -> RawMetadata: ...

    def for_method(self, class_name: str, method_name: str) -> RawMetadata: ...

    def test_methods(self, class_name: str) -> list[str]: ...


class InMemoryMetadataProvider:
    """Metadata registered directly, keyed by test class and method name."""

    def __init__(self) -> None:
        self._classes: dict[str, RawMetadata] = {}
        self._methods: dict[str, dict[str, RawMetadata]] = {}

    def add_class(
        self, class_name: str, metadata: RawMetadata | None = None
    ) -> InMemoryMetadataProvider:
        self._classes[class_name] = metadata or RawMetadata()
        self._methods.setdefault(class_name, {})
        return self

    def add_method(
        self, class_name: str, method_name: str, metadata: RawMetadata | None = None
    ) -> InMemoryMetadataProvider:
        self._classes.setdefault(class_name, RawMetadata())
        self._methods.setdefault(class_name, {})[method_name] = metadata or RawMetadata()
        return self

    def for_class(self, class_name: str) -> RawMetadata:
        try:
            return self._classes[class_name]
        except KeyError:
            msg = f'Test class "{class_name}" is not known'
            raise UnknownTestError(msg) from None

    def for_method(self, class_name: str, method_name: str) -> RawMetadata:
        try:
            return self._methods[class_name][method_name]
        except KeyError:
            msg = f'Test method "{class_name}::{method_name}" is not known'
            raise UnknownTestError(msg) from None

    def test_methods(self, class_name: str) -> list[str]:
        self.for_class(class_name)
        return list(self._methods[class_name])


class SourceMetadataProvider:
    """Reads test metadata from the parsed source behind a SourceIndex.

    Test classes are addressed by qualified name (``tests.test_shapes.ShapeTest``)
    or, when unique, by simple name. Inherited test methods are not followed.
    """

    def __init__(self, index: SourceIndex, *, test_method_prefix: str = "test") -> None:
        self._index = index
        self._prefix = test_method_prefix

    def _locate(self, class_name: str) -> tuple[ModuleRecord, ClassRecord]:
        located = self._index.class_record(class_name)
        if located is None:
            msg = f'Test class "{class_name}" is not known'
            raise UnknownTestError(msg)
        return located

    def for_class(self, class_name: str) -> RawMetadata:
        module, record = self._locate(class_name)
        return normalize(record, module.imports)

    def for_method(self, class_name: str, method_name: str) -> RawMetadata:
        module, record = self._locate(class_name)
        method = record.method(method_name)
        if method is None:
            msg = f'Test method "{class_name}::{method_name}" is not known'
            raise UnknownTestError(msg)
        return normalize(method, module.imports)

    def test_methods(self, class_name: str) -> list[str]:
        _, record = self._locate(class_name)
        return [m.name for m in record.methods if m.name.startswith(self._prefix)]

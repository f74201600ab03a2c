"""Coverage metadata declared by tests, normalized from docstrings and decorators."""

from metadata.models import RawMetadata, Relation, TestDeclaration
from metadata.normalize import from_decorators, from_docstring, is_unit_ignored, normalize
from metadata.provider import (
    InMemoryMetadataProvider,
    MetadataProvider,
    SourceMetadataProvider,
    UnknownTestError,
)

__all__ = [
    "InMemoryMetadataProvider",
    "MetadataProvider",
    "RawMetadata",
    "Relation",
    "SourceMetadataProvider",
    "TestDeclaration",
    "UnknownTestError",
    "from_decorators",
    "from_docstring",
    "is_unit_ignored",
    "normalize",
]

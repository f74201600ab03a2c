"""Raw coverage metadata as declared on test classes and test methods."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, Field

Relation = Literal["covers", "uses"]


class RawMetadata(BaseModel):
    """The coverage tags of one class or one method, independent of surface syntax."""

    covers: list[str] = Field(default_factory=list)
    uses: list[str] = Field(default_factory=list)
    covers_default_class: list[str] = Field(
        default_factory=list,
        description="Every coversDefaultClass value; more than one is an error",
    )
    uses_default_class: list[str] = Field(default_factory=list)
    covers_nothing: bool = False
    uses_nothing: bool = False
    ignore: list[str] = Field(
        default_factory=list,
        description="Target texts of code units to leave out of coverage",
    )

    def targets(self, relation: Relation) -> list[str]:
        return self.covers if relation == "covers" else self.uses

    def default_classes(self, relation: Relation) -> list[str]:
        if relation == "covers":
            return self.covers_default_class
        return self.uses_default_class

    def nothing(self, relation: Relation) -> bool:
        return self.covers_nothing if relation == "covers" else self.uses_nothing

    def merge(self, other: RawMetadata) -> RawMetadata:
        return RawMetadata(
            covers=[*self.covers, *other.covers],
            uses=[*self.uses, *other.uses],
            covers_default_class=[
                *self.covers_default_class,
                *other.covers_default_class,
            ],
            uses_default_class=[*self.uses_default_class, *other.uses_default_class],
            covers_nothing=self.covers_nothing or other.covers_nothing,
            uses_nothing=self.uses_nothing or other.uses_nothing,
            ignore=[*self.ignore, *other.ignore],
        )


@dataclass(frozen=True)
class TestDeclaration:
    """One test method together with the raw metadata of its class and itself."""

    __test__ = False

    class_name: str
    method_name: str
    class_metadata: RawMetadata = field(default_factory=RawMetadata, compare=False)
    method_metadata: RawMetadata = field(default_factory=RawMetadata, compare=False)

    @property
    def namespace(self) -> str | None:
        """The module of the test class, used to resolve unqualified targets."""
        return self.class_name.rpartition(".")[0] or None

    @property
    def test_id(self) -> str:
        return f"{self.class_name}::{self.method_name}"


__all__ = ["RawMetadata", "Relation", "TestDeclaration"]

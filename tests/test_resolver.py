from __future__ import annotations

import pytest

from metadata.models import RawMetadata
from targets.errors import AmbiguousDefaultClassError, MalformedTargetSyntaxError
from targets.resolver import default_class, resolve
from targets.specifiers import (
    NOTHING,
    ClassTarget,
    FunctionTarget,
    MethodTarget,
    VisibilityTarget,
)

_TEST_CLASS = "tests.test_covered.CoveredClassTest"


def _resolve(
    class_metadata: RawMetadata,
    method_metadata: RawMetadata | None = None,
    *,
    relation: str = "covers",
    class_under_test: str | None = None,
):
    return resolve(
        relation,  # type: ignore[arg-type]
        class_metadata,
        method_metadata or RawMetadata(),
        _TEST_CLASS,
        class_under_test=class_under_test,
    )


def test_no_metadata_resolves_to_empty_list() -> None:
    assert _resolve(RawMetadata()) == []


def test_class_level_targets_apply_to_every_method() -> None:
    class_metadata = RawMetadata(covers=["covered.CoveredClass"])

    assert _resolve(class_metadata) == [ClassTarget("covered.CoveredClass")]


def test_method_level_targets_replace_class_level_targets() -> None:
    class_metadata = RawMetadata(covers=["covered.CoveredClass"])
    method_metadata = RawMetadata(covers=["covered.CoveredClass::public_method"])

    assert _resolve(class_metadata, method_metadata) == [
        MethodTarget("covered.CoveredClass", "public_method")
    ]


def test_method_level_targets_override_class_level_nothing() -> None:
    class_metadata = RawMetadata(covers_nothing=True)
    method_metadata = RawMetadata(covers=["covered.CoveredClass::public_method"])

    assert _resolve(class_metadata, method_metadata) == [
        MethodTarget("covered.CoveredClass", "public_method")
    ]


def test_method_level_nothing_overrides_class_level_targets() -> None:
    class_metadata = RawMetadata(
        covers=["covered.CoveredClass"],
        covers_default_class=["covered.CoveredClass"],
    )
    method_metadata = RawMetadata(covers_nothing=True)

    assert _resolve(class_metadata, method_metadata) is NOTHING


def test_class_level_nothing_without_method_tags() -> None:
    assert _resolve(RawMetadata(covers_nothing=True)) is NOTHING


def test_relations_resolve_independently() -> None:
    class_metadata = RawMetadata(covers_nothing=True, uses=["covered.Helper"])

    assert _resolve(class_metadata) is NOTHING
    assert _resolve(class_metadata, relation="uses") == [ClassTarget("covered.Helper")]


def test_default_class_qualifies_member_targets_in_declaration_order() -> None:
    class_metadata = RawMetadata(
        covers_default_class=["\\covered\\CoveredClass"],
        covers=["::public_method", "::<private>", "::helper()", "covered.Other"],
    )

    assert _resolve(class_metadata) == [
        MethodTarget("covered.CoveredClass", "public_method"),
        VisibilityTarget("covered.CoveredClass", "private"),
        MethodTarget("covered.CoveredClass", "helper"),
        ClassTarget("covered.Other"),
    ]


def test_default_class_of_other_relation_is_not_used() -> None:
    class_metadata = RawMetadata(
        uses_default_class=["covered.CoveredClass"], covers=["::covered_function"]
    )

    assert _resolve(class_metadata) == [FunctionTarget(None, "covered_function")]


def test_default_class_alone_declares_no_target() -> None:
    class_metadata = RawMetadata(covers_default_class=["covered.CoveredClass"])

    assert _resolve(class_metadata, class_under_test="covered.Inferred") == []


def test_class_under_test_is_the_fallback() -> None:
    assert _resolve(RawMetadata(), class_under_test="covered.CoveredClass") == [
        ClassTarget("covered.CoveredClass")
    ]
    assert (
        _resolve(RawMetadata(covers_nothing=True), class_under_test="covered.X")
        is NOTHING
    )


@pytest.mark.parametrize("relation", ["covers", "uses"])
def test_more_than_one_default_class_is_rejected(relation: str) -> None:
    field = f"{relation}_default_class"
    class_metadata = RawMetadata(**{field: ["covered.A", "covered.B"]})
    method_metadata = RawMetadata(**{relation: ["covered.A::run"]})

    with pytest.raises(AmbiguousDefaultClassError) as exc_info:
        _resolve(class_metadata, method_metadata, relation=relation)

    assert str(exc_info.value) == (
        f'More than one @{relation}DefaultClass annotation for class "{_TEST_CLASS}"'
    )


def test_more_than_one_default_class_is_rejected_even_with_nothing() -> None:
    class_metadata = RawMetadata(
        covers_default_class=["covered.A", "covered.B"], covers_nothing=True
    )

    with pytest.raises(AmbiguousDefaultClassError):
        _resolve(class_metadata)


def test_single_default_class_is_normalized() -> None:
    class_metadata = RawMetadata(covers_default_class=[" \\covered\\CoveredClass "])

    assert default_class("covers", class_metadata, _TEST_CLASS) == "covered.CoveredClass"
    assert default_class("uses", class_metadata, _TEST_CLASS) is None


def test_malformed_target_carries_relation() -> None:
    method_metadata = RawMetadata(uses=["covered.CoveredClass::"])

    with pytest.raises(MalformedTargetSyntaxError) as exc_info:
        _resolve(RawMetadata(), method_metadata, relation="uses")

    assert exc_info.value.relation == "uses"

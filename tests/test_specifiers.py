from __future__ import annotations

import pytest

from targets.errors import MalformedTargetSyntaxError
from targets.specifiers import (
    ClassTarget,
    FunctionTarget,
    MethodTarget,
    VisibilityTarget,
    normalize_name,
    parse_target,
)


@pytest.mark.parametrize(
    "text",
    [
        "covered.CoveredClass::public_method",
        "covered.CoveredClass::public_method()",
        "covered.CoveredClass::public_method ( )",
        "  covered.CoveredClass::public_method  ",
        "\\covered\\CoveredClass::public_method",
    ],
)
def test_method_target_spellings_are_equivalent(text: str) -> None:
    assert parse_target(text) == MethodTarget("covered.CoveredClass", "public_method")


def test_bare_dotted_name_is_class_target() -> None:
    assert parse_target("covered.CoveredClass") == ClassTarget("covered.CoveredClass")
    assert parse_target("CoveredClass") == ClassTarget("CoveredClass")


def test_call_syntax_is_function_target() -> None:
    target = parse_target("covered.ns.helpers.func()")

    assert target == FunctionTarget("covered.ns.helpers", "func")
    assert isinstance(target, FunctionTarget)
    assert target.qualified_name == "covered.ns.helpers.func"
    assert parse_target("helper ( )") == FunctionTarget(None, "helper")


def test_member_without_class_uses_default_class() -> None:
    assert parse_target("::public_method", "covered.CoveredClass") == MethodTarget(
        "covered.CoveredClass", "public_method"
    )


def test_member_without_class_or_default_is_function() -> None:
    assert parse_target("::covered_function") == FunctionTarget(None, "covered_function")
    assert parse_target("::covered_function()") == FunctionTarget(
        None, "covered_function"
    )


def test_explicit_class_wins_over_default_class() -> None:
    assert parse_target("Other::run", "covered.CoveredClass") == MethodTarget(
        "Other", "run"
    )


def test_visibility_selector() -> None:
    assert parse_target("covered.CoveredClass::<public>") == VisibilityTarget(
        "covered.CoveredClass", "public"
    )
    negated = parse_target("::<!private>", "covered.CoveredClass")
    assert negated == VisibilityTarget("covered.CoveredClass", "private", negated=True)
    assert isinstance(negated, VisibilityTarget)
    assert negated.matches("public")
    assert not negated.matches("private")


def test_raw_text_is_kept_but_not_compared() -> None:
    first = parse_target("covered.CoveredClass::public_method()")
    second = parse_target("covered.CoveredClass::public_method")

    assert first == second
    assert first.raw == "covered.CoveredClass::public_method()"


def test_normalize_name_converts_backslash_namespaces() -> None:
    assert normalize_name("\\covered\\ns\\helpers") == "covered.ns.helpers"
    assert normalize_name(" covered.Thing ") == "covered.Thing"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "covered.CoveredClass::",
        "::",
        "covered.CoveredClass::a.b",
        "::<public>",
        "covered.CoveredClass::<internal>",
        "not a name",
        "covered..Class",
        "func(arg)",
        "1Class",
    ],
)
def test_malformed_targets_raise(text: str) -> None:
    with pytest.raises(MalformedTargetSyntaxError) as exc_info:
        parse_target(text, relation="uses")

    assert exc_info.value.target == text
    assert exc_info.value.relation == "uses"
    assert str(exc_info.value) == f'"@uses {text}" is invalid'

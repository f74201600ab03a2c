from __future__ import annotations

import pytest

from codeunits.memory import InMemoryIndex
from targets.errors import (
    InterfaceTargetError,
    UndefinedClassError,
    UndefinedFunctionError,
    UndefinedMethodError,
)
from targets.linemap import LineMapBuilder, merge_line_maps
from targets.materializer import candidate_names, class_methods, materialize
from targets.specifiers import (
    NOTHING,
    ClassTarget,
    FunctionTarget,
    MethodTarget,
    VisibilityTarget,
    parse_target,
)

_COVERED = "covered/covered_class.py"


def _index() -> InMemoryIndex:
    index = InMemoryIndex()
    index.add_class(
        "covered.covered_class.CoveredClass",
        _COVERED,
        29,
        46,
        methods={
            "public_method": (31, 35),
            "_protected_method": (37, 40),
            "__private_method": (42, 46),
        },
    )
    index.add_class(
        "covered.covered_class.Readable",
        _COVERED,
        3,
        5,
        methods={"read": (4, 5)},
        is_interface=True,
    )
    index.add_class(
        "covered.greeting.GreetingMixin",
        "covered/greeting.py",
        4,
        9,
        methods={"greeting": (5, 6), "farewell": (8, 9)},
        is_trait=True,
    )
    index.add_class(
        "covered.greeting.Greeter",
        "covered/greeter.py",
        12,
        20,
        methods={"greet": (16, 20), "farewell": (13, 14)},
        traits=["covered.greeting.GreetingMixin"],
    )
    index.add_function("covered.functions.covered_function", "covered/functions.py", 4, 6)
    index.add_function("covered.ns.helpers.func", "covered/ns/helpers.py", 4, 7)
    index.add_function(
        "tests.test_ns.func", "tests/test_ns.py", 30, 31, global_alias=False
    )
    index.add_function(
        "covered.functions.declared_only", "covered/functions.py", 8, 9, exists=False
    )
    return index


def test_method_target_yields_method_span() -> None:
    line_map = materialize(
        [MethodTarget("covered.covered_class.CoveredClass", "public_method")], _index()
    )

    assert line_map == {_COVERED: [31, 32, 33, 34, 35]}


def test_class_target_yields_class_span() -> None:
    line_map = materialize([ClassTarget("CoveredClass")], _index())

    assert line_map == {_COVERED: list(range(29, 47))}


def test_nothing_yields_empty_map() -> None:
    assert materialize(NOTHING, _index()) == {}
    assert materialize([], _index()) == {}


@pytest.mark.parametrize(
    "text",
    [
        "CoveredClass::public_method",
        "CoveredClass::public_method()",
        "CoveredClass::public_method ( )",
    ],
)
def test_parentheses_and_whitespace_do_not_change_lines(text: str) -> None:
    assert materialize([parse_target(text)], _index()) == {
        _COVERED: [31, 32, 33, 34, 35]
    }


def test_overlapping_spans_collapse() -> None:
    line_map = materialize(
        [
            ClassTarget("covered.covered_class.CoveredClass"),
            MethodTarget("covered.covered_class.CoveredClass", "public_method"),
            MethodTarget("covered.covered_class.CoveredClass", "public_method"),
        ],
        _index(),
    )

    assert line_map == {_COVERED: list(range(29, 47))}


def test_visibility_target_selects_matching_methods() -> None:
    index = _index()
    public = materialize(
        [VisibilityTarget("covered.covered_class.CoveredClass", "public")], index
    )
    not_public = materialize(
        [VisibilityTarget("CoveredClass", "public", negated=True)], index
    )

    assert public == {_COVERED: [31, 32, 33, 34, 35]}
    assert not_public == {_COVERED: [37, 38, 39, 40, 42, 43, 44, 45, 46]}


def test_class_target_includes_trait_methods_in_class_file() -> None:
    line_map = materialize([ClassTarget("covered.greeting.Greeter")], _index())

    assert line_map == {"covered/greeter.py": [5, 6, 8, 9, *range(12, 21)]}


def test_method_target_resolves_trait_method_in_its_own_file() -> None:
    index = _index()

    greeting = materialize([MethodTarget("Greeter", "greeting")], index)
    farewell = materialize([MethodTarget("Greeter", "farewell")], index)

    assert greeting == {"covered/greeting.py": [5, 6]}
    assert farewell == {"covered/greeter.py": [13, 14]}


def test_class_methods_lists_own_methods_before_trait_methods() -> None:
    index = _index()
    unit = index.lookup_class("Greeter")
    assert unit is not None

    assert [method.name for method in class_methods(index, unit)] == [
        "greet",
        "farewell",
        "greeting",
    ]


def test_trait_outside_the_index_is_skipped() -> None:
    index = InMemoryIndex()
    index.add_class(
        "app.views.ProfileView",
        "app/views.py",
        3,
        5,
        methods={"get": (4, 5)},
        traits=["django.contrib.auth.mixins.LoginRequiredMixin"],
    )

    assert materialize([ClassTarget("app.views.ProfileView")], index) == {
        "app/views.py": [3, 4, 5]
    }
    assert materialize([MethodTarget("app.views.ProfileView", "get")], index) == {
        "app/views.py": [4, 5]
    }
    with pytest.raises(UndefinedMethodError):
        materialize([MethodTarget("app.views.ProfileView", "dispatch")], index)


def test_function_targets_resolve_namespaced_and_global() -> None:
    index = _index()

    line_map = materialize(
        [FunctionTarget("covered.ns.helpers", "func"), FunctionTarget(None, "covered_function")],
        index,
    )

    assert line_map == {
        "covered/ns/helpers.py": [4, 5, 6, 7],
        "covered/functions.py": [4, 5, 6],
    }


def test_test_namespace_is_searched_before_global_namespace() -> None:
    index = _index()

    in_namespace = materialize(
        [FunctionTarget(None, "func")], index, namespace="tests.test_ns"
    )
    elsewhere = materialize([FunctionTarget(None, "func")], index, namespace="tests.other")

    assert in_namespace == {"tests/test_ns.py": [30, 31]}
    assert elsewhere == {"covered/ns/helpers.py": [4, 5, 6, 7]}


def test_candidate_names() -> None:
    assert candidate_names("func", "tests.test_ns") == ["tests.test_ns.func", "func"]
    assert candidate_names("func", None) == ["func"]
    assert candidate_names("pkg.func", "tests.test_ns") == ["pkg.func"]


def test_interface_target_is_rejected() -> None:
    with pytest.raises(InterfaceTargetError) as exc_info:
        materialize([ClassTarget("Readable")], _index(), relation="uses")

    assert str(exc_info.value) == 'Trying to @uses interface "Readable".'


def test_interface_method_target_is_rejected() -> None:
    with pytest.raises(InterfaceTargetError):
        materialize([MethodTarget("covered.covered_class.Readable", "read")], _index())


def test_undefined_class_is_rejected() -> None:
    with pytest.raises(UndefinedClassError) as exc_info:
        materialize([ClassTarget("InvalidClass")], _index())

    assert str(exc_info.value) == (
        'Class "InvalidClass" is not a valid target for code coverage'
    )


def test_undefined_method_is_rejected() -> None:
    with pytest.raises(UndefinedMethodError) as exc_info:
        materialize([MethodTarget("CoveredClass", "missing")], _index())

    assert exc_info.value.target == "CoveredClass::missing"


def test_undefined_function_is_rejected() -> None:
    with pytest.raises(UndefinedFunctionError) as exc_info:
        materialize([FunctionTarget(None, "invalid_function")], _index())

    assert str(exc_info.value) == (
        'Function "invalid_function" is not a valid target for code coverage'
    )


def test_declared_but_missing_function_is_rejected() -> None:
    with pytest.raises(UndefinedFunctionError):
        materialize([FunctionTarget("covered.functions", "declared_only")], _index())


def test_one_invalid_target_fails_the_whole_relation() -> None:
    with pytest.raises(UndefinedClassError):
        materialize(
            [ClassTarget("CoveredClass"), ClassTarget("InvalidClass")], _index()
        )


def test_line_map_builder_and_merge() -> None:
    builder = LineMapBuilder()
    builder.add_span("a.py", 3, 5)
    builder.add_lines("a.py", [4, 1])
    builder.add_lines("empty.py", [])

    assert builder.build() == {"a.py": [1, 3, 4, 5]}
    assert merge_line_maps({"a.py": [2, 1]}, {"a.py": [2, 3], "b.py": [9]}) == {
        "a.py": [1, 2, 3],
        "b.py": [9],
    }

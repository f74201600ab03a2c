"""Decorators for declaring coverage targets in test code.

The decorators change nothing about the decorated object except appending a
``(marker, args)`` pair to its ``__coverscope_markers__`` list. coverscope reads
them statically from source, so the arguments are spelled the same way they
would be in a docstring tag::

    @covers_class(Greeter)
    class GreeterTest(unittest.TestCase):
        @covers_method(Greeter, "greet")
        def test_greet(self): ...
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

T = TypeVar("T")

MARKERS_ATTRIBUTE = "__coverscope_markers__"


def _record(obj: T, marker: str, args: tuple[Any, ...]) -> T:
    markers = list(getattr(obj, MARKERS_ATTRIBUTE, ()))
    markers.append((marker, args))
    setattr(obj, MARKERS_ATTRIBUTE, markers)
    return obj


def _marker(name: str) -> Callable[..., Callable[[T], T]]:
    def factory(*args: Any) -> Callable[[T], T]:
        def decorate(obj: T) -> T:
            return _record(obj, name, args)

        return decorate

    factory.__name__ = name
    return factory


covers = _marker("covers")
covers_class = _marker("covers_class")
covers_method = _marker("covers_method")
covers_function = _marker("covers_function")
covers_default_class = _marker("covers_default_class")
uses = _marker("uses")
uses_class = _marker("uses_class")
uses_method = _marker("uses_method")
uses_function = _marker("uses_function")
uses_default_class = _marker("uses_default_class")
ignore_class_for_code_coverage = _marker("ignore_class_for_code_coverage")
ignore_method_for_code_coverage = _marker("ignore_method_for_code_coverage")
ignore_function_for_code_coverage = _marker("ignore_function_for_code_coverage")


def covers_nothing(obj: T) -> T:
    return _record(obj, "covers_nothing", ())


def uses_nothing(obj: T) -> T:
    return _record(obj, "uses_nothing", ())


def code_coverage_ignore(obj: T) -> T:
    """Leave the decorated production class or function out of coverage."""
    return _record(obj, "code_coverage_ignore", ())


def markers_of(obj: object) -> list[tuple[str, tuple[Any, ...]]]:
    return list(getattr(obj, MARKERS_ATTRIBUTE, ()))


__all__ = [
    "code_coverage_ignore",
    "covers",
    "covers_class",
    "covers_default_class",
    "covers_function",
    "covers_method",
    "covers_nothing",
    "ignore_class_for_code_coverage",
    "ignore_function_for_code_coverage",
    "ignore_method_for_code_coverage",
    "markers_of",
    "uses",
    "uses_class",
    "uses_default_class",
    "uses_function",
    "uses_method",
    "uses_nothing",
]

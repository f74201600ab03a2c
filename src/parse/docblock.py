"""Docstring tag extraction (``@covers Foo::bar`` style lines)."""

from __future__ import annotations

import re
from dataclasses import dataclass

_TAG_LINE = re.compile(r"^\s*\*?\s*@(?P<name>[A-Za-z][A-Za-z0-9_]*)(?:\s+(?P<value>.*?))?\s*$")


@dataclass(frozen=True)
class DocTag:
    name: str
    value: str


def parse_doc_tags(docstring: str | None) -> list[DocTag]:
    """Return the ``@tag value`` lines of a docstring in order of appearance.

    One tag per line; the value is the rest of the line with surrounding
    whitespace removed (possibly empty). One-line docstrings work the same.

    >>> parse_doc_tags("Checks m.\\n\\n@covers Foo::m\\n@usesNothing")
    [DocTag(name='covers', value='Foo::m'), DocTag(name='usesNothing', value='')]
    """
    if not docstring:
        return []

    tags: list[DocTag] = []
    for line in docstring.splitlines():
        match = _TAG_LINE.match(line)
        if match:
            tags.append(DocTag(match.group("name"), match.group("value") or ""))
    return tags

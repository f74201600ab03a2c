from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

LineMap = dict[str, list[int]]


class LineMapBuilder:
    """Accumulates line spans per file; overlapping spans collapse."""

    def __init__(self) -> None:
        self._lines: dict[str, set[int]] = {}

    def add_span(self, file: str, start_line: int, end_line: int) -> None:
        self._lines.setdefault(file, set()).update(range(start_line, end_line + 1))

    def add_lines(self, file: str, lines: Iterable[int]) -> None:
        self._lines.setdefault(file, set()).update(lines)

    def update(self, other: LineMap) -> None:
        for file, lines in other.items():
            self.add_lines(file, lines)

    def build(self) -> LineMap:
        return {file: sorted(lines) for file, lines in self._lines.items() if lines}


def merge_line_maps(*maps: LineMap) -> LineMap:
    builder = LineMapBuilder()
    for line_map in maps:
        builder.update(line_map)
    return builder.build()

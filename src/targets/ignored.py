"""Suite-wide aggregation of code units left out of coverage."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from targets.errors import CodeCoverageError
from targets.linemap import LineMapBuilder
from targets.materializer import include_target
from targets.specifiers import parse_target

if TYPE_CHECKING:
    from collections.abc import Iterable

    from codeunits.index import StructuralIndex
    from metadata.models import TestDeclaration
    from targets.linemap import LineMap

logger = structlog.get_logger(__name__)


def collect_ignored(
    tests: Iterable[TestDeclaration], index: StructuralIndex
) -> LineMap:
    """Merge every ignored code unit reachable from ``tests`` into one LineMap.

    Two sources contribute: the ``ignore`` targets declared by each test's
    class (read once per class) and method metadata, and every unit the index
    reports as tagged ignored at its own declaration. The result does not
    depend on test order or on how often a unit is reached.
    """
    builder = LineMapBuilder()
    seen_classes: set[str] = set()
    test_count = 0

    for test in tests:
        test_count += 1
        texts = list(test.method_metadata.ignore)
        if test.class_name not in seen_classes:
            seen_classes.add(test.class_name)
            texts = [*test.class_metadata.ignore, *texts]

        for text in texts:
            try:
                include_target(builder, parse_target(text), index, namespace=test.namespace)
            except CodeCoverageError as exc:
                exc.for_test(test.test_id)
                raise

    for unit in index.ignored_units():
        builder.add_lines(unit.file, unit.lines())

    line_map = builder.build()
    logger.debug("ignored.collected", tests=test_count, files=len(line_map))
    return line_map


__all__ = ["collect_ignored"]

"""Entry point used by a coverage driver to scope coverage per test."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from codeunits.source import SourceIndex
from metadata.models import TestDeclaration
from metadata.provider import SourceMetadataProvider
from rules.config import load_config
from targets.errors import CodeCoverageError
from targets.ignored import collect_ignored
from targets.materializer import candidate_names, materialize
from targets.resolver import resolve
from targets.specifiers import NOTHING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from codeunits.index import StructuralIndex
    from metadata.models import Relation
    from metadata.provider import MetadataProvider
    from rules.config import CoverScopeConfig
    from targets.linemap import LineMap
    from targets.specifiers import Resolution

logger = structlog.get_logger(__name__)


class CodeCoverage:
    """Covered, used and ignored lines for tests described by a metadata provider.

    Example:
        >>> coverage = CodeCoverage.for_root(Path("."))  # doctest: +SKIP
        >>> coverage.lines_to_be_covered("tests.test_shapes.CircleTest", "test_area")  # doctest: +SKIP
        {'shapes/circle.py': [12, 13, 14]}
    """

    def __init__(
        self,
        metadata: MetadataProvider,
        index: StructuralIndex,
        *,
        infer_class_under_test: bool = False,
    ) -> None:
        self._metadata = metadata
        self._index = index
        self._infer_class_under_test = infer_class_under_test

    @classmethod
    def for_root(
        cls, root: Path, config: CoverScopeConfig | None = None
    ) -> CodeCoverage:
        """Index the source tree below ``root`` and read test metadata from it."""
        config = config or load_config(root)
        index = SourceIndex(root, config)
        metadata = SourceMetadataProvider(
            index, test_method_prefix=config.test_method_prefix
        )
        return cls(
            metadata, index, infer_class_under_test=config.infer_class_under_test
        )

    def declaration(self, class_name: str, method_name: str) -> TestDeclaration:
        return TestDeclaration(
            class_name=class_name,
            method_name=method_name,
            class_metadata=self._metadata.for_class(class_name),
            method_metadata=self._metadata.for_method(class_name, method_name),
        )

    def suite_for_class(self, class_name: str) -> list[TestDeclaration]:
        return [
            self.declaration(class_name, method_name)
            for method_name in self._metadata.test_methods(class_name)
        ]

    def _class_under_test(self, test: TestDeclaration) -> str | None:
        if not self._infer_class_under_test:
            return None

        simple = test.class_name.rpartition(".")[2]
        if simple.startswith("Test") and len(simple) > 4:
            name = simple[4:]
        elif simple.endswith("Test") and len(simple) > 4:
            name = simple[:-4]
        else:
            return None

        for candidate in candidate_names(name, test.namespace):
            unit = self._index.lookup_class(candidate)
            if unit is not None and not unit.is_interface:
                return unit.name
        return None

    def _resolve(self, relation: Relation, test: TestDeclaration) -> Resolution:
        return resolve(
            relation,
            test.class_metadata,
            test.method_metadata,
            test.class_name,
            class_under_test=self._class_under_test(test) if relation == "covers" else None,
        )

    def targets(self, relation: Relation, class_name: str, method_name: str) -> Resolution:
        """The effective target specifiers of a test, without touching source lines."""
        test = self.declaration(class_name, method_name)
        try:
            return self._resolve(relation, test)
        except CodeCoverageError as exc:
            raise self._reported(exc, test, relation) from None

    def _lines(self, relation: Relation, class_name: str, method_name: str) -> LineMap:
        test = self.declaration(class_name, method_name)
        try:
            return materialize(
                self._resolve(relation, test),
                self._index,
                relation=relation,
                namespace=test.namespace,
            )
        except CodeCoverageError as exc:
            raise self._reported(exc, test, relation) from None

    @staticmethod
    def _reported(
        exc: CodeCoverageError, test: TestDeclaration, relation: Relation
    ) -> CodeCoverageError:
        exc.for_test(test.test_id)
        logger.warning(
            "coverage.invalid_metadata",
            test=test.test_id,
            relation=relation,
            error_type=type(exc).__name__,
            target=exc.target,
        )
        return exc

    def lines_to_be_covered(self, class_name: str, method_name: str) -> LineMap:
        return self._lines("covers", class_name, method_name)

    def lines_to_be_used(self, class_name: str, method_name: str) -> LineMap:
        return self._lines("uses", class_name, method_name)

    def should_collect_coverage(self, class_name: str, method_name: str) -> bool:
        """False when neither relation has a target and one of them is NOTHING.

        A relation without any declarations counts as empty, so a class-level
        ``coversNothing`` alone skips collection but a test with no metadata
        does not. Declared targets are checked against the index, so invalid
        metadata raises here instead of after coverage was collected.
        """
        test = self.declaration(class_name, method_name)
        try:
            covers = self._resolve("covers", test)
            uses = self._resolve("uses", test)
            for relation, specifiers in (("covers", covers), ("uses", uses)):
                if specifiers is not NOTHING and specifiers:
                    materialize(
                        specifiers,
                        self._index,
                        relation=relation,  # type: ignore[arg-type]
                        namespace=test.namespace,
                    )
        except CodeCoverageError as exc:
            raise self._reported(exc, test, exc.relation or "covers") from None

        empty = (NOTHING, [])
        collect = not (
            covers in empty and uses in empty and NOTHING in (covers, uses)
        )
        logger.debug("coverage.precheck", test=test.test_id, collect=collect)
        return collect

    def lines_to_be_ignored(self, suite: Iterable[TestDeclaration]) -> LineMap:
        return collect_ignored(suite, self._index)


__all__ = ["CodeCoverage"]

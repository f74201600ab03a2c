"""Command-line interface for coverscope."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import orjson
import structlog

from metadata.provider import UnknownTestError
from rules.config import ConfigError
from targets.errors import CodeCoverageError
from targets.facade import CodeCoverage

if TYPE_CHECKING:
    from collections.abc import Callable


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("root", help="Source root holding code and tests")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log index and resolution details to stderr",
    )


def _add_test_args(parser: argparse.ArgumentParser) -> None:
    _add_common_args(parser)
    parser.add_argument("test_class", help="Qualified (or unique) test class name")
    parser.add_argument("test_method", help="Test method name")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="coverscope")
    subparsers = parser.add_subparsers(dest="command", required=True)

    _add_test_args(
        subparsers.add_parser("covered", help="Lines a test is meant to cover")
    )
    _add_test_args(subparsers.add_parser("used", help="Lines a test may use"))
    _add_test_args(
        subparsers.add_parser(
            "precheck", help="Whether coverage should be collected for a test"
        )
    )

    ignored_parser = subparsers.add_parser(
        "ignored", help="Lines to ignore across the tests of one or more classes"
    )
    _add_common_args(ignored_parser)
    ignored_parser.add_argument("test_classes", nargs="+", help="Test class names")

    return parser


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _emit(payload: object) -> None:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    sys.stdout.write(orjson.dumps(payload, option=opts).decode("utf-8"))
    sys.stdout.write("\n")


def _handle_test(
    coverage: CodeCoverage, command: str, test_class: str, test_method: str
) -> object:
    if command == "precheck":
        return {"collect": coverage.should_collect_coverage(test_class, test_method)}
    lookup: Callable[[str, str], object] = (
        coverage.lines_to_be_covered
        if command == "covered"
        else coverage.lines_to_be_used
    )
    return lookup(test_class, test_method)


def _handle_ignored(coverage: CodeCoverage, test_classes: list[str]) -> object:
    suite = [
        test
        for test_class in test_classes
        for test in coverage.suite_for_class(test_class)
    ]
    return coverage.lines_to_be_ignored(suite)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    root = Path(args.root).expanduser().resolve()

    try:
        coverage = CodeCoverage.for_root(root)
        if args.command == "ignored":
            payload = _handle_ignored(coverage, args.test_classes)
        else:
            payload = _handle_test(
                coverage, args.command, args.test_class, args.test_method
            )
    except CodeCoverageError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    except (ConfigError, UnknownTestError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    _emit(payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Source file discovery for the structural index."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

SKIPPED_DIRS = frozenset(
    {".git", ".hg", ".venv", "venv", "__pycache__", ".tox", ".nox", "build", "dist"}
)


def _is_within_root(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
    except (OSError, ValueError):
        return False
    return True


def _is_candidate(
    path: Path,
    root: Path,
    gitignore_matches: Callable[[str], bool] | None,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    """Apply symlink, root containment, gitignore and glob filters to one file."""
    if not path.is_file() or path.is_symlink():
        return False

    if not _is_within_root(path, root):
        return False

    rel_path = path.relative_to(root)
    if any(part in SKIPPED_DIRS for part in rel_path.parts[:-1]):
        return False

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    rel_posix = rel_path.as_posix()
    if include_patterns and not any(fnmatch(rel_posix, pat) for pat in include_patterns):
        return False

    return not (
        exclude_patterns and any(fnmatch(rel_posix, pat) for pat in exclude_patterns)
    )


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = sorted(
        {
            path
            for path in [root / ".gitignore", *root.rglob(".gitignore")]
            if path.is_file() and not path.is_symlink()
        },
        key=lambda p: p.relative_to(root).as_posix(),
    )
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def find_python_files(
    root: Path,
    *,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Yield the Python files under ``root`` in relative-path order.

    Symlinked files, files resolving outside ``root``, gitignored files and
    virtualenv/build directories are skipped. ``include_patterns`` and
    ``exclude_patterns`` are fnmatch globs over the root-relative posix path.
    """
    gitignore_matches = _build_gitignore_matcher(
        root,
        nested_gitignore=nested_gitignore,
    )

    matched = [
        path
        for path in root.rglob("*.py")
        if _is_candidate(
            path, root, gitignore_matches, include_patterns, exclude_patterns
        )
    ]
    matched.sort(key=lambda p: p.relative_to(root).as_posix())

    yield from matched


__all__ = ["find_python_files"]

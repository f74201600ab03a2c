"""Module-level functions measured by the fixture test cases."""


def covered_function() -> int:
    total = 0
    return total + 1


def ignored_helper() -> None:  # pragma: no cover
    raise RuntimeError("debug only")


def documented_ignore() -> None:
    """Only reached from interactive sessions.

    @codeCoverageIgnore
    """
    return None

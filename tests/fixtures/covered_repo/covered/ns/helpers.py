"""Functions addressed through their module namespace."""


def func() -> str:
    prefix = "ns"
    suffix = "func"
    return f"{prefix}.{suffix}"

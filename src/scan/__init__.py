"""Source file discovery for coverscope."""

from scan.files import find_python_files

__all__ = ["find_python_files"]

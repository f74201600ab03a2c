from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

K = TypeVar("K")
V = TypeVar("V")


class OnceCache(Generic[K, V]):
    """Lazily populated cache computing each key at most once.

    Cached reads take no lock. A miss takes a lock private to its key, so
    concurrent first lookups of one key wait for a single computation while
    lookups of other keys proceed. Exceptions propagate and nothing is cached.
    """

    def __init__(self) -> None:
        self._values: dict[K, V] = {}
        self._locks: dict[K, threading.Lock] = {}
        self._guard = threading.Lock()

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: K, compute: Callable[[K], V]) -> V:
        try:
            return self._values[key]
        except KeyError:
            pass

        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())

        try:
            with lock:
                if key in self._values:
                    return self._values[key]
                value = compute(key)
                self._values[key] = value
        finally:
            with self._guard:
                self._locks.pop(key, None)
        return value

    def pending(self) -> int:
        """Number of keys whose first computation currently holds a lock."""
        with self._guard:
            return len(self._locks)

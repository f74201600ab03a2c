from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from codeunits.cache import OnceCache


def test_each_key_is_computed_once_under_concurrency() -> None:
    cache: OnceCache[str, int] = OnceCache()
    calls: list[str] = []
    calls_lock = threading.Lock()
    barrier = threading.Barrier(8)

    def compute(key: str) -> int:
        with calls_lock:
            calls.append(key)
        return len(key)

    def lookup(key: str) -> int:
        barrier.wait()
        return cache.get(key, compute)

    keys = ["alpha", "beta"] * 4
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lookup, keys))

    assert results == [len(key) for key in keys]
    assert sorted(calls) == ["alpha", "beta"]
    assert len(cache) == 2
    assert "alpha" in cache
    assert cache.pending() == 0


def test_failed_computation_is_not_cached() -> None:
    cache: OnceCache[str, int] = OnceCache()
    attempts: list[int] = []

    def flaky(key: str) -> int:
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("first attempt fails")
        return 42

    with pytest.raises(RuntimeError):
        cache.get("answer", flaky)
    assert "answer" not in cache
    assert cache.pending() == 0

    assert cache.get("answer", flaky) == 42
    assert cache.get("answer", flaky) == 42
    assert len(attempts) == 2


def test_none_is_a_cached_value() -> None:
    cache: OnceCache[str, None] = OnceCache()
    calls: list[str] = []

    def missing(key: str) -> None:
        calls.append(key)

    assert cache.get("gone", missing) is None
    assert cache.get("gone", missing) is None
    assert calls == ["gone"]

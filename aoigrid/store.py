"""Per-thread multimap: each thread sees its own lists of values by key."""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class ThreadLocalStore(Generic[K, V]):
    """Collects values under keys, separately for every thread."""

    def __init__(self) -> None:
        self._local = threading.local()

    @property
    def _store(self) -> dict[K, list[V]]:
        store = getattr(self._local, "store", None)
        if store is None:
            store = {}
            self._local.store = store
        return store

    def get(self, key: K) -> list[V]:
        """Return this thread's list for key, creating an empty one if absent."""
        return self._store.setdefault(key, [])

    def has(self, key: K) -> bool:
        """Whether this thread holds an entry for key."""
        return key in self._store

    def put(self, key: K, value: V) -> None:
        """Append a value under key for this thread."""
        self._store.setdefault(key, []).append(value)

    def erase(self, key: K) -> None:
        """Drop this thread's entry for key, if any."""
        self._store.pop(key, None)
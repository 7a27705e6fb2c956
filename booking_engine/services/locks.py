"""Per-key mutual exclusion."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class KeyedLocks:
    """A registry of locks, one per key, created on first use.

    Holders of different keys never block each other. An entry lives only
    while some thread holds or waits for it.
    """

    def __init__(self) -> None:
        self._locks: dict[str, _Entry] = {}
        self._registry_lock = threading.Lock()

    def _checkout(self, key: str) -> _Entry:
        with self._registry_lock:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _Entry()
            entry.users += 1
            return entry

    def _checkin(self, key: str, entry: _Entry) -> None:
        with self._registry_lock:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        entry = self._checkout(key)
        try:
            with entry.lock:
                yield
        finally:
            self._checkin(key, entry)

    def __contains__(self, key: str) -> bool:
        with self._registry_lock:
            return key in self._locks

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)

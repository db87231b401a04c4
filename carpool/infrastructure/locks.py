"""
Per-key in-process lock.

Used by the trip registry so that every read-validate-write cycle on one
trip runs under that trip's lock, while operations on different trips
proceed in parallel.

Each entry counts its holder plus waiters and is dropped when the count
returns to zero, so the map only holds keys that are in use right now.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Hashable, Iterator


@dataclass
class _Entry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class KeyedLock:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[Hashable, _Entry] = {}

    def _checkout(self, key: Hashable) -> _Entry:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _Entry()
            entry.users += 1
            return entry

    def _checkin(self, key: Hashable) -> _Entry:
        with self._guard:
            entry = self._locks[key]
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]
            return entry

    def acquire(self, key: Hashable, blocking: bool = True) -> bool:
        """Acquire the lock for *key*. Returns True on success."""
        entry = self._checkout(key)
        if entry.lock.acquire(blocking):
            return True
        self._checkin(key)
        return False

    def release(self, key: Hashable) -> None:
        with self._guard:
            entry = self._locks.get(key)
        if entry is None:
            raise RuntimeError(f"Lock for {key!r} is not held")
        entry.lock.release()
        self._checkin(key)

    def locked(self, key: Hashable) -> bool:
        with self._guard:
            entry = self._locks.get(key)
            return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        self.acquire(key)
        try:
            yield
        finally:
            self.release(key)

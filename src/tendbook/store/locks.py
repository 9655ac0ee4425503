"""Per-key mutual exclusion for instance operations.

Every instance operation is load → modify → replace.  Two of them running at
once on the same sync id would lose one update, so operations enter a
critical section keyed by sync id first.  Different keys never contend.

ARCHITECTURE
────────────
::

    KeyedLockRegistry
      ├── .hold(key)        ─ context manager, blocks while another holder runs
      ├── .is_locked(key)   ─ check without acquiring
      └── .active_keys()    ─ keys with a holder or waiter right now

    _guard (registry lock) protects the key → entry map only; it is never
    held while waiting on a key lock.  Entries are reference-counted and
    dropped once nobody holds or waits on them, so the map does not grow
    with the number of sync ids ever seen.

Example::

    locks = KeyedLockRegistry()
    with locks.hold("kitchen"):
        doc = store.get_or_create("kitchen")
        ...
        store.replace("kitchen", doc)
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class _KeyLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class KeyedLockRegistry:
    """A lazily created, reference-counted ``threading.Lock`` per key."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, _KeyLock] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block.

        Not reentrant: nesting ``hold`` on the same key in one thread
        deadlocks.
        """
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _KeyLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[key]

    def is_locked(self, key: str) -> bool:
        with self._guard:
            entry = self._locks.get(key)
            return entry is not None and entry.lock.locked()

    def active_keys(self) -> list[str]:
        with self._guard:
            return sorted(self._locks)

"""Per-location locks held across the capacity check and the insert.

The in-process lock covers threads of one worker and databases that ignore
``SELECT ... FOR UPDATE`` (SQLite); the row lock taken on the location
inside the write transaction covers separate processes on PostgreSQL.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

_registry_lock = threading.Lock()
_location_locks: dict[int, threading.Lock] = {}


def _lock_for(location_id: int) -> threading.Lock:
    with _registry_lock:
        lock = _location_locks.get(location_id)
        if lock is None:
            lock = threading.Lock()
            _location_locks[location_id] = lock
        return lock


@contextmanager
def location_guard(location_id: int) -> Iterator[None]:
    lock = _lock_for(location_id)
    with lock:
        yield

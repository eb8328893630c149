from __future__ import annotations

import threading


class IdentityAllocator:
    """Hands out device ids 1, 2, 3, ... for the lifetime of the process.

    Ids are never reused, not even after the device holding one is deleted.
    """

    def __init__(self, start: int = 1) -> None:
        self._next_id = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next_id
            self._next_id += 1
            return value

    def peek(self) -> int:
        with self._lock:
            return self._next_id

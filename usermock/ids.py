"""Thread-safe monotonically increasing identifiers."""

from __future__ import annotations

import threading


class IdGenerator:
    """Hand out unique integer ids starting at 1."""

    def __init__(self, start: int = 1) -> None:
        self._start = start
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    def peek(self) -> int:
        """Return the id the next call to :meth:`next` would produce."""

        with self._lock:
            return self._next

    def reset(self) -> None:
        with self._lock:
            self._next = self._start


__all__ = ["IdGenerator"]

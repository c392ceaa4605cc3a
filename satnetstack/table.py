"""Thread-safe integer-keyed table with explicit capacity management."""

from __future__ import annotations

import copy
import threading
from collections.abc import Callable
from typing import Any

CAPACITY_DEFAULT = 10


class Table:
    """A table mapping integer keys to values, safe to share between threads.

    Values are copied on insert and update. Removal moves the last entry
    into the freed slot, so entry order is not insertion order after a removal.
    """

    def __init__(self) -> None:
        self._entries: list[list[Any]] = []
        self._capacity = CAPACITY_DEFAULT
        self._lock = threading.RLock()

    def _index(self, key: int) -> int | None:
        return next((i for i, (k, _) in enumerate(self._entries) if k == key), None)

    def insert(self, key: int, value: Any) -> bool:
        """Insert a new entry; return False if the key already exists."""
        with self._lock:
            if self._index(key) is not None:
                return False
            if len(self._entries) >= self._capacity:
                self._capacity *= 2
            self._entries.append([key, copy.copy(value)])
            return True

    def update(self, key: int, value: Any) -> bool:
        """Replace the value of an existing key; return False if it is absent."""
        with self._lock:
            index = self._index(key)
            if index is None:
                return False
            self._entries[index][1] = copy.copy(value)
            return True

    def remove(self, key: int) -> bool:
        """Remove an entry; return False if the key is absent."""
        with self._lock:
            index = self._index(key)
            if index is None:
                return False
            self._entries[index] = self._entries[-1]
            self._entries.pop()
            if len(self._entries) <= self._capacity // 4:
                self._capacity = max(self._capacity // 4, CAPACITY_DEFAULT)
            return True

    def get(self, key: int) -> Any:
        """Return the value stored under ``key``, or None."""
        with self._lock:
            index = self._index(key)
            return None if index is None else self._entries[index][1]

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return any(k == key for k, _ in self._entries)

    def clear(self) -> None:
        """Drop every entry and reset the capacity."""
        with self._lock:
            self._entries = []
            self._capacity = CAPACITY_DEFAULT

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[int]:
        """Keys in storage order."""
        with self._lock:
            return [k for k, _ in self._entries]

    @property
    def capacity(self) -> int:
        """Number of slots currently reserved."""
        return self._capacity

    def debug_lines(self, format_value: Callable[[Any], str] = str) -> list[str]:
        """Describe the table's size, capacity and entries, one line each."""
        with self._lock:
            lines = [f"Table size: {len(self._entries)}, capacity: {self._capacity}"]
            lines.extend(
                f"  [{i}] Key: {key}, Value: {format_value(value)}"
                for i, (key, value) in enumerate(self._entries)
            )
            return lines
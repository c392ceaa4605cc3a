"""Thread-safe growable list with explicit capacity management."""

from __future__ import annotations

import copy
import threading
from collections.abc import Callable, Iterator
from typing import Any

LIST_DEFAULT_CAPACITY = 4


class SyncList:
    """A list guarded by a lock; elements are copied when added."""

    def __init__(self) -> None:
        self._items: list[Any] = []
        self._capacity = LIST_DEFAULT_CAPACITY
        self._lock = threading.RLock()

    def add(self, element: Any) -> None:
        """Append a copy of ``element``, doubling the capacity when full."""
        with self._lock:
            if len(self._items) == self._capacity:
                self._capacity *= 2
            self._items.append(copy.copy(element))

    def remove(self, index: int) -> bool:
        """Remove the element at ``index``; return False if out of range."""
        with self._lock:
            if not 0 <= index < len(self._items):
                return False
            del self._items[index]
            if (
                len(self._items) < self._capacity // 4
                and self._capacity > LIST_DEFAULT_CAPACITY
            ):
                self._capacity = max(self._capacity // 2, LIST_DEFAULT_CAPACITY)
            return True

    def get(self, index: int) -> Any:
        """Return the element at ``index``, or None if out of range."""
        with self._lock:
            if not 0 <= index < len(self._items):
                return None
            return self._items[index]

    def foreach(self, func: Callable[[Any], object]) -> None:
        """Call ``func`` on every element while holding the lock."""
        with self._lock:
            for item in self._items:
                func(item)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        with self._lock:
            snapshot = list(self._items)
        return iter(snapshot)

    @property
    def capacity(self) -> int:
        """Number of slots currently reserved."""
        return self._capacity
"""
Process-lifetime memoization for tenant lookups and compiled routers.

Entries are never evicted on their own; they live until invalidate() or
clear() is called (deployment reload, admin action, tests).
"""

import threading
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class MemoCache(Generic[K, V]):
    """Lock-guarded dictionary cache safe for concurrent readers and writers."""

    def __init__(self, name: str = "cache"):
        self.name = name
        self._entries: Dict[K, V] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: K, value: V) -> V:
        """Store ``value`` unless another caller stored one first; return the stored value."""
        with self._lock:
            return self._entries.setdefault(key, value)

    def get_or_create(self, key: K, factory: Callable[[], V]) -> V:
        """
        Return the cached value, building it with ``factory`` on a miss.

        The factory runs outside the lock, so two callers may build the same
        value concurrently; the first one stored wins and both get it.
        """
        value = self.get(key)
        if value is not None:
            return value
        return self.set(key, factory())

    def invalidate(self, key: K) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

"""
calrule.core.softref
--------------------
Memory-pressure-tolerant references.

A ``SoftReference`` holds its referent weakly, while a shared
``SoftReferencePool`` keeps the most recently used referents strongly
reachable. Once a referent falls out of the pool (capacity, or an explicit
``clear()``) and nothing else holds it, the garbage collector may reclaim it
and ``SoftReference.get()`` starts returning None. Callers must always be
prepared for that.

Referents must support weak references (plain ``dict`` does not; a subclass
or a class with ``__weakref__`` does).
"""

from __future__ import annotations

import threading
import weakref
from collections import OrderedDict
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class SoftReferencePool:
    """Bounded LRU of strong references."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        self._capacity = capacity
        self._entries: "OrderedDict[int, Any]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    def retain(self, obj: Any) -> None:
        if self._capacity == 0:
            return
        key = id(obj)
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                return
            self._entries[key] = obj
            while len(self._entries) > self._capacity:
                self._entries.popitem(last=False)

    def resize(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        with self._lock:
            self._capacity = capacity
            while len(self._entries) > capacity:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        """Drop every strong reference, as the collector would under memory pressure."""
        with self._lock:
            self._entries.clear()


class SoftReference(Generic[T]):
    __slots__ = ("_ref", "_pool")

    def __init__(self, referent: T, pool: SoftReferencePool) -> None:
        self._ref = weakref.ref(referent)
        self._pool = pool
        pool.retain(referent)

    def get(self) -> Optional[T]:
        obj = self._ref()
        if obj is not None:
            self._pool.retain(obj)
        return obj

    @property
    def alive(self) -> bool:
        """Whether the referent is still reachable; unlike get() this does not retain it."""
        return self._ref() is not None


_default_pool: Optional[SoftReferencePool] = None
_default_lock = threading.Lock()


def default_pool() -> SoftReferencePool:
    global _default_pool
    if _default_pool is None:
        with _default_lock:
            if _default_pool is None:
                from calrule.config.settings import get_settings
                _default_pool = SoftReferencePool(get_settings().soft_cache_size)
    return _default_pool

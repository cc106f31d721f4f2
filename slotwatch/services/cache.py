from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Generic, Hashable, Optional, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    value: T
    expires_at: Optional[float]

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now


class TTLCache(Generic[T]):
    """In-memory cache with optional expiry and max size eviction.

    ``ttl_s=None`` keeps entries for the life of the process. ``ttl_s=0`` makes
    every entry stale immediately, which turns the cache into a no-op.
    Only touched from the event loop, so there is no locking.
    """

    def __init__(self, *, ttl_s: Optional[float], max_size: int = 128) -> None:
        self.ttl_s = ttl_s
        self.max_size = max_size
        self._store: Dict[Hashable, CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def get(self, key: Hashable) -> Optional[T]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if entry.expired(time.monotonic()):
            self._store.pop(key, None)
            return None
        return entry.value

    def set(self, key: Hashable, value: T) -> None:
        now = time.monotonic()
        self._purge_expired(now)
        self._store.pop(key, None)
        if len(self._store) >= self.max_size:
            self._evict_oldest()
        expires_at = None if self.ttl_s is None else now + self.ttl_s
        self._store[key] = CacheEntry(value=value, expires_at=expires_at)

    def clear(self) -> None:
        self._store.clear()

    def _purge_expired(self, now: float) -> None:
        expired_keys = [key for key, entry in self._store.items() if entry.expired(now)]
        for key in expired_keys:
            self._store.pop(key, None)

    def _evict_oldest(self) -> None:
        # dicts keep insertion order, so the first key is the oldest write
        oldest_key = next(iter(self._store), None)
        if oldest_key is not None:
            self._store.pop(oldest_key, None)

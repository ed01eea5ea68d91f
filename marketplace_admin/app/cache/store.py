from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from marketplace_admin.app.cache.keys import belongs_to

DEFAULT_TTL_SECONDS = 300.0


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    created_at: float
    ttl_seconds: float

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl_seconds


class CacheStore:
    """In-memory TTL cache shared by every list view of the console.

    Expired entries are evicted lazily on read. Writes replace the whole entry.
    """

    def __init__(self, default_ttl_seconds: float = DEFAULT_TTL_SECONDS, now: Callable[[], float] | None = None) -> None:
        self.default_ttl_seconds = max(0.0, default_ttl_seconds)
        self._now = now or time.monotonic
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if entry.is_expired(self._now()):
                self._entries.pop(key, None)
                return default
            return entry.value

    def has(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if entry.is_expired(self._now()):
                self._entries.pop(key, None)
                return False
            return True

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else max(0.0, ttl_seconds)
        with self._lock:
            self._entries[key] = CacheEntry(value=value, created_at=self._now(), ttl_seconds=ttl)

    def invalidate(self, prefix: str) -> int:
        with self._lock:
            stale_keys = [key for key in self._entries if belongs_to(key, prefix)]
            for key in stale_keys:
                self._entries.pop(key, None)
        return len(stale_keys)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

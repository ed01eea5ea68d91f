from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from marketplace_admin.app.cache.keys import build_cache_key
from marketplace_admin.app.cache.store import CacheStore


class CacheService:
    """Resource-level facade over :class:`CacheStore`.

    Built once when the console boots and handed to every view, so all views
    share one store without reaching for module globals.
    """

    def __init__(self, store: CacheStore | None = None) -> None:
        self.store = store if store is not None else CacheStore()

    def key_for(self, resource: str, params: Mapping[str, Any] | None = None) -> str:
        return build_cache_key(resource, params)

    def get_cache(self, resource: str, params: Mapping[str, Any] | None = None) -> Any | None:
        return self.store.get(self.key_for(resource, params))

    def has_cache(self, resource: str, params: Mapping[str, Any] | None = None) -> bool:
        return self.store.has(self.key_for(resource, params))

    def set_cache(
        self,
        resource: str,
        value: Any,
        params: Mapping[str, Any] | None = None,
        ttl_seconds: float | None = None,
    ) -> None:
        self.store.set(self.key_for(resource, params), value, ttl_seconds=ttl_seconds)

    def invalidate_cache(self, resources: str | Iterable[str]) -> int:
        names = [resources] if isinstance(resources, str) else list(resources)
        return sum(self.store.invalidate(name) for name in names)

    def clear_all_cache(self) -> None:
        self.store.clear()

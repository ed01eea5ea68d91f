"""Cache invalidation after successful mutations.

Every create/update/delete/status change must purge its resource namespace
before the view refetches, otherwise the refetch can be served the pre-mutation
page from cache. Binding the mutation to its resource once, at definition time,
keeps call sites from re-typing (and mistyping) the namespace.

Example:
    bus = InvalidationBus(cache)
    delete_town = bus.bind("towns", towns_client.delete)

    await delete_town("t1")  # purges every "towns|..." entry on success
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Generic, TypeVar

from marketplace_admin.app.cache.service import CacheService
from marketplace_admin.app.infrastructure.logging.logger import get_logger, log_action

T = TypeVar("T")

logger = get_logger("marketplace_admin.cache.invalidation")


class InvalidationBus:
    def __init__(self, cache: CacheService) -> None:
        self.cache = cache

    def invalidate(self, resource: str) -> int:
        removed = self.cache.invalidate_cache(resource)
        log_action(logger, module=resource, action="invalidate", outcome="success", removed=removed)
        return removed

    def invalidate_many(self, resources: Iterable[str]) -> int:
        return sum(self.invalidate(resource) for resource in resources)

    def bind(
        self,
        resource: str,
        mutate: Callable[..., Awaitable[T]],
        *,
        also_invalidates: Iterable[str] = (),
    ) -> "BoundMutation[T]":
        return BoundMutation(self, resource, mutate, tuple(also_invalidates))


class BoundMutation(Generic[T]):
    """A mutation paired with the namespaces it dirties."""

    def __init__(
        self,
        bus: InvalidationBus,
        resource: str,
        mutate: Callable[..., Awaitable[T]],
        also_invalidates: tuple[str, ...] = (),
    ) -> None:
        self.bus = bus
        self.resource = resource
        self.mutate = mutate
        self.also_invalidates = also_invalidates

    @property
    def namespaces(self) -> tuple[str, ...]:
        return (self.resource, *[name for name in self.also_invalidates if name != self.resource])

    async def __call__(self, *args: Any, **kwargs: Any) -> T:
        result = await self.mutate(*args, **kwargs)
        self.bus.invalidate_many(self.namespaces)
        return result

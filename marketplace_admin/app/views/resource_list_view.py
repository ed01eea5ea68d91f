from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from clients.marketplace_sdk.resource_client import ResourceClient

from marketplace_admin.app.cache.invalidation import BoundMutation, InvalidationBus
from marketplace_admin.app.cache.service import CacheService
from marketplace_admin.app.fetch_coordinator import DEFAULT_DEBOUNCE_SECONDS, DEFAULT_LIMIT, FetchCoordinator
from marketplace_admin.app.state import ListState


class ResourceListView:
    """A searchable, paginated list of one resource plus its mutations.

    Mutations go through :class:`BoundMutation`, so the namespace is purged
    before the list is refetched.
    """

    def __init__(
        self,
        client: ResourceClient,
        cache: CacheService,
        bus: InvalidationBus,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        limit: int = DEFAULT_LIMIT,
        ttl_seconds: float | None = None,
        filters: Mapping[str, Any] | None = None,
        fixed_params: Mapping[str, Any] | None = None,
        also_invalidates: Iterable[str] = (),
    ) -> None:
        self.client = client
        self.resource = client.resource
        self.cache = cache
        self.bus = bus
        self.state = ListState()
        self.also_invalidates = tuple(also_invalidates)
        self.coordinator = FetchCoordinator(
            client.resource,
            client.list,
            cache,
            self.state,
            debounce_seconds=debounce_seconds,
            limit=limit,
            filters=filters,
            fixed_params=fixed_params,
            ttl_seconds=ttl_seconds,
        )
        self._create = self._bind(client.create)
        self._update = self._bind(client.update)
        self._delete = self._bind(client.delete)
        self._toggle_status = self._bind(client.toggle_status)

    async def mount(self) -> Any:
        return await self.coordinator.start()

    def unmount(self) -> None:
        self.coordinator.close()

    async def create(self, payload: dict[str, Any]) -> Any:
        return await self._run(self._create, payload)

    async def update(self, item_id: str, payload: dict[str, Any]) -> Any:
        return await self._run(self._update, item_id, payload)

    async def delete(self, item_id: str) -> Any:
        return await self._run(self._delete, item_id)

    async def toggle_status(self, item_id: str, is_active: bool | None = None) -> Any:
        if is_active is None:
            row = self.find_row(item_id)
            if row is None:
                raise LookupError(f"{self.resource}: {item_id} is not on the current page")
            is_active = row_is_active(row)
        return await self._run(self._toggle_status, item_id, is_active)

    async def mutate(self, mutate: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        return await self._run(self._bind(mutate), *args, **kwargs)

    def find_row(self, item_id: str) -> dict[str, Any] | None:
        for row in self.state.rows:
            if str(row.get("id")) == str(item_id):
                return row
        return None

    def _bind(self, mutate: Callable[..., Awaitable[Any]]) -> BoundMutation[Any]:
        return self.bus.bind(self.resource, mutate, also_invalidates=self.also_invalidates)

    async def _run(self, mutation: BoundMutation[Any], *args: Any, **kwargs: Any) -> Any:
        result = await mutation(*args, **kwargs)
        await self.coordinator.refresh()
        return result


def row_is_active(row: Mapping[str, Any]) -> bool:
    for key in ("isActive", "is_active"):
        if isinstance(row.get(key), bool):
            return row[key]
    return str(row.get("status") or "").strip().lower() == "active"

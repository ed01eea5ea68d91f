from __future__ import annotations

from typing import Any

from clients.marketplace_sdk.dashboard_client import DashboardClient

from marketplace_admin.app.cache.service import CacheService
from marketplace_admin.app.fetch_coordinator import FetchCoordinator
from marketplace_admin.app.state import ListState

STAT_LABELS = (
    ("totalRevenue", "Revenue"),
    ("totalOrders", "Orders"),
    ("avgOrderValue", "Avg. order value"),
    ("totalUsers", "Users"),
    ("totalStores", "Stores"),
    ("totalProducts", "Products"),
)


class DashboardView:
    def __init__(
        self,
        client: DashboardClient,
        cache: CacheService,
        *,
        role: str | None,
        ttl_seconds: float | None = None,
    ) -> None:
        self.client = client
        self.state = ListState()
        self.coordinator = FetchCoordinator(
            client.resource,
            self._fetch,
            cache,
            self.state,
            debounce_seconds=0,
            fixed_params={"role": role},
            ttl_seconds=ttl_seconds,
        )

    async def mount(self) -> Any:
        return await self.coordinator.start()

    def unmount(self) -> None:
        self.coordinator.close()

    async def refresh(self) -> Any:
        return await self.coordinator.refresh(force=True)

    @property
    def stats(self) -> dict[str, Any]:
        return self.state.value if isinstance(self.state.value, dict) else {}

    async def _fetch(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.client.fetch_stats(params.get("role"))

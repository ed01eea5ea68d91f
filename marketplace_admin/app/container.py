from __future__ import annotations

from dataclasses import dataclass

from clients.marketplace_sdk.business_types_client import BusinessTypesClient
from clients.marketplace_sdk.cities_client import CitiesClient
from clients.marketplace_sdk.config import SDKConfig
from clients.marketplace_sdk.dashboard_client import DashboardClient
from clients.marketplace_sdk.http_client import HttpClient
from clients.marketplace_sdk.resource_client import ResourceClient
from clients.marketplace_sdk.stores_client import StoresClient
from clients.marketplace_sdk.towns_client import TownsClient
from clients.marketplace_sdk.users_client import UsersClient

from marketplace_admin.app.cache.invalidation import InvalidationBus
from marketplace_admin.app.cache.service import CacheService
from marketplace_admin.app.cache.store import CacheStore
from marketplace_admin.app.config import AppConfig
from marketplace_admin.app.views.dashboard_view import DashboardView
from marketplace_admin.app.views.resource_list_view import ResourceListView
from marketplace_admin.app.views.towns_view import TownsView

# Store and user changes move the dashboard counters.
DASHBOARD_DEPENDENTS = {"stores", "users"}


@dataclass
class AppContainer:
    """Everything the console shares, wired once at startup."""

    config: AppConfig
    http: HttpClient
    cache: CacheService
    bus: InvalidationBus
    cities: CitiesClient
    towns: TownsClient
    stores: StoresClient
    users: UsersClient
    business_types: BusinessTypesClient
    dashboard: DashboardClient

    @classmethod
    def build(
        cls,
        config: AppConfig | None = None,
        sdk_config: SDKConfig | None = None,
        http: HttpClient | None = None,
    ) -> "AppContainer":
        config = config or AppConfig.from_env()
        http = http or HttpClient(sdk_config or SDKConfig.from_env())
        cache = CacheService(CacheStore(default_ttl_seconds=config.cache_ttl_seconds))
        return cls(
            config=config,
            http=http,
            cache=cache,
            bus=InvalidationBus(cache),
            cities=CitiesClient(http),
            towns=TownsClient(http),
            stores=StoresClient(http),
            users=UsersClient(http),
            business_types=BusinessTypesClient(http),
            dashboard=DashboardClient(http),
        )

    def list_view(self, client: ResourceClient, *, fixed_params: dict[str, object] | None = None) -> ResourceListView:
        also_invalidates = ("dashboard",) if client.resource in DASHBOARD_DEPENDENTS else ()
        return ResourceListView(
            client,
            self.cache,
            self.bus,
            debounce_seconds=self.config.debounce_seconds,
            limit=self.config.page_size,
            fixed_params=fixed_params,
            also_invalidates=also_invalidates,
        )

    def cities_view(self) -> ResourceListView:
        return self.list_view(self.cities, fixed_params={"include_all": True})

    def towns_view(self) -> TownsView:
        return TownsView(
            self.towns,
            self.cities,
            self.cache,
            self.bus,
            debounce_seconds=self.config.debounce_seconds,
            limit=self.config.page_size,
        )

    def stores_view(self) -> ResourceListView:
        return self.list_view(self.stores)

    def users_view(self) -> ResourceListView:
        return self.list_view(self.users)

    def business_types_view(self) -> ResourceListView:
        return self.list_view(self.business_types)

    def dashboard_view(self, role: str | None) -> DashboardView:
        return DashboardView(self.dashboard, self.cache, role=role, ttl_seconds=self.config.cache_ttl_seconds)

    async def aclose(self) -> None:
        self.cache.clear_all_cache()
        await self.http.aclose()

from __future__ import annotations

import asyncio
from typing import Any

from clients.marketplace_sdk.cities_client import CitiesClient
from clients.marketplace_sdk.towns_client import TownsClient

from marketplace_admin.app.cache.invalidation import InvalidationBus
from marketplace_admin.app.cache.service import CacheService
from marketplace_admin.app.views.resource_list_view import ResourceListView

CITY_FILTER_KEY = "cityId"
CITY_OPTIONS_PARAMS = {"include_all": True, "limit": 1000}


class TownsView(ResourceListView):
    """Towns list with the city dropdown it filters by.

    The dropdown is read through the shared ``cities`` namespace, so a city
    mutation made from the cities screen also refreshes these options.
    """

    def __init__(self, client: TownsClient, cities: CitiesClient, cache: CacheService, bus: InvalidationBus, **kwargs: Any) -> None:
        super().__init__(client, cache, bus, **kwargs)
        self.cities = cities
        self.city_options: list[dict[str, Any]] = []

    async def mount(self) -> Any:
        towns, _ = await asyncio.gather(self.coordinator.start(), self.load_city_options())
        return towns

    async def load_city_options(self, *, force: bool = False) -> list[dict[str, Any]]:
        listing = None if force else self.cache.get_cache(self.cities.resource, CITY_OPTIONS_PARAMS)
        if listing is None:
            listing = await self.cities.list(CITY_OPTIONS_PARAMS)
            self.cache.set_cache(self.cities.resource, listing, CITY_OPTIONS_PARAMS, ttl_seconds=self.coordinator.ttl_seconds)
        self.city_options = list(listing.get("rows", [])) if isinstance(listing, dict) else []
        return self.city_options

    async def filter_by_city(self, city_id: str | None) -> Any:
        if city_id in (None, "", "all"):
            city_id = None
        return await self.coordinator.set_filter(CITY_FILTER_KEY, city_id)

    def city_name(self, city_id: str | None) -> str | None:
        for city in self.city_options:
            if str(city.get("id")) == str(city_id):
                return city.get("enName") or city.get("arName")
        return None

import pytest

from clients.marketplace_sdk.resource_client import paginate_rows

from marketplace_admin.app.cache.invalidation import InvalidationBus
from marketplace_admin.app.cache.service import CacheService
from marketplace_admin.app.views.dashboard_view import DashboardView
from marketplace_admin.app.views.resource_list_view import ResourceListView, row_is_active
from marketplace_admin.app.views.towns_view import TownsView


class _StubClient:
    def __init__(self, resource: str, rows: list[dict]) -> None:
        self.resource = resource
        self.rows = rows
        self.list_calls: list[dict] = []
        self.toggles: list[tuple[str, bool]] = []

    async def list(self, params):
        self.list_calls.append(dict(params))
        rows = [row for row in self.rows if not params.get("cityId") or row.get("townId") == params["cityId"]]
        return paginate_rows(rows, page=params.get("page", 1), limit=params.get("limit", 10))

    async def create(self, payload):
        self.rows.append({"id": f"new-{len(self.rows)}", **payload})
        return self.rows[-1]

    async def update(self, item_id, payload):
        return {"id": item_id, **payload}

    async def delete(self, item_id):
        self.rows = [row for row in self.rows if row["id"] != item_id]
        return {}

    async def toggle_status(self, item_id, is_active):
        self.toggles.append((item_id, is_active))
        return {}


def _view(client: _StubClient, cache: CacheService | None = None, **kwargs) -> ResourceListView:
    cache = cache or CacheService()
    return ResourceListView(client, cache, InvalidationBus(cache), debounce_seconds=0, **kwargs)


@pytest.mark.asyncio
async def test_mutation_invalidates_before_refetch() -> None:
    client = _StubClient("cities", [{"id": "c1", "enName": "Cairo", "isActive": True}])
    view = _view(client)
    await view.mount()

    await view.create({"enName": "Giza"})

    assert len(client.list_calls) == 2
    assert [row["enName"] for row in view.state.rows] == ["Cairo", "Giza"]


@pytest.mark.asyncio
async def test_toggle_status_reads_current_row_state() -> None:
    client = _StubClient("cities", [{"id": "c1", "isActive": True}, {"id": "c2", "isActive": False}])
    view = _view(client)
    await view.mount()

    await view.toggle_status("c1")
    await view.toggle_status("c2")

    assert client.toggles == [("c1", True), ("c2", False)]
    with pytest.raises(LookupError):
        await view.toggle_status("missing")


@pytest.mark.asyncio
async def test_store_mutations_also_purge_dashboard() -> None:
    cache = CacheService()
    cache.set_cache("dashboard", {"totalStores": 1}, {"role": "super_admin"})
    client = _StubClient("stores", [{"id": "s1", "status": "active"}])
    view = _view(client, cache, also_invalidates=("dashboard",))
    await view.mount()

    await view.toggle_status("s1")

    assert client.toggles == [("s1", True)]
    assert cache.get_cache("dashboard", {"role": "super_admin"}) is None


@pytest.mark.asyncio
async def test_unmount_closes_coordinator() -> None:
    view = _view(_StubClient("cities", []))
    await view.mount()

    view.unmount()

    assert view.coordinator.closed


def test_row_is_active_variants() -> None:
    assert row_is_active({"isActive": True})
    assert not row_is_active({"is_active": False})
    assert row_is_active({"status": "ACTIVE"})
    assert not row_is_active({"status": "suspended"})
    assert not row_is_active({})


@pytest.mark.asyncio
async def test_towns_view_loads_city_options_through_shared_namespace() -> None:
    cache = CacheService()
    towns = _StubClient("towns", [{"id": "t1", "townId": "c1"}, {"id": "t2", "townId": "c2"}])
    cities = _StubClient("cities", [{"id": "c1", "enName": "Cairo"}, {"id": "c2", "arName": "الجيزة"}])
    view = TownsView(towns, cities, cache, InvalidationBus(cache), debounce_seconds=0)

    await view.mount()
    await view.load_city_options()

    assert len(cities.list_calls) == 1
    assert cities.list_calls[0]["include_all"] is True
    assert view.city_name("c1") == "Cairo"
    assert view.city_name("c2") == "الجيزة"
    assert view.city_name("c9") is None

    InvalidationBus(cache).invalidate("cities")
    await view.load_city_options()
    assert len(cities.list_calls) == 2


@pytest.mark.asyncio
async def test_towns_view_city_filter_and_all_option() -> None:
    cache = CacheService()
    towns = _StubClient("towns", [{"id": "t1", "townId": "c1"}, {"id": "t2", "townId": "c2"}])
    view = TownsView(towns, _StubClient("cities", []), cache, InvalidationBus(cache), debounce_seconds=0)
    await view.mount()

    await view.filter_by_city("c2")
    assert [row["id"] for row in view.state.rows] == ["t2"]

    await view.filter_by_city("all")
    assert "cityId" not in view.coordinator.state.filters
    assert [row["id"] for row in view.state.rows] == ["t1", "t2"]
    # Back to the unfiltered first page, which is still cached.
    assert len(towns.list_calls) == 2


class _StubDashboardClient:
    resource = "dashboard"

    def __init__(self) -> None:
        self.roles: list[str | None] = []

    async def fetch_stats(self, role):
        self.roles.append(role)
        return {"totalOrders": len(self.roles)}


@pytest.mark.asyncio
async def test_dashboard_view_caches_per_role() -> None:
    cache = CacheService()
    client = _StubDashboardClient()

    await DashboardView(client, cache, role="super_admin").mount()
    second = DashboardView(client, cache, role="super_admin")
    await second.mount()
    await DashboardView(client, cache, role="store_owner").mount()

    assert client.roles == ["super_admin", "store_owner"]
    assert second.stats == {"totalOrders": 1}

    await second.refresh()
    assert second.stats == {"totalOrders": 3}

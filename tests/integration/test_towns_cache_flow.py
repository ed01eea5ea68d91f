import httpx
import pytest

from clients.marketplace_sdk.config import SDKConfig
from clients.marketplace_sdk.http_client import HttpClient

from marketplace_admin.app.config import AppConfig
from marketplace_admin.app.container import AppContainer


class _MarketplaceApi:
    """Just enough of the admin API for the towns and cities screens."""

    def __init__(self) -> None:
        self.towns = [{"id": "t1", "enName": "Maadi", "arName": "المعادي", "townId": "c1", "isActive": True}]
        self.cities = [{"id": "c1", "enName": "Cairo", "isActive": True}, {"id": "c2", "enName": "Giza", "isActive": False}]
        self.requests: list[tuple[str, str]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api/v1/")
        self.requests.append((request.method, path))
        if request.method == "GET" and path == "places":
            return _envelope(list(self.towns))
        if request.method == "GET" and path == "towns/admin":
            return _envelope(list(self.cities))
        if request.method == "GET" and path == "towns":
            return _envelope([city for city in self.cities if city["isActive"]])
        if request.method == "DELETE" and path.startswith("places/"):
            town_id = path.split("/", 1)[1]
            self.towns = [town for town in self.towns if town["id"] != town_id]
            return _envelope({"id": town_id})
        if request.method == "PATCH" and path.startswith("towns/"):
            _, city_id, action = path.split("/")
            for city in self.cities:
                if city["id"] == city_id:
                    city["isActive"] = action == "activate"
            return _envelope({"id": city_id})
        return httpx.Response(404, json={"statusCode": 404, "message": f"Cannot {request.method} /{path}"})


def _envelope(data) -> httpx.Response:
    return httpx.Response(200, json={"success": True, "statusCode": 200, "data": data})


def _container(api: _MarketplaceApi) -> AppContainer:
    sdk_config = SDKConfig(
        base_url="http://api.test/api/v1/",
        timeout_seconds=5,
        verify_ssl=True,
        retry_max_attempts=1,
        retry_backoff_ms=0,
    )
    http = HttpClient(sdk_config, client=httpx.AsyncClient(base_url=sdk_config.base_url, transport=httpx.MockTransport(api)))
    config = AppConfig(cache_ttl_seconds=300, debounce_ms=0, page_size=10, log_level="INFO")
    return AppContainer.build(config=config, sdk_config=sdk_config, http=http)


@pytest.mark.asyncio
async def test_delete_town_purges_cache_and_refetch_returns_empty_list() -> None:
    api = _MarketplaceApi()
    container = _container(api)
    view = container.towns_view()
    params = {"page": 1, "limit": 10, "search": ""}

    assert container.cache.get_cache("towns", params) is None
    await view.mount()
    cached = container.cache.get_cache("towns", params)
    assert [row["id"] for row in cached["rows"]] == ["t1"]

    delete_town = container.bus.bind("towns", container.towns.delete)
    await delete_town("t1")
    assert container.cache.get_cache("towns", params) is None

    refreshed = await view.coordinator.refresh()
    assert refreshed["rows"] == []
    assert view.state.rows == []
    await container.aclose()


@pytest.mark.asyncio
async def test_view_delete_does_not_serve_pre_mutation_page() -> None:
    api = _MarketplaceApi()
    container = _container(api)
    view = container.towns_view()
    await view.mount()

    await view.delete("t1")

    assert view.state.rows == []
    assert [request for request in api.requests if request == ("GET", "places")] == [("GET", "places")] * 2
    await container.aclose()


@pytest.mark.asyncio
async def test_city_toggle_refreshes_towns_dropdown_options() -> None:
    api = _MarketplaceApi()
    container = _container(api)
    cities_view = container.cities_view()
    towns_view = container.towns_view()
    await cities_view.mount()
    await towns_view.mount()
    assert [city["id"] for city in towns_view.city_options] == ["c1", "c2"]

    await cities_view.toggle_status("c2")
    await towns_view.load_city_options()

    assert api.requests.count(("PATCH", "towns/c2/activate")) == 1
    assert api.requests.count(("GET", "towns/admin")) == 4
    assert all(city["isActive"] for city in towns_view.city_options)
    await container.aclose()


@pytest.mark.asyncio
async def test_cities_view_keeps_admin_listing_after_clearing_filters() -> None:
    api = _MarketplaceApi()
    container = _container(api)
    view = container.cities_view()
    await view.mount()
    await view.coordinator.set_filter("isActive", "true")
    assert [row["id"] for row in view.state.rows] == ["c1"]

    await view.coordinator.clear_filters()

    assert ("GET", "towns") not in api.requests
    assert [row["id"] for row in view.state.rows] == ["c1", "c2"]
    await container.aclose()

from collections.abc import Iterator

import pytest

from clients.marketplace_sdk.errors import ApiError

from marketplace_admin.app.admin_console import AdminConsole
from marketplace_admin.app.config import AppConfig
from marketplace_admin.app.container import AppContainer
from marketplace_admin.app.state import SessionState


class _FakeHttp:
    def __init__(self, routes: dict) -> None:
        self.routes = routes
        self.calls: list[tuple] = []
        self.closed = False

    async def get(self, path, params=None):
        self.calls.append(("GET", path, params))
        outcome = self.routes.get(path, [])
        if isinstance(outcome, Exception):
            raise outcome
        return outcome() if callable(outcome) else outcome

    async def post(self, path, json_body=None):
        self.calls.append(("POST", path, json_body))
        return {"id": "new", **(json_body or {})}

    async def patch(self, path, json_body=None):
        self.calls.append(("PATCH", path, json_body))
        return {}

    async def delete(self, path):
        self.calls.append(("DELETE", path, None))
        self.routes.get("on_delete", lambda _path: None)(path)
        return {}

    async def aclose(self) -> None:
        self.closed = True


def _console(http: _FakeHttp, answers: list[str], monkeypatch) -> AdminConsole:
    config = AppConfig(cache_ttl_seconds=300, debounce_ms=0, page_size=10, log_level="INFO")
    container = AppContainer.build(config=config, http=http)
    feed: Iterator[str] = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt: next(feed))
    return AdminConsole(container, SessionState(base_url="http://api.test/api/v1/", role="super_admin"))


@pytest.mark.asyncio
async def test_towns_search_and_delete_refetches_fresh_list(monkeypatch, capsys) -> None:
    towns = [
        {"id": "t1", "enName": "Maadi", "arName": "المعادي", "townId": "c1"},
        {"id": "t2", "enName": "Zamalek", "arName": "الزمالك", "townId": "c1"},
    ]

    def _on_delete(path: str) -> None:
        towns[:] = [town for town in towns if f"places/{town['id']}" != path]

    http = _FakeHttp({"places": lambda: list(towns), "towns/admin": [{"id": "c1", "enName": "Cairo"}], "on_delete": _on_delete})
    console = _console(http, ["2", "s maa", "d t1", "y", "c", "b", "8"], monkeypatch)

    await console.run()

    place_reads = [call for call in http.calls if call[:2] == ("GET", "places")]
    assert ("DELETE", "places/t1", None) in http.calls
    # mount, debounced search, refetch after the delete; "c" with no filters set is a no-op
    assert len(place_reads) == 3
    output = capsys.readouterr().out
    assert "Deleted: t1" in output
    assert "Zamalek" in output


@pytest.mark.asyncio
async def test_list_errors_are_printed_and_loop_continues(monkeypatch, capsys) -> None:
    http = _FakeHttp({"stores": ApiError(code="NETWORK_ERROR", message="offline")})
    console = _console(http, ["3", "r", "b", "8"], monkeypatch)

    await console.run()

    output = capsys.readouterr().out
    assert "code=NETWORK_ERROR" in output
    assert "last load failed: offline" in output


@pytest.mark.asyncio
async def test_store_status_command_patches_with_reason(monkeypatch) -> None:
    http = _FakeHttp({"stores": {"data": [{"id": "s1", "status": "pending"}], "meta": {"total": 1}}})
    console = _console(http, ["3", "u s1", "active", "documents verified", "b", "8"], monkeypatch)

    await console.run()

    assert ("PATCH", "stores/s1/status", {"status": "active", "reason": "documents verified"}) in http.calls
    assert [call[1] for call in http.calls if call[0] == "GET"] == ["stores", "stores"]


@pytest.mark.asyncio
async def test_invalid_inputs_show_validation_banner(monkeypatch, capsys) -> None:
    http = _FakeHttp({"towns/admin": [{"id": "c1", "enName": "Cairo", "isActive": True}]})
    console = _console(http, ["1", "g x", "f nothing", "t", "", "a", "Giza", "", "b", "8"], monkeypatch)

    await console.run()

    output = capsys.readouterr().out
    assert output.count("category=validation") == 4
    assert not [call for call in http.calls if call[0] == "POST"]


@pytest.mark.asyncio
async def test_dashboard_and_clear_cache(monkeypatch, capsys) -> None:
    http = _FakeHttp({"stores": {"data": [], "meta": {"total": 7}}})
    console = _console(http, ["6", "r", "b", "7", "8"], monkeypatch)

    await console.run()

    output = capsys.readouterr().out
    assert "Stores: 7" in output
    assert "Cache cleared." in output
    assert len(console.container.cache.store) == 0
    assert [call[1] for call in http.calls].count("stores") == 2

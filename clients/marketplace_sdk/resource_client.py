from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from clients.marketplace_sdk.http_client import HttpClient
from clients.marketplace_sdk.normalizers import normalize_listing

LIST_CONTROL_KEYS = ("page", "limit", "search")


class ResourceClient:
    """CRUD verbs for one REST collection.

    ``resource`` doubles as the cache namespace the console invalidates after a
    mutation, so it must stay stable even when the REST path does not match it
    (cities live under ``/towns``, towns under ``/places``).
    """

    resource = ""
    path = ""
    server_paginated = True
    search_fields: Sequence[str] = ("enName", "arName", "name")
    routing_keys: Sequence[str] = ()

    def __init__(self, http_client: HttpClient) -> None:
        self.http_client = http_client

    async def list(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        params = dict(params or {})
        page = _to_positive_int(params.get("page"), 1)
        limit = _to_positive_int(params.get("limit"), 10)

        if self.server_paginated:
            payload = await self.http_client.get(self.list_path(params), params=self.build_query(params))
            return normalize_listing(payload, page=page, limit=limit)

        payload = await self.http_client.get(self.list_path(params))
        rows = normalize_listing(payload, page=1, limit=limit)["rows"]
        rows = [row for row in rows if self.matches(row, params)]
        return paginate_rows(rows, page=page, limit=limit)

    async def create(self, payload: dict[str, Any]) -> Any:
        return await self.http_client.post(self.path, payload)

    async def update(self, item_id: str, payload: dict[str, Any]) -> Any:
        return await self.http_client.patch(f"{self.path}/{item_id}", payload)

    async def delete(self, item_id: str) -> Any:
        return await self.http_client.delete(f"{self.path}/{item_id}")

    async def toggle_status(self, item_id: str, is_active: bool) -> Any:
        action = "deactivate" if is_active else "activate"
        return await self.http_client.patch(f"{self.path}/{item_id}/{action}")

    def list_path(self, params: Mapping[str, Any]) -> str:
        return self.path

    def build_query(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return {
            key: value for key, value in params.items() if value not in (None, "") and key not in self.routing_keys
        }

    def matches(self, row: Any, params: Mapping[str, Any]) -> bool:
        if not isinstance(row, dict):
            return False
        term = str(params.get("search") or "").strip()
        if term and not _matches_search(row, term, self.search_fields):
            return False
        for key, expected in params.items():
            if key in LIST_CONTROL_KEYS or key in self.routing_keys or expected in (None, ""):
                continue
            if not self.matches_filter(row, key, expected):
                return False
        return True

    def matches_filter(self, row: dict[str, Any], key: str, expected: Any) -> bool:
        value = row.get(key)
        if isinstance(value, bool):
            return str(value).lower() == str(expected).strip().lower()
        return str(value) == str(expected)


def paginate_rows(rows: list[Any], *, page: int, limit: int) -> dict[str, Any]:
    total = len(rows)
    total_pages = max(1, -(-total // limit))
    start = (page - 1) * limit
    return {
        "rows": rows[start : start + limit],
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }


def _matches_search(row: dict[str, Any], term: str, fields: Sequence[str]) -> bool:
    lowered = term.lower()
    for field_name in fields:
        value = row.get(field_name)
        if isinstance(value, str) and (lowered in value.lower() or term in value):
            return True
    return False


def _to_positive_int(value: Any, default: int) -> int:
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return default

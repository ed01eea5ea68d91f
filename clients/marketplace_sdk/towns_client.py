from __future__ import annotations

from typing import Any

from clients.marketplace_sdk.resource_client import ResourceClient


class TownsClient(ResourceClient):
    resource = "towns"
    path = "places"
    server_paginated = False
    search_fields = ("enName", "arName")

    def matches_filter(self, row: dict[str, Any], key: str, expected: Any) -> bool:
        if key != "cityId":
            return super().matches_filter(row, key, expected)
        parent = row.get("town")
        city_id = parent.get("id") if isinstance(parent, dict) else None
        return str(city_id or row.get("townId")) == str(expected)

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from clients.marketplace_sdk.resource_client import ResourceClient


class CitiesClient(ResourceClient):
    resource = "cities"
    path = "towns"
    server_paginated = False
    search_fields = ("enName", "arName")
    routing_keys = ("include_all",)

    def list_path(self, params: Mapping[str, Any]) -> str:
        # Admins see inactive cities too; the public collection hides them.
        return "towns/admin" if params.get("include_all") else self.path

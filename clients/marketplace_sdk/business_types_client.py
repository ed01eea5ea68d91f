from __future__ import annotations

from typing import Any

from clients.marketplace_sdk.resource_client import ResourceClient


class BusinessTypesClient(ResourceClient):
    resource = "business-types"
    path = "business-types"
    server_paginated = False
    search_fields = ("en_name", "ar_name", "code")

    async def toggle_status(self, item_id: str, is_active: bool) -> Any:
        return await self.http_client.patch(f"{self.path}/{item_id}", {"is_active": not is_active})

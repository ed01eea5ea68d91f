from __future__ import annotations

from typing import Any

from clients.marketplace_sdk.resource_client import ResourceClient

STORE_STATUSES = ("pending", "active", "inactive", "suspended", "rejected")


class StoresClient(ResourceClient):
    resource = "stores"
    path = "stores"

    async def update_status(self, store_id: str, status: str, reason: str = "") -> Any:
        normalized = status.strip().lower()
        if normalized not in STORE_STATUSES:
            raise ValueError(f"Unknown store status: {status}")
        payload = {"status": normalized, "reason": reason}
        return await self.http_client.patch(f"{self.path}/{store_id}/status", payload)

    async def toggle_status(self, item_id: str, is_active: bool) -> Any:
        return await self.update_status(item_id, "inactive" if is_active else "active")

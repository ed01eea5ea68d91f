from __future__ import annotations

import asyncio
import logging
from typing import Any

from clients.marketplace_sdk.errors import ApiError
from clients.marketplace_sdk.http_client import HttpClient

logger = logging.getLogger(__name__)

SUPER_ADMIN_ROLE = "super_admin"


class DashboardClient:
    resource = "dashboard"

    def __init__(self, http_client: HttpClient) -> None:
        self.http_client = http_client

    async def fetch_stats(self, role: str | None) -> dict[str, Any]:
        if role == SUPER_ADMIN_ROLE:
            users, stores, orders, products = await asyncio.gather(
                self._get_or_default("users", {"data": [], "meta": {"total": 0}}),
                self._get_or_default("stores", {"data": [], "meta": {"total": 0}}),
                self._get_or_default("orders", {"orders": []}),
                self._get_or_default("products", {"data": [], "meta": {"total": 0}}),
            )
            order_rows = orders.get("orders") if isinstance(orders, dict) else None
            order_rows = [order for order in order_rows if isinstance(order, dict)] if isinstance(order_rows, list) else []
            revenue = sum(_number(order.get("total")) for order in order_rows if order.get("status") == "DELIVERED")
            orders_count = len(order_rows)
            return _stats(
                revenue=revenue,
                orders=orders_count,
                users=_meta_total(users),
                stores=_meta_total(stores),
                products=_meta_total(products),
                avg_value=revenue / orders_count if orders_count else 0,
            )

        summary = await self.http_client.get("orders/stats/summary", params={"period": "30d"})
        if isinstance(summary, dict) and isinstance(summary.get("data"), dict):
            summary = summary["data"]
        if not isinstance(summary, dict):
            summary = {}
        stores, products = await asyncio.gather(
            self._get_or_default("stores", {"data": [], "meta": {"total": 0}}),
            self._get_or_default("products/store-products", {"data": [], "meta": {"total": 0}}),
        )
        return _stats(
            revenue=summary.get("totalRevenue") or 0,
            orders=summary.get("totalOrders") or 0,
            users=0,
            stores=_meta_total(stores),
            products=_meta_total(products),
            avg_value=summary.get("averageOrderValue") or 0,
        )

    async def _get_or_default(self, path: str, default: dict[str, Any]) -> Any:
        try:
            return await self.http_client.get(path)
        except ApiError as error:
            # A single failing counter must not blank the whole dashboard.
            logger.warning("dashboard counter %s unavailable: %s", path, error)
            return default


def _meta_total(payload: Any) -> int:
    if isinstance(payload, dict) and isinstance(payload.get("meta"), dict):
        try:
            return int(payload["meta"].get("total") or 0)
        except (TypeError, ValueError):
            return 0
    return 0


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _stats(*, revenue: float, orders: int, users: int, stores: int, products: int, avg_value: float) -> dict[str, Any]:
    return {
        "totalRevenue": revenue,
        "totalOrders": orders,
        "totalUsers": users,
        "totalStores": stores,
        "totalProducts": products,
        "avgOrderValue": avg_value,
    }

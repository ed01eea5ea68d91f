from __future__ import annotations

from clients.marketplace_sdk.resource_client import ResourceClient


class UsersClient(ResourceClient):
    resource = "users"
    path = "users"

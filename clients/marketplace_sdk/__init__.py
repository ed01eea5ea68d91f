from clients.marketplace_sdk.business_types_client import BusinessTypesClient
from clients.marketplace_sdk.cities_client import CitiesClient
from clients.marketplace_sdk.config import SDKConfig
from clients.marketplace_sdk.dashboard_client import DashboardClient
from clients.marketplace_sdk.errors import ApiError
from clients.marketplace_sdk.http_client import HttpClient
from clients.marketplace_sdk.resource_client import ResourceClient
from clients.marketplace_sdk.stores_client import StoresClient
from clients.marketplace_sdk.towns_client import TownsClient
from clients.marketplace_sdk.users_client import UsersClient

__all__ = [
    "SDKConfig",
    "ApiError",
    "HttpClient",
    "ResourceClient",
    "CitiesClient",
    "TownsClient",
    "StoresClient",
    "UsersClient",
    "BusinessTypesClient",
    "DashboardClient",
]

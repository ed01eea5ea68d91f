from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from clients.marketplace_sdk.config import SDKConfig
from clients.marketplace_sdk.errors import ApiError


class HttpClient:
    def __init__(
        self,
        config: SDKConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or SDKConfig.from_env()
        self._client = client or httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            verify=self.config.verify_ssl,
            headers={"Content-Type": "application/json"},
        )
        self._retry_max_attempts = max(1, self.config.retry_max_attempts)
        self._retry_backoff_ms = max(0, self.config.retry_backoff_ms)
        self._auth_error_handler: Callable[[ApiError], None] | None = None

    def register_auth_error_handler(self, handler: Callable[[ApiError], None] | None) -> None:
        self._auth_error_handler = handler

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        request_headers = {**self.config.auth_headers(), **(headers or {})}

        normalized_path = path.lstrip("/")
        query = _build_query_params(params)
        allow_retry = method.upper() == "GET"

        for attempt in range(1, self._retry_max_attempts + 1):
            try:
                response = await self._client.request(
                    method=method,
                    url=normalized_path,
                    json=json_body,
                    headers=request_headers,
                    params=query or None,
                )
            except (httpx.TimeoutException, httpx.TransportError) as exc:
                if (not allow_retry) or attempt >= self._retry_max_attempts:
                    raise ApiError(
                        code="NETWORK_ERROR",
                        message="Network error while calling marketplace API",
                        details=str(exc),
                        trace_id=None,
                        status_code=None,
                    ) from exc
                await self._backoff(attempt)
                continue

            if response.status_code >= 400:
                error = ApiError.from_http_response(response)
                if allow_retry and self._is_retryable_status(error.status_code) and attempt < self._retry_max_attempts:
                    await self._backoff(attempt)
                    continue
                if error.is_auth_error and self._auth_error_handler:
                    self._auth_error_handler(error)
                raise error

            try:
                body = response.json()
            except ValueError:
                return {}
            return unwrap_envelope(body)

        raise ApiError(code="NETWORK_ERROR", message="Network error while calling marketplace API", details="retry exhausted")

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json_body: Any = None) -> Any:
        return await self.request("POST", path, json_body=json_body if json_body is not None else {})

    async def patch(self, path: str, json_body: Any = None) -> Any:
        return await self.request("PATCH", path, json_body=json_body if json_body is not None else {})

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _backoff(self, attempt: int) -> None:
        await asyncio.sleep((self._retry_backoff_ms * attempt) / 1000)

    @staticmethod
    def _is_retryable_status(status_code: int | None) -> bool:
        return bool(status_code and 500 <= status_code <= 599)


def unwrap_envelope(body: Any) -> Any:
    """Strip the ``{success, statusCode, data, meta}`` envelope the API wraps around payloads.

    Paginated responses keep their meta as ``{"data": ..., "meta": ...}``; everything
    else collapses to the bare ``data``. Bodies without the envelope pass through.
    """
    if isinstance(body, dict) and "success" in body and "data" in body:
        if body.get("meta"):
            return {"data": body["data"], "meta": body["meta"]}
        return body["data"]
    return body


def _build_query_params(params: Mapping[str, Any] | None) -> dict[str, Any]:
    if not params:
        return {}
    query: dict[str, Any] = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        query[key] = "true" if value is True else "false" if value is False else value
    return query

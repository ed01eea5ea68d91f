"""Errors raised by the marketplace SDK.

A failed call answers with the success envelope minus ``data``::

    {"success": false, "statusCode": 409, "message": "City already exists", "error": "Conflict"}

``message`` is a list of strings when request validation rejects the body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

STATUS_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
}
AUTH_STATUS_CODES = frozenset({401, 403})


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: Any = None
    trace_id: str | None = None
    status_code: int | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in AUTH_STATUS_CODES

    @classmethod
    def from_http_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            body = None
        envelope = body if isinstance(body, dict) else {}
        status_code = response.status_code
        return cls(
            code=str(envelope.get("code") or STATUS_ERROR_CODES.get(status_code, "HTTP_ERROR")),
            message=_envelope_message(envelope) or response.text or f"HTTP {status_code}",
            details=envelope.get("error") if envelope else body,
            trace_id=envelope.get("requestId") or response.headers.get("X-Request-Id") or response.headers.get("X-Trace-Id"),
            status_code=status_code,
        )


def _envelope_message(envelope: dict[str, Any]) -> str | None:
    message = envelope.get("message")
    if isinstance(message, list):
        return "; ".join(str(item) for item in message if item) or None
    return str(message) if message else None

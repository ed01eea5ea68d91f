from __future__ import annotations

from typing import Any

from clients.marketplace_sdk.errors import ApiError


def build_error_payload(error: Exception) -> dict[str, Any]:
    if isinstance(error, ApiError):
        category = _classify_api_error(error)
        return {
            "category": category,
            "code": error.code,
            "message": error.message,
            "trace_id": error.trace_id,
            "status_code": error.status_code,
            "action": _suggest_action(category),
        }
    return {
        "category": "internal",
        "code": "INTERNAL_ERROR",
        "message": str(error),
        "trace_id": None,
        "status_code": None,
        "action": "Contact support",
    }


def user_message(error: Exception) -> str:
    if isinstance(error, ApiError) and error.message:
        return error.message
    return str(error) or error.__class__.__name__


def print_error_banner(payload: dict[str, Any]) -> None:
    trace_id = payload.get("trace_id") or "n/a"
    print(
        "[ERROR] "
        f"code={payload.get('code')} "
        f"message={payload.get('message')} "
        f"trace_id={trace_id} "
        f"category={payload.get('category')} "
        f"action={payload.get('action')}"
    )


def _classify_api_error(error: ApiError) -> str:
    if error.code == "NETWORK_ERROR":
        return "network"
    if error.status_code in {401, 403, 404, 409, 422}:
        return str(error.status_code)
    if error.status_code and error.status_code >= 500:
        return "500"
    return "api"


def _suggest_action(category: str) -> str:
    if category in {"network", "500", "409"}:
        return "Retry"
    if category == "401":
        return "Sign in again"
    if category == "403":
        return "Ask an administrator for access"
    if category in {"404", "422"}:
        return "Check the values and try again"
    return "Contact support"

from __future__ import annotations

import math
from typing import Any


def normalize_listing(payload: Any, *, page: int = 1, limit: int = 10) -> dict[str, Any]:
    safe_page = max(1, int(page or 1))
    safe_limit = max(1, int(limit or 10))

    rows: list[Any] = []
    meta: dict[str, Any] = {}

    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict):
        rows, meta = _extract_rows_and_meta(payload)

    total = _to_int(meta.get("total"))
    safe_page = _to_int(meta.get("page")) or safe_page
    safe_limit = _to_int(meta.get("limit")) or _to_int(meta.get("per_page")) or safe_limit
    total_pages = _to_int(meta.get("totalPages")) or _to_int(meta.get("total_pages"))

    if total is None and not meta:
        total = len(rows)
    if total_pages is None and total is not None:
        total_pages = max(1, math.ceil(total / safe_limit))

    has_next = _to_bool(meta.get("hasNextPage"))
    if has_next is None and total_pages is not None:
        has_next = safe_page < total_pages
    has_prev = _to_bool(meta.get("hasPreviousPage"))
    if has_prev is None:
        has_prev = safe_page > 1

    return {
        "rows": rows,
        "page": safe_page,
        "limit": safe_limit,
        "total": total,
        "total_pages": total_pages,
        "has_next": has_next,
        "has_prev": has_prev,
    }


def _extract_rows_and_meta(payload: dict[str, Any]) -> tuple[list[Any], dict[str, Any]]:
    meta = payload.get("meta") if isinstance(payload.get("meta"), dict) else {}
    data = payload.get("data")

    if isinstance(data, list):
        return data, meta
    if isinstance(data, dict):
        if isinstance(data.get("data"), list):
            nested_meta = data.get("meta") if isinstance(data.get("meta"), dict) else meta
            return data["data"], nested_meta
        return _values_of_id_map(data), meta
    if isinstance(payload.get("items"), list):
        return payload["items"], meta
    if "data" not in payload and "meta" not in payload:
        return _values_of_id_map(payload), meta
    return [], meta


def _values_of_id_map(mapping: dict[str, Any]) -> list[Any]:
    # Some collections (business types) come back keyed by id instead of as a list.
    return [value for value in mapping.values() if isinstance(value, dict)]


def _to_int(value: Any) -> int | None:
    try:
        if value is None or value == "":
            return None
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "y", "on"}:
            return True
        if normalized in {"0", "false", "no", "n", "off"}:
            return False
    return None

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def clean_filters(filters: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in filters.items() if value not in (None, "")}


def parse_filter_assignment(raw: str) -> tuple[str, str] | None:
    if "=" not in raw:
        return None
    key, value = raw.split("=", 1)
    key = key.strip()
    if not key:
        return None
    return key, value.strip()

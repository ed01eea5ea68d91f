"""Cache key schema for list views.

Key format: ``{resource}|{k1}={v1}&{k2}={v2}``

Where:
- resource: the namespace invalidated as a whole after a mutation ("towns", "cities")
- params: pagination, filters and search term, empty values dropped, keys sorted
- keys and values are percent-encoded so no value can spell out another parameter set

A parameter set that cleans down to nothing yields the bare resource name.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

NAMESPACE_SEPARATOR = "|"


def build_cache_key(resource: str, params: Mapping[str, Any] | None = None) -> str:
    if not params:
        return resource
    cleaned = {str(key): value for key, value in params.items() if value is not None and value != ""}
    if not cleaned:
        return resource
    serialized = "&".join(f"{_encode(key)}={_encode(_canonical_value(cleaned[key]))}" for key in sorted(cleaned))
    return f"{resource}{NAMESPACE_SEPARATOR}{serialized}"


def belongs_to(key: str, resource: str) -> bool:
    return key == resource or key.startswith(f"{resource}{NAMESPACE_SEPARATOR}")


def _canonical_value(value: Any) -> str:
    # bool first: it is a subclass of int.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        return repr(value)


def _encode(text: str) -> str:
    return quote(text, safe="")

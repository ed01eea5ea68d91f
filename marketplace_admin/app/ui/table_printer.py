from __future__ import annotations

from typing import Any

EMPTY_VALUE = "-"
STATUS_VALUES = {"active", "inactive", "suspended", "pending", "rejected"}


def normalize_value(value: Any) -> str:
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, str):
        clean = value.strip()
        if not clean:
            return EMPTY_VALUE
        if clean.lower() in STATUS_VALUES:
            return clean.upper()
        return clean
    if isinstance(value, bool):
        return "ACTIVE" if value else "INACTIVE"
    if isinstance(value, dict):
        # Nested relations (a town's city, a store's owner) render by name.
        return normalize_value(value.get("enName") or value.get("name") or value.get("en_name") or value.get("id"))
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def print_table(title: str, rows: list[dict[str, Any]], columns: list[tuple[str, str]]) -> None:
    print(f"\n{title}")
    if not rows:
        print("(no results)")
        return

    widths = []
    for key, header in columns:
        max_cell = max(len(normalize_value(row.get(key))) for row in rows)
        widths.append(max(len(header), max_cell))

    print(" | ".join(header.ljust(widths[idx]) for idx, (_, header) in enumerate(columns)))
    print("-+-".join("-" * width for width in widths))
    for row in rows:
        print(" | ".join(normalize_value(row.get(key)).ljust(widths[idx]) for idx, (key, _) in enumerate(columns)))

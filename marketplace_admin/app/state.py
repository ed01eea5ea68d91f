from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any


@dataclass
class ListState:
    """What a list view renders: the last published value plus loading/error flags."""

    value: Any = None
    loading: bool = False
    error: Exception | None = None
    generation: int = 0
    updated_at: float | None = None

    def begin(self) -> None:
        self.loading = True
        self.error = None

    def publish(self, value: Any, generation: int) -> None:
        self.value = value
        self.generation = generation
        self.loading = False
        self.error = None
        self.updated_at = time.time()

    def fail(self, error: Exception) -> None:
        self.loading = False
        self.error = error

    @property
    def rows(self) -> list[dict[str, Any]]:
        if isinstance(self.value, dict) and isinstance(self.value.get("rows"), list):
            return self.value["rows"]
        if isinstance(self.value, list):
            return self.value
        return []

    @property
    def meta(self) -> dict[str, Any]:
        if not isinstance(self.value, dict):
            return {}
        return {key: value for key, value in self.value.items() if key != "rows"}


@dataclass
class SessionState:
    base_url: str | None = None
    role: str | None = None
    current_module: str = "main_menu"
    auth_rejected: bool = False

    def session_fingerprint(self) -> str:
        return f"{self.role or 'ANON'}:{self.base_url or 'NO_API'}"

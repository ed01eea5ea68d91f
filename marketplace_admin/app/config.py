from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from clients.marketplace_sdk.config import load_dotenv


@dataclass(frozen=True)
class AppConfig:
    cache_ttl_seconds: float
    debounce_ms: int
    page_size: int
    log_level: str
    role: str = "super_admin"

    @classmethod
    def from_env(cls, env_file: str = ".env") -> "AppConfig":
        load_dotenv(env_file)
        config = cls(
            cache_ttl_seconds=float(os.getenv("MARKETPLACE_CACHE_TTL_SECONDS", "300")),
            debounce_ms=int(os.getenv("MARKETPLACE_DEBOUNCE_MS", "500")),
            page_size=int(os.getenv("MARKETPLACE_PAGE_SIZE", "10")),
            log_level=os.getenv("MARKETPLACE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            role=os.getenv("MARKETPLACE_ROLE", "super_admin").strip().lower() or "super_admin",
        )
        config.validate()
        return config

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    def validate(self) -> None:
        if self.cache_ttl_seconds < 0:
            raise ValueError("MARKETPLACE_CACHE_TTL_SECONDS must be >= 0")
        if self.debounce_ms < 0:
            raise ValueError("MARKETPLACE_DEBOUNCE_MS must be >= 0")
        if self.page_size < 1:
            raise ValueError("MARKETPLACE_PAGE_SIZE must be >= 1")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"MARKETPLACE_LOG_LEVEL is not a logging level: {self.log_level}")

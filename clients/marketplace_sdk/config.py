from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "MARKETPLACE_"
DEFAULT_BASE_URL = "http://localhost:3001/api/v1/"
TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}
FALSE_VALUES = {"0", "false", "f", "no", "n", "off"}


@dataclass(frozen=True)
class SDKConfig:
    """Where the admin API lives and how hard to try reaching it."""

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0
    verify_ssl: bool = True
    retry_max_attempts: int = 3
    retry_backoff_ms: int = 250
    api_token: str | None = None

    @classmethod
    def from_env(cls, env_file: str = ".env") -> "SDKConfig":
        load_dotenv(env_file)
        base_url = _env("BASE_URL").strip() or DEFAULT_BASE_URL
        return cls(
            base_url=base_url if base_url.endswith("/") else f"{base_url}/",
            timeout_seconds=float(_env("TIMEOUT_SECONDS", "30")),
            verify_ssl=parse_bool(_env("VERIFY_SSL", "true"), default=True),
            retry_max_attempts=max(1, int(_env("RETRY_MAX_ATTEMPTS", "3"))),
            retry_backoff_ms=max(0, int(_env("RETRY_BACKOFF_MS", "250"))),
            api_token=_env("API_TOKEN").strip() or None,
        )

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_token}"} if self.api_token else {}


def _env(name: str, default: str = "") -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def parse_bool(value: str | bool | None, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower() if value is not None else ""
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return default


def load_dotenv(path: str) -> None:
    """Copy ``KEY=value`` lines from ``path`` into the environment; variables already set win."""
    dotenv_path = Path(path)
    if not dotenv_path.exists():
        return
    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        key, sep, value = raw_line.strip().partition("=")
        if not sep or key.startswith("#"):
            continue
        os.environ.setdefault(key.strip(), value.strip().strip('"').strip("'"))

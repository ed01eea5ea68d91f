import os

import pytest

from clients.marketplace_sdk.config import SDKConfig, parse_bool

from marketplace_admin.app.config import AppConfig

APP_KEYS = [
    "MARKETPLACE_CACHE_TTL_SECONDS",
    "MARKETPLACE_DEBOUNCE_MS",
    "MARKETPLACE_PAGE_SIZE",
    "MARKETPLACE_LOG_LEVEL",
    "MARKETPLACE_ROLE",
]
SDK_KEYS = [
    "MARKETPLACE_BASE_URL",
    "MARKETPLACE_TIMEOUT_SECONDS",
    "MARKETPLACE_VERIFY_SSL",
    "MARKETPLACE_RETRY_MAX_ATTEMPTS",
    "MARKETPLACE_RETRY_BACKOFF_MS",
    "MARKETPLACE_API_TOKEN",
]


def _clear(monkeypatch, keys) -> None:
    for key in keys:
        monkeypatch.delenv(key, raising=False)


def test_app_config_defaults(monkeypatch) -> None:
    _clear(monkeypatch, APP_KEYS)

    config = AppConfig.from_env(".missing-env")

    assert config.cache_ttl_seconds == 300
    assert config.debounce_ms == 500
    assert config.debounce_seconds == 0.5
    assert config.page_size == 10
    assert config.log_level == "INFO"
    assert config.role == "super_admin"


def test_app_config_validation(monkeypatch) -> None:
    _clear(monkeypatch, APP_KEYS)
    monkeypatch.setenv("MARKETPLACE_PAGE_SIZE", "0")

    with pytest.raises(ValueError):
        AppConfig.from_env(".missing-env")


def test_app_config_rejects_unknown_log_level(monkeypatch) -> None:
    _clear(monkeypatch, APP_KEYS)
    monkeypatch.setenv("MARKETPLACE_LOG_LEVEL", "chatty")

    with pytest.raises(ValueError):
        AppConfig.from_env(".missing-env")


def test_sdk_config_defaults(monkeypatch) -> None:
    _clear(monkeypatch, SDK_KEYS)

    config = SDKConfig.from_env(".missing-env")

    assert config.base_url == "http://localhost:3001/api/v1/"
    assert config.retry_max_attempts == 3
    assert config.verify_ssl is True
    assert config.api_token is None


def test_sdk_config_reads_dotenv_without_overriding_environment(tmp_path, monkeypatch) -> None:
    # .env values land in the process environment, so load them into a throwaway copy.
    monkeypatch.setattr(os, "environ", {key: value for key, value in os.environ.items() if key not in SDK_KEYS})
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# local api\nMARKETPLACE_BASE_URL=\"https://admin.example.com/api/v1\"\nMARKETPLACE_VERIFY_SSL=no\nMARKETPLACE_RETRY_MAX_ATTEMPTS=5\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("MARKETPLACE_RETRY_MAX_ATTEMPTS", "2")

    config = SDKConfig.from_env(str(env_file))

    assert config.base_url == "https://admin.example.com/api/v1/"
    assert config.verify_ssl is False
    assert config.retry_max_attempts == 2


def test_parse_bool() -> None:
    assert parse_bool("YES") is True
    assert parse_bool("off") is False
    assert parse_bool("maybe", default=False) is False
    assert parse_bool(None) is True


def test_auth_headers_only_carry_a_configured_token() -> None:
    assert SDKConfig(api_token="t-1").auth_headers() == {"Authorization": "Bearer t-1"}
    assert SDKConfig().auth_headers() == {}

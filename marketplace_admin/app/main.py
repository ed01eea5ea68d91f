from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from clients.marketplace_sdk.config import SDKConfig
from clients.marketplace_sdk.errors import ApiError

from marketplace_admin.app.admin_console import AdminConsole
from marketplace_admin.app.config import AppConfig
from marketplace_admin.app.container import AppContainer
from marketplace_admin.app.infrastructure.logging.logger import get_logger, log_action, set_log_level
from marketplace_admin.app.state import SessionState

logger = get_logger("marketplace_admin.main")


def _print_runtime_config(config: AppConfig, sdk_config: SDKConfig) -> None:
    print("Marketplace admin console")
    print(f"Base URL: {sdk_config.base_url}")
    print(f"Timeout: {sdk_config.timeout_seconds}s")
    print(f"GET retry: {sdk_config.retry_max_attempts} attempts, base backoff {sdk_config.retry_backoff_ms}ms")
    print(f"Verify SSL: {sdk_config.verify_ssl}")
    print(f"Cache TTL: {config.cache_ttl_seconds}s, search debounce: {config.debounce_ms}ms, page size: {config.page_size}")


def auth_error_handler(session: SessionState) -> Callable[[ApiError], None]:
    def _handle(error: ApiError) -> None:
        log_action(
            logger,
            module=session.current_module,
            action="auth_error",
            outcome="denied",
            level=logging.WARNING,
            status_code=error.status_code,
        )
        if session.auth_rejected:
            return
        session.auth_rejected = True
        print(f"[auth] The API refused MARKETPLACE_API_TOKEN ({error.status_code}). Set a valid token and restart the console.")

    return _handle


async def run_cli(container: AppContainer, session: SessionState) -> None:
    console = AdminConsole(container, session)
    container.http.register_auth_error_handler(auth_error_handler(session))
    log_action(logger, module="main", action="start", outcome="ok", session=session.session_fingerprint())
    try:
        await console.run()
    finally:
        await container.aclose()
        log_action(logger, module="main", action="stop", outcome="ok")


def main() -> None:
    config = AppConfig.from_env()
    sdk_config = SDKConfig.from_env()
    set_log_level(config.log_level)
    _print_runtime_config(config, sdk_config)

    container = AppContainer.build(config=config, sdk_config=sdk_config)
    session = SessionState(base_url=sdk_config.base_url, role=config.role)
    try:
        asyncio.run(run_cli(container, session))
    except KeyboardInterrupt:
        print("\nBye.")


if __name__ == "__main__":
    main()

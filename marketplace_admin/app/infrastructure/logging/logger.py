import json
import logging
from datetime import datetime, timezone
from typing import Any

SENSITIVE_FIELDS = {"token", "api_token", "access_token", "password", "secret"}


def get_logger(name: str, level: int | str = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    outcome: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    if not logger.isEnabledFor(level):
        return
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": logging.getLevelName(level),
        "module": module,
        "action": action,
        "outcome": outcome,
    }
    for key, value in fields.items():
        if key.lower() in SENSITIVE_FIELDS:
            continue
        payload[key] = value
    logger.log(level, json.dumps(payload, default=str))


def set_log_level(level: int | str, prefix: str = "marketplace_admin") -> None:
    for name, logger in logging.root.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and (name == prefix or name.startswith(prefix + ".")):
            logger.setLevel(level)

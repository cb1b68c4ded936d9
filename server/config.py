from __future__ import annotations

import logging
import os
from typing import Any, Dict

from dotenv import load_dotenv

from shared.protocol.errors import InvalidAddress, InvalidHandle
from shared.protocol.validator import validate_handle, validate_port

DEFAULT_SERVER_CONFIG: Dict[str, Any] = {
    "host": "0.0.0.0",
    "port": 30020,
    "handle": "chatserve",
    "backlog": 1,
    "log_level": "INFO",
}

SERVER_CONFIG = DEFAULT_SERVER_CONFIG.copy()


class ConfigError(Exception):
    """Raised when configuration values are invalid."""


def load_server_config(env_path: str = ".env") -> Dict[str, Any]:
    if os.path.exists(env_path):
        load_dotenv(env_path)
    SERVER_CONFIG["host"] = os.getenv("SERVER_HOST", DEFAULT_SERVER_CONFIG["host"])
    SERVER_CONFIG["handle"] = os.getenv("SERVER_HANDLE", DEFAULT_SERVER_CONFIG["handle"])
    SERVER_CONFIG["log_level"] = os.getenv("SERVER_LOG_LEVEL", DEFAULT_SERVER_CONFIG["log_level"]).upper()
    try:
        SERVER_CONFIG["port"] = validate_port(os.getenv("SERVER_PORT", DEFAULT_SERVER_CONFIG["port"]))
        SERVER_CONFIG["handle"] = validate_handle(SERVER_CONFIG["handle"])
        SERVER_CONFIG["backlog"] = int(os.getenv("SERVER_BACKLOG", DEFAULT_SERVER_CONFIG["backlog"]))
    except (InvalidAddress, InvalidHandle) as exc:
        raise ConfigError(f"Invalid server configuration: {exc.message}") from exc
    except ValueError as exc:
        raise ConfigError(f"SERVER_BACKLOG must be an integer: {exc}") from exc
    if SERVER_CONFIG["backlog"] < 1:
        raise ConfigError("SERVER_BACKLOG must be positive")
    if not isinstance(logging.getLevelName(SERVER_CONFIG["log_level"]), int):
        raise ConfigError(f"Unknown SERVER_LOG_LEVEL {SERVER_CONFIG['log_level']}")
    return SERVER_CONFIG


__all__ = ["SERVER_CONFIG", "DEFAULT_SERVER_CONFIG", "ConfigError", "load_server_config"]

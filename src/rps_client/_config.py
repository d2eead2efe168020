# Area: Shared
"""
rps_client._config — Client Configuration
=========================================

Loads configuration from an optional JSON file, then environment
variables (a .env file in the working directory is read first), and
validates the server address.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from ._shared.logging_config import DEFAULT_LOG_FILE
from ._shared.transport import DEFAULT_CONNECT_TIMEOUT
from .errors import ConfigError

logger = logging.getLogger("rps_client.config")

DEFAULT_SERVER = "localhost:8080"
WS_PATH = "/ws"
ALLOWED_SCHEMES = ("ws", "wss")

DEFAULTS: Dict[str, Any] = {
    "server": DEFAULT_SERVER,
    "server_url": None,
    "player_name": None,
    "connect_timeout": DEFAULT_CONNECT_TIMEOUT,
    "log_file": DEFAULT_LOG_FILE,
    "force_insecure": False,
}

# Environment variable -> config key
ENV_MAPPINGS = {
    "RPS_SERVER": "server",
    "RPS_SERVER_URL": "server_url",
    "RPS_PLAYER_NAME": "player_name",
    "RPS_CONNECT_TIMEOUT": "connect_timeout",
    "RPS_LOG_FILE": "log_file",
    "RPS_FORCE_HTTP": "force_insecure",
}

_TRUE_VALUES = ("true", "1", "yes")


def load_config(
    config_path: Optional[str] = None,
    env_file: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Load config from defaults, a JSON file and the environment.

    Later sources win: defaults < config file < environment.

    Args:
        config_path: Optional JSON config file
        env_file: Optional .env file (defaults to the nearest .env python-dotenv finds)

    Raises:
        ConfigError: If the file is unreadable or a value has the wrong type
    """
    load_dotenv(dotenv_path=env_file)
    config: Dict[str, Any] = dict(DEFAULTS)

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError("config", f"file not found: {config_path}")
        try:
            with open(path, encoding="utf-8") as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError("config", f"invalid JSON in {config_path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError("config", f"cannot read {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(
                "config", f"{config_path} must hold a JSON object, got {type(file_config).__name__}"
            )
        config.update(file_config)
        logger.debug(f"Loaded config from {path}")

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            config[config_key] = os.environ[env_key]

    config["connect_timeout"] = _as_timeout(config["connect_timeout"])
    config["force_insecure"] = _as_bool(config["force_insecure"])
    return config


def build_server_url(server: str, force_insecure: bool = False) -> str:
    """
    Build the WebSocket url for a host[:port].

    Local and dot-less hosts use ws://, anything else wss:// unless
    force_insecure is set. A value that already has a scheme is returned
    unchanged.
    """
    if "://" in server:
        return server
    host = server.split(":", 1)[0]
    secure = (
        not force_insecure
        and "." in host
        and not host.startswith("localhost")
        and not host.startswith("127.0.0.1")
    )
    scheme = "wss" if secure else "ws"
    return f"{scheme}://{server}{WS_PATH}"


def validate_server_url(url: str) -> str:
    """
    Check that url is a ws:// or wss:// address with a host.

    Raises:
        ConfigError: If the url is not usable
    """
    parsed = urlparse(url or "")
    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ConfigError("server_url", f"scheme must be ws or wss, got '{url}'")
    if not parsed.hostname:
        raise ConfigError("server_url", f"missing host in '{url}'")
    return url


def resolve_server_url(config: Dict[str, Any]) -> str:
    """Return the validated server url from server_url or server."""
    url = config.get("server_url") or build_server_url(
        config.get("server") or DEFAULT_SERVER,
        force_insecure=config.get("force_insecure", False),
    )
    return validate_server_url(url)


def _as_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError("connect_timeout", f"not a number: {value!r}") from None
    if timeout <= 0:
        raise ConfigError("connect_timeout", "must be positive")
    return timeout


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)

"""Runtime configuration for cdyouth-mcp.

Values come from the environment; ``main_mcp`` lets command-line flags
override them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from cdyouth_mcp.exceptions import ConfigurationError

BASE_URL = "https://cdyouth.cdcyl.org.cn"
TARGET_URL = f"{BASE_URL}/jgc/"

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_FETCH_TIMEOUT = 20.0

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Config:
    """Server configuration.

    Attributes:
        host: Address uvicorn binds to
        port: Listen port (``PORT``)
        log_level: Logger level name
        target_url: Activity listing page
        fetch_timeout: Seconds before the page fetch is aborted
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    target_url: str = TARGET_URL
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build a Config from environment variables.

        Raises:
            ConfigurationError: If a variable holds an unusable value
        """
        env = os.environ if environ is None else environ

        port = _parse_int(env, "PORT", DEFAULT_PORT)
        if not 0 < port < 65536:
            raise ConfigurationError(
                "INVALID_PORT",
                f"PORT must be between 1 and 65535, got {port}",
                {"variable": "PORT", "value": port},
            )

        log_level = env.get("CDYOUTH_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigurationError(
                "INVALID_LOG_LEVEL",
                f"CDYOUTH_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}",
                {"variable": "CDYOUTH_LOG_LEVEL", "value": log_level},
            )

        timeout = _parse_float(env, "CDYOUTH_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT)
        if timeout <= 0:
            raise ConfigurationError(
                "INVALID_TIMEOUT",
                f"CDYOUTH_FETCH_TIMEOUT must be positive, got {timeout}",
                {"variable": "CDYOUTH_FETCH_TIMEOUT", "value": timeout},
            )

        return cls(
            host=env.get("CDYOUTH_HOST", DEFAULT_HOST),
            port=port,
            log_level=log_level,
            target_url=env.get("CDYOUTH_TARGET_URL", TARGET_URL),
            fetch_timeout=timeout,
        )


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            "INVALID_INTEGER",
            f"{name} must be an integer, got {raw!r}",
            {"variable": name, "value": raw},
        ) from e


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(
            "INVALID_NUMBER",
            f"{name} must be a number, got {raw!r}",
            {"variable": name, "value": raw},
        ) from e

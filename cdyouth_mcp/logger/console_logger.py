"""Structured console logger.

Messages are plain strings; context is passed as keyword arguments and
rendered as ``key=value`` pairs after the message.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from typing import Any, Optional

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def resolve_level(level: int | str, default: int = logging.INFO) -> int:
    """Map a level name such as ``"debug"`` to its logging constant."""
    if isinstance(level, int):
        return level
    return _LEVELS.get(level.strip().upper(), default)


class Logger(ABC):
    """Interface every logger in the project implements."""

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None: ...

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None: ...

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None: ...

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None: ...

    @abstractmethod
    def critical(self, message: str, **kwargs: Any) -> None: ...


class ConsoleLogger(Logger):
    """Logger writing to stderr through the standard logging module.

    Example:
        logger = ConsoleLogger(name="cdyouth-mcp", level=logging.INFO)
        logger.info("Fetch completed", url=url, status=200)
        # 2026-01-01 12:00:00 INFO [cdyouth-mcp] Fetch completed url=... status=200
    """

    FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

    def __init__(
        self,
        name: str = "cdyouth-mcp",
        level: int = logging.INFO,
        stream: Optional[Any] = None,
    ):
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler(stream or sys.stderr)
            handler.setFormatter(logging.Formatter(self.FORMAT))
            self._logger.addHandler(handler)

    @property
    def level(self) -> int:
        return self._logger.level

    def set_level(self, level: int | str) -> None:
        """Change the level at runtime (e.g. from --log-level)."""
        self._logger.setLevel(resolve_level(level))

    @staticmethod
    def _format(message: str, kwargs: dict[str, Any]) -> str:
        if not kwargs:
            return message
        context = " ".join(f"{key}={value}" for key, value in kwargs.items())
        return f"{message} {context}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._format(message, kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._format(message, kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._format(message, kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(self._format(message, kwargs))

    def critical(self, message: str, **kwargs: Any) -> None:
        self._logger.critical(self._format(message, kwargs))

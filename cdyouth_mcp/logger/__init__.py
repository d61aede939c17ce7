"""Logger module for cdyouth-mcp

Usage:
    from cdyouth_mcp.logger import session_logger as logger

    logger.info("Fetch completed", url=url, status=200)

    # Or implement your own
    class MyCustomLogger(Logger):
        def info(self, message: str, **kwargs):
            # Your custom implementation
            pass
"""

import os

from .console_logger import ConsoleLogger, Logger, resolve_level

# Shared logger instance for modules that just need basic console logging
session_logger: ConsoleLogger = ConsoleLogger(
    level=resolve_level(os.environ.get("CDYOUTH_LOG_LEVEL", "INFO"))
)

__all__ = [
    "Logger",
    "ConsoleLogger",
    "resolve_level",
    "session_logger",
]

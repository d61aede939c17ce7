"""cdyouth-mcp server entry point."""

import argparse
import sys

import uvicorn

from cdyouth_mcp.config import Config
from cdyouth_mcp.exceptions import ConfigurationError
from cdyouth_mcp.logger import Logger, session_logger
from cdyouth_mcp.mcp_server.mcp_server import HEALTH_PATH, SSE_PATH, create_app
from cdyouth_mcp.scraping import configure_fetcher

logger: Logger = session_logger


def parse_args(argv=None, config: Config = Config()) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chengdu youth activities MCP server (SSE transport)")
    parser.add_argument(
        "--host",
        type=str,
        default=config.host,
        help=f"Host address to bind to (default: {config.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.port,
        help=f"Port number to listen on (from PORT env var, default: {config.port})",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=config.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"Log level (from CDYOUTH_LOG_LEVEL env var, default: {config.log_level})",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    try:
        config = Config.from_env()
    except ConfigurationError as e:
        logger.error("FATAL: Invalid configuration", error=str(e))
        return 1

    args = parse_args(argv, config)
    session_logger.set_level(args.log_level)
    configure_fetcher(url=config.target_url, timeout=config.fetch_timeout)

    logger.info("=" * 70)
    logger.info("STARTING CHENGDU YOUTH ACTIVITIES MCP SERVER")
    logger.info("=" * 70)
    logger.info(
        "Configuration",
        host=args.host,
        port=args.port,
        target_url=config.target_url,
        fetch_timeout=config.fetch_timeout,
    )
    logger.info(f"MCP SSE server listening on http://localhost:{args.port}{SSE_PATH}")
    logger.info(f"Health check: http://localhost:{args.port}{HEALTH_PATH}")
    logger.info("=" * 70)

    try:
        uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level.lower())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error("Failed to start server", error=str(e), error_type=type(e).__name__)
        return 1
    logger.info("Server shutdown complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())

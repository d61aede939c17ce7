"""HTTP fetcher for the activity listing page.

This module performs a single async GET of the listing page with a fixed
header set and a total timeout. Failures of any kind surface as
``NetworkError``; there are no retries.
"""

from __future__ import annotations

import asyncio
from typing import Dict, Optional

import aiohttp

from cdyouth_mcp.config import BASE_URL, DEFAULT_FETCH_TIMEOUT, TARGET_URL
from cdyouth_mcp.exceptions import NetworkError
from cdyouth_mcp.logger import session_logger as logger

USER_AGENT = f"mcp-chengdu-youth-activities/1.1 (+{BASE_URL})"


def build_headers(url: str = TARGET_URL) -> Dict[str, str]:
    """Return the request headers sent with every listing fetch.

    Args:
        url: The page being fetched, echoed back as the Referer
    """
    return {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml",
        "Accept-Language": "zh-CN,zh;q=0.9",
        "Cache-Control": "no-cache",
        "Referer": url,
    }


class HTTPFetcher:
    """Async fetcher for the activity listing page.

    Example:
        fetcher = HTTPFetcher()
        html = await fetcher.fetch_page()
    """

    def __init__(
        self,
        url: str = TARGET_URL,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
    ):
        """Initialize the HTTP fetcher.

        Args:
            url: Page to fetch
            timeout: Total request timeout in seconds
        """
        self.url = url
        self.timeout = timeout
        self.headers = build_headers(url)

    async def fetch_page(self) -> str:
        """Fetch the listing page and return its body.

        Returns:
            The decoded HTML document

        Raises:
            NetworkError: On non-2xx status, transport failure or timeout
        """
        logger.debug("Fetching URL", url=self.url, headers=list(self.headers.keys()))

        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.url, headers=self.headers) as response:
                    if not 200 <= response.status < 300:
                        logger.error("Fetch returned error status", url=self.url, status=response.status)
                        raise NetworkError(
                            f"HTTP {response.status} {response.reason or ''}".rstrip(),
                            {"url": self.url, "status_code": response.status, "reason": "http_status"},
                        )

                    encoding = response.charset or "utf-8"
                    content = await response.text(encoding=encoding, errors="replace")

                    logger.info(
                        "Fetch completed",
                        url=self.url,
                        status=response.status,
                        content_length=len(content),
                    )
                    return content

        # aiohttp's timeout errors are also ClientErrors, so this must come first
        except asyncio.TimeoutError as e:
            logger.error("Fetch timeout", url=self.url, timeout=self.timeout)
            raise NetworkError(
                f"Request timed out after {self.timeout} seconds",
                {"url": self.url, "timeout": self.timeout, "reason": "timeout"},
            ) from e
        except aiohttp.ClientError as e:
            logger.error("Fetch failed", url=self.url, error=str(e))
            raise NetworkError(
                f"HTTP error: {str(e)}",
                {"url": self.url, "reason": "transport"},
            ) from e


# Global fetcher instance
_fetcher: Optional[HTTPFetcher] = None


def get_fetcher() -> HTTPFetcher:
    """Get the global HTTP fetcher instance.

    Returns:
        HTTPFetcher: The global fetcher
    """
    global _fetcher
    if _fetcher is None:
        _fetcher = HTTPFetcher()
    return _fetcher


def configure_fetcher(url: str = TARGET_URL, timeout: float = DEFAULT_FETCH_TIMEOUT) -> HTTPFetcher:
    """Replace the global fetcher, e.g. with values from Config."""
    global _fetcher
    _fetcher = HTTPFetcher(url=url, timeout=timeout)
    return _fetcher


def reset_fetcher() -> None:
    """Drop the global fetcher so the next call builds a default one.

    Useful for testing and cleanup.
    """
    global _fetcher
    _fetcher = None


async def fetch_page() -> str:
    """Convenience function to fetch the listing page with the global fetcher."""
    return await get_fetcher().fetch_page()

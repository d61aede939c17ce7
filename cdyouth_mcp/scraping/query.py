"""Activity query: fetch the listing page, extract records, apply a limit."""

from __future__ import annotations

from typing import List, Optional

from cdyouth_mcp.logger import session_logger as logger
from cdyouth_mcp.scraping.extractor import Activity, ActivityExtractor, get_extractor
from cdyouth_mcp.scraping.fetcher import HTTPFetcher, get_fetcher


class ActivityQuery:
    """Compose the fetcher and extractor.

    ``limit`` is trusted here; range checks happen at the tool boundary.
    Fetch and parse errors propagate unchanged.
    """

    def __init__(
        self,
        fetcher: Optional[HTTPFetcher] = None,
        extractor: Optional[ActivityExtractor] = None,
    ):
        self._fetcher = fetcher
        self._extractor = extractor

    @property
    def fetcher(self) -> HTTPFetcher:
        return self._fetcher or get_fetcher()

    @property
    def extractor(self) -> ActivityExtractor:
        return self._extractor or get_extractor()

    async def get_activities(self, limit: Optional[int] = None) -> List[Activity]:
        """Return the current activities, truncated to the first ``limit`` items."""
        html = await self.fetcher.fetch_page()
        activities = self.extractor.extract(html)
        if limit is not None:
            activities = activities[:limit]
        logger.debug("Activity query finished", limit=limit, returned=len(activities))
        return activities


async def get_activities(limit: Optional[int] = None) -> List[Activity]:
    """Convenience function using the global fetcher and extractor."""
    return await ActivityQuery().get_activities(limit)

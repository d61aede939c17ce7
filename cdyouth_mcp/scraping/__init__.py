"""Scraping module for cdyouth-mcp.

This module fetches the Chengdu youth activity listing, extracts activity
records with BeautifulSoup, and composes both into the activity query.
"""

from cdyouth_mcp.scraping.extractor import (
    Activity,
    ActivityExtractor,
    absolute_url,
    clean_text,
    extract_activities,
    get_extractor,
    parse_hits,
)
from cdyouth_mcp.scraping.fetcher import (
    HTTPFetcher,
    build_headers,
    configure_fetcher,
    fetch_page,
    get_fetcher,
    reset_fetcher,
)
from cdyouth_mcp.scraping.query import ActivityQuery, get_activities

__all__ = [
    "Activity",
    "ActivityExtractor",
    "ActivityQuery",
    "HTTPFetcher",
    "absolute_url",
    "build_headers",
    "clean_text",
    "configure_fetcher",
    "extract_activities",
    "fetch_page",
    "get_activities",
    "get_extractor",
    "get_fetcher",
    "parse_hits",
    "reset_fetcher",
]

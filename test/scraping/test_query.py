"""Tests for the activity query (fetch + extract + limit)."""

import pytest

from cdyouth_mcp.exceptions import NetworkError, ParseError
from cdyouth_mcp.scraping import ActivityQuery, HTTPFetcher, configure_fetcher, get_activities


class StubFetcher:
    """Fetcher returning canned HTML and counting calls."""

    def __init__(self, html=None, error=None):
        self.html = html
        self.error = error
        self.calls = 0

    async def fetch_page(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.html


class TestActivityQuery:
    """Tests for ActivityQuery.get_activities."""

    @pytest.mark.asyncio
    async def test_no_limit_returns_all(self, listing_html):
        query = ActivityQuery(fetcher=StubFetcher(listing_html))

        activities = await query.get_activities()

        assert len(activities) == 10

    @pytest.mark.asyncio
    async def test_limit_returns_prefix_in_order(self, listing_html):
        query = ActivityQuery(fetcher=StubFetcher(listing_html))

        everything = await query.get_activities()
        first_three = await query.get_activities(limit=3)

        assert len(first_three) == 3
        assert [a.title for a in first_three] == [a.title for a in everything[:3]]

    @pytest.mark.asyncio
    async def test_limit_larger_than_page(self, listing_html):
        query = ActivityQuery(fetcher=StubFetcher(listing_html))
        assert len(await query.get_activities(limit=100)) == 10

    @pytest.mark.asyncio
    async def test_network_error_propagates(self):
        error = NetworkError("HTTP 502 Bad Gateway", {"reason": "http_status", "status_code": 502})
        query = ActivityQuery(fetcher=StubFetcher(error=error))

        with pytest.raises(NetworkError) as exc_info:
            await query.get_activities(limit=3)

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_parse_error_propagates(self):
        query = ActivityQuery(fetcher=StubFetcher(html=b"not text"))

        with pytest.raises(ParseError):
            await query.get_activities()

    @pytest.mark.asyncio
    async def test_each_call_refetches(self, listing_html):
        fetcher = StubFetcher(listing_html)
        query = ActivityQuery(fetcher=fetcher)

        await query.get_activities()
        await query.get_activities()

        assert fetcher.calls == 2


class TestQueryAgainstFixtureServer:
    """End-to-end query over HTTP."""

    @pytest.mark.asyncio
    async def test_query_over_http(self, html_fixture_server):
        query = ActivityQuery(fetcher=HTTPFetcher(url=html_fixture_server.listing_url))

        activities = await query.get_activities(limit=2)

        assert [a.title for a in activities] == ["周末亲子阅读会", "青年创业沙龙"]

    @pytest.mark.asyncio
    async def test_module_helper_uses_global_fetcher(self, html_fixture_server):
        configure_fetcher(url=html_fixture_server.listing_url)

        activities = await get_activities()

        assert len(activities) == 10

"""Activity extraction using BeautifulSoup.

This module turns the listing page HTML into ``Activity`` records. Every
list item under the result container yields one record; fields that are
missing from an item degrade to ``None`` instead of failing the page.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from cdyouth_mcp.config import BASE_URL
from cdyouth_mcp.exceptions import ParseError
from cdyouth_mcp.logger import session_logger as logger

# Selectors for the listing page structure
LIST_ITEM_SELECTOR = "#main_list_result > li"
TITLE_LINK_SELECTOR = ".txt2 h2 a"
IMAGE_LINK_SELECTOR = ".img a"
TAG_SELECTOR = "span"
AREA_SELECTOR = ".area"
VENUE_SELECTOR = ".txt2 h3"
DETAILS_SELECTOR = ".txt2 h4"
DETAILS_STRIP_SELECTOR = "a, em"
STATUS_SELECTOR = ".txt2 h4 a"
HITS_SELECTOR = ".hits"
IMAGE_SELECTOR = ".img_con img"

UNTITLED_PLACEHOLDER = "(未命名活动)"

_WHITESPACE_RE = re.compile(r"\s+")
_NON_DIGIT_RE = re.compile(r"[^0-9]")
_ACTIVITY_ID_RE = re.compile(r"/activity/(\d+)")


@dataclass
class Activity:
    """One entry of the activity listing.

    Attributes:
        title: Activity title, or the untitled placeholder
        tags: Tag label shown inside the title link
        area: District label
        venue: Venue heading
        date_time_text: Free-form date/time line
        status: Enrolment status link text
        hits: View count
        url: Absolute detail page URL
        activity_id: Numeric id taken from the detail URL
        image: Absolute cover image URL
        zhijia_id: ``zhijiaid`` attribute of the venue heading
    """

    title: str
    tags: Optional[str] = None
    area: Optional[str] = None
    venue: Optional[str] = None
    date_time_text: Optional[str] = None
    status: Optional[str] = None
    hits: Optional[int] = None
    url: Optional[str] = None
    activity_id: Optional[str] = None
    image: Optional[str] = None
    zhijia_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the fields exposed by the fetch_activities tool."""
        return {
            "title": self.title,
            "tags": self.tags,
            "area": self.area,
            "venue": self.venue,
            "dateTimeText": self.date_time_text,
            "status": self.status,
            "hits": self.hits,
        }


def clean_text(value: Optional[str]) -> Optional[str]:
    """Collapse whitespace runs and trim; blank or missing text becomes None."""
    if value is None:
        return None
    cleaned = _WHITESPACE_RE.sub(" ", value).strip()
    return cleaned or None


def absolute_url(value: Optional[str], base: str = BASE_URL) -> Optional[str]:
    """Resolve a link against the site base.

    Scheme-relative URLs get ``https:``; relative paths are joined to ``base``.
    """
    if not value:
        return None
    if value.startswith(("http://", "https://")):
        return value
    if value.startswith("//"):
        return f"https:{value}"
    return urljoin(base, value)


def parse_hits(value: Optional[str]) -> Optional[int]:
    """Keep only the digits of a view counter, e.g. ``浏览1,234次`` -> 1234."""
    if value is None:
        return None
    digits = _NON_DIGIT_RE.sub("", value)
    return int(digits) if digits else None


def activity_id_from_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    match = _ACTIVITY_ID_RE.search(url)
    return match.group(1) if match else None


class ActivityExtractor:
    """Extract Activity records from the listing page.

    Example:
        extractor = ActivityExtractor()
        activities = extractor.extract(html)
        print(activities[0].title)
    """

    def __init__(self, parser: str = "html.parser", base_url: str = BASE_URL):
        """Initialize the extractor.

        Args:
            parser: BeautifulSoup parser to use
            base_url: Site base for resolving relative links
        """
        self.parser = parser
        self.base_url = base_url

    def extract(self, html: str) -> List[Activity]:
        """Extract all activities in document order.

        Args:
            html: The listing page

        Returns:
            One Activity per list item; items that fail to read are skipped

        Raises:
            ParseError: If the document cannot be parsed at all
        """
        if not isinstance(html, str):
            raise ParseError(
                f"Expected HTML text, got {type(html).__name__}",
                {"type": type(html).__name__},
            )

        try:
            soup = BeautifulSoup(html, self.parser)
        except Exception as e:
            logger.error("Failed to parse HTML", error=str(e))
            raise ParseError(f"Parse error: {str(e)}", {"parser": self.parser}) from e

        items = soup.select(LIST_ITEM_SELECTOR)
        activities: List[Activity] = []
        skipped = 0
        for index, item in enumerate(items):
            try:
                activities.append(self._extract_item(item))
            except Exception as e:
                skipped += 1
                logger.warning("Skipping unreadable list item", index=index, error=str(e))

        logger.info("Activities extracted", items=len(items), activities=len(activities), skipped=skipped)
        return activities

    def _extract_item(self, item: Tag) -> Activity:
        """Derive one record from a list item."""
        href = _first_attr(item, TITLE_LINK_SELECTOR, "href") or _first_attr(item, IMAGE_LINK_SELECTOR, "href")
        url = absolute_url(href, self.base_url)

        title_links = [copy.copy(node) for node in item.select(TITLE_LINK_SELECTOR)]
        tag_nodes = [span for link in title_links for span in link.select(TAG_SELECTOR)]
        tags = clean_text(_joined_text(tag_nodes)) if tag_nodes else None
        for span in tag_nodes:
            span.decompose()
        title = clean_text(_joined_text(title_links)) or UNTITLED_PLACEHOLDER

        venue_nodes = item.select(VENUE_SELECTOR)

        details = [copy.copy(node) for node in item.select(DETAILS_SELECTOR)]
        for detail in details:
            for node in detail.select(DETAILS_STRIP_SELECTOR):
                node.decompose()

        hits_nodes = item.select(HITS_SELECTOR)

        return Activity(
            title=title,
            tags=tags,
            area=_selected_text(item, AREA_SELECTOR),
            venue=clean_text(_joined_text(venue_nodes)) if venue_nodes else None,
            date_time_text=clean_text(_joined_text(details)) if details else None,
            status=_selected_text(item, STATUS_SELECTOR),
            hits=parse_hits(_joined_text(hits_nodes)) if hits_nodes else None,
            url=url,
            activity_id=activity_id_from_url(url),
            image=absolute_url(_first_attr(item, IMAGE_SELECTOR, "src"), self.base_url),
            zhijia_id=_first_attr(item, VENUE_SELECTOR, "zhijiaid"),
        )


def _joined_text(nodes: List[Tag]) -> str:
    return "".join(node.get_text() for node in nodes)


def _selected_text(item: Tag, selector: str) -> Optional[str]:
    nodes = item.select(selector)
    if not nodes:
        return None
    return clean_text(_joined_text(nodes))


def _first_attr(item: Tag, selector: str, attr: str) -> Optional[str]:
    """Attribute of the first node matching selector, None when absent or empty."""
    node = item.select_one(selector)
    if node is None:
        return None
    value = node.get(attr)
    if isinstance(value, list):
        value = " ".join(value)
    return value or None


# Global extractor instance
_extractor: Optional[ActivityExtractor] = None


def get_extractor() -> ActivityExtractor:
    """Get the global extractor instance."""
    global _extractor
    if _extractor is None:
        _extractor = ActivityExtractor()
    return _extractor


def extract_activities(html: str) -> List[Activity]:
    """Convenience function to extract activities with the global extractor."""
    return get_extractor().extract(html)

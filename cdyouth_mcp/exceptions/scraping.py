"""Scraping exceptions for cdyouth-mcp.

Each exception includes root cause context and remediation guidance
to support structured error handling and actionable diagnostics.
"""

from typing import Any, Dict, Optional

from cdyouth_mcp.exceptions.base import ActivitiesError


class NetworkError(ActivitiesError):
    """Raised when the listing page could not be fetched.

    Root cause: non-2xx response, transport failure, or the request exceeded
    the fetch timeout. ``details["reason"]`` is one of ``http_status``,
    ``transport`` or ``timeout``.
    Remediation: check connectivity to the source site and try again later.
    """

    default_code = "NETWORK"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code=self.default_code, message=message, details=details)

    @property
    def reason(self) -> Optional[str]:
        return self.details.get("reason")


class ParseError(ActivitiesError):
    """Raised when the HTML document could not be parsed at all.

    Root cause: the fetched body is not a document the HTML parser can build
    a tree from. Missing fields inside a list item never raise this.
    Remediation: inspect the fetched body; the source page may have changed.
    """

    default_code = "PARSE"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code=self.default_code, message=message, details=details)

"""Project exception classes for cdyouth-mcp."""

from cdyouth_mcp.exceptions.base import (
    ActivitiesError,
    ConfigurationError,
    ResourceNotFoundError,
    ValidationError,
)
from cdyouth_mcp.exceptions.scraping import NetworkError, ParseError
from cdyouth_mcp.exceptions.session import SessionNotFoundError, ToolNotFoundError

__all__ = [
    "ActivitiesError",
    "ConfigurationError",
    "NetworkError",
    "ParseError",
    "ResourceNotFoundError",
    "SessionNotFoundError",
    "ToolNotFoundError",
    "ValidationError",
]

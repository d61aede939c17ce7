"""Base exception hierarchy for cdyouth-mcp.

Every error carries a machine-readable ``code``, a human-readable
``message`` and an optional ``details`` dict so that the MCP and web layers
can render structured error responses.
"""

from typing import Any, Dict, Optional


class ActivitiesError(Exception):
    """Base exception for all cdyouth-mcp errors."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"


class ValidationError(ActivitiesError):
    """Raised when tool input falls outside its declared schema."""

    pass


class ResourceNotFoundError(ActivitiesError):
    """Raised when a referenced resource (session, tool) does not exist."""

    pass


class ConfigurationError(ActivitiesError):
    """Raised when environment or command-line configuration is invalid."""

    pass

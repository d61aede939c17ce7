"""Error handling utilities for cdyouth-mcp."""

from cdyouth_mcp.errors.mapper import (
    RECOVERY_STRATEGIES,
    ErrorResponse,
    create_error_response,
    error_to_mcp_response,
    error_to_web_response,
    get_error_code,
    get_http_status,
    get_recovery_strategy,
)

__all__ = [
    "RECOVERY_STRATEGIES",
    "ErrorResponse",
    "create_error_response",
    "error_to_mcp_response",
    "error_to_web_response",
    "get_error_code",
    "get_http_status",
    "get_recovery_strategy",
]

"""Error response mapping for MCP and web interfaces.

Converts structured ActivitiesError exceptions into standardized error
responses with machine-readable error codes and recovery strategies.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from cdyouth_mcp.exceptions import (
    ActivitiesError,
    ResourceNotFoundError,
    SessionNotFoundError,
    ValidationError,
)
from cdyouth_mcp.logger import session_logger as logger


@dataclass
class ErrorResponse:
    """Structured error payload shared by the MCP and web renderers."""

    error_code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    recovery_strategy: str = ""


# Recovery strategy templates for the errors this server can produce
RECOVERY_STRATEGIES: Dict[str, str] = {
    # Fetch and parse errors
    "NETWORK": "Check network connectivity and that the activity site is online. Try again later.",
    "PARSE": "The listing page could not be parsed. The source site may have changed its layout.",

    # Input errors
    "VALIDATION": "Review the validation error details and correct the input. 'limit' must be an integer between 1 and 100.",

    # Session and protocol errors
    "SESSION_NOT_FOUND": "Open a new SSE connection on /sse and POST to the endpoint it announces.",
    "TOOL_NOT_FOUND": "Call tools/list to see the available tools. This server exposes 'fetch_activities'.",

    # Configuration errors
    "CONFIGURATION": "Check server configuration (PORT, CDYOUTH_* environment variables).",
}

# HTTP status for errors the POST /messages handler can return
HTTP_STATUS: Dict[type, int] = {
    SessionNotFoundError: 400,
}


def get_error_code(error: ActivitiesError) -> str:
    """Extract error code from exception class name.

    Converts class names like SessionNotFoundError to SESSION_NOT_FOUND.
    """
    name = error.__class__.__name__
    # Remove 'Error' suffix
    if name.endswith("Error"):
        name = name[:-5]
    # Convert CamelCase to UPPER_SNAKE_CASE
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.upper())
    return "".join(result)


def get_recovery_strategy(error_code: str, error: ActivitiesError) -> str:
    """Get recovery strategy for an error.

    Returns specific strategy if available, otherwise a generic one.
    """
    if error_code in RECOVERY_STRATEGIES:
        return RECOVERY_STRATEGIES[error_code]

    # Generic strategies based on error type
    if isinstance(error, ResourceNotFoundError):
        return "Verify the resource identifier and check that the resource exists."
    elif isinstance(error, ValidationError):
        return RECOVERY_STRATEGIES["VALIDATION"]

    return "Review the error message and try again. Contact support if the issue persists."


def get_http_status(error: ActivitiesError) -> int:
    """Most specific HTTP status registered for the error's class."""
    for klass in type(error).__mro__:
        if klass in HTTP_STATUS:
            return HTTP_STATUS[klass]
    return 500


def create_error_response(error: ActivitiesError) -> ErrorResponse:
    """Create a structured error response from an ActivitiesError.

    Args:
        error: The exception to convert

    Returns:
        ErrorResponse with error_code, message, details, and recovery_strategy
    """
    error_code = get_error_code(error)
    return ErrorResponse(
        error_code=error_code,
        message=error.message,
        details=dict(error.details),
        recovery_strategy=get_recovery_strategy(error_code, error),
    )


def error_to_mcp_response(error: ActivitiesError) -> Dict[str, Any]:
    """Convert error to MCP-compatible response format.

    Args:
        error: The exception to convert

    Returns:
        Dictionary suitable for an MCP tool error payload
    """
    response = create_error_response(error)
    logger.debug("Mapped error for MCP", error_code=response.error_code)
    return {
        "success": False,
        "error_code": response.error_code,
        "message": response.message,
        "details": response.details,
        "recovery_strategy": response.recovery_strategy,
    }


def error_to_web_response(error: ActivitiesError) -> Dict[str, Any]:
    """Convert error to web API response format.

    Args:
        error: The exception to convert

    Returns:
        Dictionary suitable for a Starlette JSONResponse
    """
    response = create_error_response(error)
    return {
        "error": {
            "code": response.error_code,
            "message": response.message,
            "details": response.details,
            "recovery": response.recovery_strategy,
        }
    }

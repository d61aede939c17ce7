"""Session-specific exceptions for cdyouth-mcp.

These exceptions provide typed, structured errors for the SSE session
table, enabling proper error classification in the MCP and web interfaces.
"""

from typing import Any, Dict, Optional

from cdyouth_mcp.exceptions.base import ResourceNotFoundError


class SessionNotFoundError(ResourceNotFoundError):
    """Raised when a POST references an unknown or already closed session."""

    def __init__(self, session_id: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            "SESSION_NOT_FOUND",
            f"No transport found for sessionId: {session_id or '<missing>'}",
            {"session_id": session_id, **(details or {})},
        )
        self.session_id = session_id


class ToolNotFoundError(ResourceNotFoundError):
    """Raised when a tool call names a tool this server does not expose."""

    def __init__(self, tool_name: str):
        super().__init__(
            "TOOL_NOT_FOUND",
            f"Unknown tool: {tool_name}",
            {"tool_name": tool_name},
        )
        self.tool_name = tool_name

"""MCP server, tool registration and SSE session transport."""

"""MCP server exposing the Chengdu youth activity listing as a tool."""

__version__ = "1.1.0"

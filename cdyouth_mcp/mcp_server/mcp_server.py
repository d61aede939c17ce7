"""Chengdu youth activities MCP server.

Exposes one tool, ``fetch_activities``, over the MCP SSE transport:
``GET /sse`` opens the push channel and ``POST /messages?sessionId=<id>``
carries client JSON-RPC messages.
"""

from __future__ import annotations

import contextlib
import json
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from mcp.server import Server
from mcp.types import CallToolResult, TextContent, Tool
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from cdyouth_mcp.config import TARGET_URL
from cdyouth_mcp.errors.mapper import error_to_mcp_response
from cdyouth_mcp.exceptions import ActivitiesError, ToolNotFoundError, ValidationError
from cdyouth_mcp.logger import session_logger as logger
from cdyouth_mcp.mcp_server.transport import SessionRouter, SseEndpoint
from cdyouth_mcp.scraping import ActivityQuery

SERVER_NAME = "chengdu-youth-activities"
SERVER_VERSION = "1.1.0"

FETCH_ACTIVITIES_TOOL = "fetch_activities"
MIN_LIMIT = 1
MAX_LIMIT = 100

SSE_PATH = "/sse"
MESSAGES_PATH = "/messages"
HEALTH_PATH = "/healthz"

app = Server(SERVER_NAME, version=SERVER_VERSION)

# Replaced in tests to point at a fixture server
activity_query = ActivityQuery()

_NULLABLE_STRING: Dict[str, Any] = {"type": ["string", "null"]}

ACTIVITY_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "tags": _NULLABLE_STRING,
        "area": _NULLABLE_STRING,
        "venue": _NULLABLE_STRING,
        "dateTimeText": _NULLABLE_STRING,
        "status": _NULLABLE_STRING,
        "hits": {"type": ["integer", "null"], "minimum": 0},
    },
    "required": ["title", "tags", "area", "venue", "dateTimeText", "status", "hits"],
}

FETCH_ACTIVITIES_INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "limit": {
            "type": "integer",
            "description": f"Return at most this many activities, in page order ({MIN_LIMIT}-{MAX_LIMIT}). Omit to return all.",
            "minimum": MIN_LIMIT,
            "maximum": MAX_LIMIT,
        },
    },
    "additionalProperties": False,
}

FETCH_ACTIVITIES_OUTPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "activities": {"type": "array", "items": ACTIVITY_SCHEMA},
        "count": {"type": "integer", "minimum": 0},
    },
    "required": ["activities", "count"],
}


def _json_text(data: Dict[str, Any]) -> TextContent:
    """Create JSON text content."""
    return TextContent(type="text", text=json.dumps(data, ensure_ascii=False, indent=2))


def validate_limit(arguments: Optional[Dict[str, Any]]) -> Optional[int]:
    """Validate fetch_activities arguments and return the limit.

    Raises:
        ValidationError: On unknown keys, a non-integer limit, or a limit
            outside 1-100
    """
    arguments = arguments or {}

    unknown = sorted(key for key in arguments if key != "limit")
    if unknown:
        raise ValidationError(
            "UNKNOWN_ARGUMENT",
            f"Unknown argument(s): {', '.join(unknown)}",
            {"unknown": unknown, "allowed": ["limit"]},
        )

    limit = arguments.get("limit")
    if limit is None:
        return None
    # bool is an int subclass
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValidationError(
            "INVALID_LIMIT",
            f"limit must be an integer, got {type(limit).__name__}",
            {"limit": limit},
        )
    if not MIN_LIMIT <= limit <= MAX_LIMIT:
        raise ValidationError(
            "INVALID_LIMIT",
            f"limit must be between {MIN_LIMIT} and {MAX_LIMIT}, got {limit}",
            {"limit": limit, "minimum": MIN_LIMIT, "maximum": MAX_LIMIT},
        )
    return limit


@app.list_tools()
async def handle_list_tools() -> List[Tool]:
    """List available tools."""
    return [
        Tool(
            name=FETCH_ACTIVITIES_TOOL,
            title="获取成都青年之家最新活动",
            description=f"""GET {TARGET_URL} and parse the "精彩活动" list into an array of activities.

RETURNS: {{activities: [{{title, tags, area, venue, dateTimeText, status, hits}}], count}}
Activities keep page order. Missing fields are null; hits is the view count.""",
            inputSchema=FETCH_ACTIVITIES_INPUT_SCHEMA,
            outputSchema=FETCH_ACTIVITIES_OUTPUT_SCHEMA,
        ),
    ]


def _exception_response(error: ActivitiesError) -> CallToolResult:
    """Convert ActivitiesError to an MCP error result.

    Args:
        error: The exception to convert

    Returns:
        ``isError`` result whose text is the JSON error payload
    """
    response = error_to_mcp_response(error)
    logger.warning("Tool exception", error_code=response["error_code"], error_message=response["message"])
    return CallToolResult(content=[_json_text(response)], isError=True)


# Input is checked by validate_limit, not by the SDK schema check
@app.call_tool(validate_input=False)
async def handle_call_tool(
    name: str, arguments: Dict[str, Any]
) -> Tuple[List[TextContent], Dict[str, Any]] | CallToolResult:
    """Handle tool invocations.

    Project errors come back as an ``isError`` result carrying error_code,
    details and recovery_strategy. Anything else propagates and is reported
    by the MCP server with its message only.
    """
    logger.info("Tool called", tool=name, args=arguments)

    try:
        if name == FETCH_ACTIVITIES_TOOL:
            return await _handle_fetch_activities(arguments)
        raise ToolNotFoundError(name)
    except ActivitiesError as e:
        return _exception_response(e)


async def _handle_fetch_activities(
    arguments: Optional[Dict[str, Any]],
) -> Tuple[List[TextContent], Dict[str, Any]]:
    """Handle the fetch_activities tool."""
    limit = validate_limit(arguments)

    activities = await activity_query.get_activities(limit)
    payload = {
        "activities": [activity.to_dict() for activity in activities],
        "count": len(activities),
    }

    logger.info("Activities returned", limit=limit, count=payload["count"])
    return [_json_text(payload)], payload


async def healthz(request: Request) -> PlainTextResponse:
    """Liveness check; no dependencies are probed."""
    return PlainTextResponse("ok")


def create_app(router: Optional[SessionRouter] = None, server: Server = app) -> Starlette:
    """Create the Starlette application.

    Args:
        router: Session table to use; a fresh one by default
        server: MCP server each SSE session runs

    Returns:
        Starlette app with the SSE, message and health routes and CORS
    """
    if router is None:
        router = SessionRouter(MESSAGES_PATH)

    @contextlib.asynccontextmanager
    async def lifespan(starlette_app: Starlette) -> AsyncIterator[None]:
        """Manage server lifecycle."""
        logger.info("Starting MCP SSE server", server=SERVER_NAME, version=SERVER_VERSION)
        yield
        logger.info("MCP SSE server stopped", open_sessions=len(router))

    routes = [
        Route(SSE_PATH, endpoint=SseEndpoint(router, server), methods=["GET"]),
        Route(MESSAGES_PATH, endpoint=router.handle_post_message, methods=["POST"]),
        Route(HEALTH_PATH, endpoint=healthz, methods=["GET"]),
    ]

    starlette_app = Starlette(debug=False, routes=routes, lifespan=lifespan)
    starlette_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "mcp-session-id"],
        expose_headers=["Mcp-Session-Id"],
    )
    starlette_app.state.session_router = router
    return starlette_app


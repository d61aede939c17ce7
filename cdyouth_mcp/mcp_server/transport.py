"""SSE session transport for the MCP server.

``SessionRouter`` owns the table of open server-sent-event connections.
Each ``GET /sse`` opens a session and announces its POST endpoint
(``/messages?sessionId=<id>``); every ``POST /messages`` is routed to the
matching session's stream and answered over that session's SSE channel.
Sessions are removed as soon as their connection closes.

All table mutations happen on the event loop thread, so the table itself is
not locked. POSTs for one session are serialised by a per-session lock.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple
from uuid import uuid4

import anyio
import mcp.types as types
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from mcp.shared.message import SessionMessage
from pydantic import ValidationError as PydanticValidationError
from sse_starlette import EventSourceResponse
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import Receive, Scope, Send

from cdyouth_mcp.errors import error_to_web_response, get_http_status
from cdyouth_mcp.exceptions import SessionNotFoundError
from cdyouth_mcp.logger import session_logger as logger

SESSION_ID_PARAM = "sessionId"
# Query parameter name used by the Python MCP SDK's own SSE transport
SESSION_ID_ALIAS = "session_id"

MAX_BODY_BYTES = 1024 * 1024


async def read_limited_body(request: Request, limit: int = MAX_BODY_BYTES) -> Optional[bytes]:
    """Read the request body, or return None once it exceeds ``limit`` bytes.

    A declared Content-Length over the limit is rejected without reading.
    """
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > limit:
        return None

    chunks = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


class SseSession:
    """One open SSE connection and the stream pair the MCP server runs on.

    Attributes:
        session_id: Hex identifier announced to the client
        endpoint_url: POST target announced in the ``endpoint`` event
        read_stream: Client messages, consumed by the MCP server
        write_stream: Server messages, drained onto the SSE channel
    """

    def __init__(self, session_id: str, endpoint: str):
        self.session_id = session_id
        self.endpoint_url = f"{endpoint}?{SESSION_ID_PARAM}={session_id}"

        self.read_stream_writer: MemoryObjectSendStream[Any]
        self.read_stream: MemoryObjectReceiveStream[Any]
        self.read_stream_writer, self.read_stream = anyio.create_memory_object_stream(0)

        self.write_stream: MemoryObjectSendStream[SessionMessage]
        self.write_stream_reader: MemoryObjectReceiveStream[SessionMessage]
        self.write_stream, self.write_stream_reader = anyio.create_memory_object_stream(0)

        self._lock = anyio.Lock()

    async def deliver(self, message: SessionMessage | Exception) -> None:
        """Hand one inbound message to the MCP server.

        Raises:
            SessionNotFoundError: If the connection closed in the meantime
        """
        async with self._lock:
            try:
                await self.read_stream_writer.send(message)
            except (anyio.ClosedResourceError, anyio.BrokenResourceError) as e:
                raise SessionNotFoundError(self.session_id, {"reason": "closed"}) from e

    def close(self) -> None:
        """End the inbound stream so the MCP server run loop returns."""
        self.read_stream_writer.close()


class SessionRouter:
    """Session table mapping SSE connections to their POST traffic.

    Example:
        router = SessionRouter("/messages")
        routes = [
            Route("/sse", endpoint=SseEndpoint(router, server), methods=["GET"]),
            Route("/messages", endpoint=router.handle_post_message, methods=["POST"]),
        ]
    """

    def __init__(self, endpoint: str = "/messages"):
        """Initialize the router.

        Args:
            endpoint: Path clients POST JSON-RPC messages to
        """
        self.endpoint = endpoint
        self._sessions: Dict[str, SseSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def session_ids(self) -> List[str]:
        return list(self._sessions)

    def open(self, root_path: str = "") -> SseSession:
        """Create and register a new session."""
        session = SseSession(uuid4().hex, f"{root_path}{self.endpoint}")
        self._sessions[session.session_id] = session
        logger.info("SSE session opened", session_id=session.session_id, active_sessions=len(self))
        return session

    def get(self, session_id: str) -> SseSession:
        """Look up an open session.

        Raises:
            SessionNotFoundError: If no open session has this id
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def close(self, session_id: str) -> None:
        """Remove a session. Closing an unknown or closed session is a no-op."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return
        session.close()
        logger.info("SSE session closed", session_id=session_id, active_sessions=len(self))

    @asynccontextmanager
    async def connect_sse(
        self, scope: Scope, receive: Receive, send: Send
    ) -> AsyncIterator[Tuple[MemoryObjectReceiveStream[Any], MemoryObjectSendStream[SessionMessage]]]:
        """Serve one SSE connection for the lifetime of the context.

        Yields the (read_stream, write_stream) pair to run an MCP server on.
        The session is removed from the table once the client disconnects.
        """
        if scope["type"] != "http":
            raise ValueError("connect_sse can only handle HTTP requests")

        session = self.open(root_path=scope.get("root_path", ""))
        sse_stream_writer, sse_stream_reader = anyio.create_memory_object_stream(0)

        async def sse_writer() -> None:
            async with sse_stream_writer, session.write_stream_reader:
                await sse_stream_writer.send({"event": "endpoint", "data": session.endpoint_url})
                async for session_message in session.write_stream_reader:
                    await sse_stream_writer.send(
                        {
                            "event": "message",
                            "data": session_message.message.model_dump_json(by_alias=True, exclude_none=True),
                        }
                    )

        async def response_wrapper(scope: Scope, receive: Receive, send: Send) -> None:
            try:
                await EventSourceResponse(content=sse_stream_reader, data_sender_callable=sse_writer)(
                    scope, receive, send
                )
            finally:
                self.close(session.session_id)
                await session.write_stream_reader.aclose()

        async with anyio.create_task_group() as tg:
            tg.start_soon(response_wrapper, scope, receive, send)
            try:
                yield (session.read_stream, session.write_stream)
            finally:
                self.close(session.session_id)

    async def handle_post_message(self, request: Request) -> Response:
        """Route one client JSON-RPC message to its session.

        Returns 202 once the message is handed over; the JSON-RPC response
        is pushed over the session's SSE stream. Unknown sessions and
        malformed bodies get a 400; bodies over MAX_BODY_BYTES get a 413.
        """
        session_id = (
            request.query_params.get(SESSION_ID_PARAM)
            or request.query_params.get(SESSION_ID_ALIAS)
            or ""
        )
        try:
            session = self.get(session_id)
        except SessionNotFoundError as e:
            logger.warning("POST for unknown session", session_id=session_id)
            return JSONResponse(error_to_web_response(e), status_code=get_http_status(e))

        body = await read_limited_body(request)
        if body is None:
            logger.warning("POST body too large", session_id=session_id, limit=MAX_BODY_BYTES)
            return Response("Request body too large", status_code=413)

        try:
            message = types.JSONRPCMessage.model_validate_json(body)
        except PydanticValidationError as err:
            logger.warning("Invalid JSON-RPC message", session_id=session_id, error=str(err))
            return Response("Could not parse message", status_code=400)

        logger.debug("Routing message to session", session_id=session_id)
        try:
            await session.deliver(SessionMessage(message))
        except SessionNotFoundError as e:
            logger.warning("POST for closed session", session_id=session_id)
            return JSONResponse(error_to_web_response(e), status_code=get_http_status(e))
        return Response("Accepted", status_code=202)


class SseEndpoint:
    """ASGI app for ``GET /sse``: runs an MCP server on each new session."""

    def __init__(self, router: SessionRouter, server: Any):
        self.router = router
        self.server = server

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        async with self.router.connect_sse(scope, receive, send) as (read_stream, write_stream):
            await self.server.run(read_stream, write_stream, self.server.create_initialization_options())

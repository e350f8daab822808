"""
HTTP transport for the MCP server.

Two path patterns carry MCP traffic, both served by the MCP SDK:

  /mcp                          Streamable HTTP (stateless, JSON replies)
  GET /sse, POST /sse/message   SSE transport: event stream plus message endpoint

Both share one MCP server whose handlers build a ToolRegistry per call.
Every other path is a plain-text 404.
"""

from __future__ import annotations

import contextlib
from collections.abc import Awaitable, Callable

import httpx
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response
from mcp.server.sse import SseServerTransport
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.types import Receive, Scope, Send

from .config import Config, config
from .mcp_server import build_server
from .tools.loader import ToolsConfig

STREAMABLE_HTTP_PATH = "/mcp"
SSE_PATH = "/sse"
SSE_MESSAGE_PATH = "/sse/message"
MCP_PATHS = (STREAMABLE_HTTP_PATH, SSE_PATH, SSE_MESSAGE_PATH)

AsgiHandler = Callable[[Scope, Receive, Send], Awaitable[None]]


class AsgiEndpoint:
    """Route endpoint that hands the raw ASGI call to an SDK transport."""

    def __init__(self, handler: AsgiHandler):
        self.handler = handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.handler(scope, receive, send)


def create_app(
    settings: Config | None = None,
    tools_config: ToolsConfig | None = None,
    transport: httpx.BaseTransport | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration (global config by default)
        tools_config: Parsed tool catalog (packaged tools.yml by default)
        transport: Optional httpx transport for the vendor call
    """
    settings = settings or config
    server = build_server(settings, tools_config, transport)

    session_manager = StreamableHTTPSessionManager(app=server, json_response=True, stateless=True)
    sse = SseServerTransport(SSE_MESSAGE_PATH)

    async def open_sse_stream(scope: Scope, receive: Receive, send: Send) -> None:
        async with sse.connect_sse(scope, receive, send) as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        async with session_manager.run():
            yield

    app = FastAPI(
        title=settings.server.name,
        version=settings.server.version,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.add_route(
        STREAMABLE_HTTP_PATH, AsgiEndpoint(session_manager.handle_request), include_in_schema=False
    )
    app.add_route(SSE_PATH, AsgiEndpoint(open_sse_stream), methods=["GET"], include_in_schema=False)
    app.add_route(
        SSE_MESSAGE_PATH,
        AsgiEndpoint(sse.handle_post_message),
        methods=["POST"],
        include_in_schema=False,
    )

    @app.api_route(
        "/{path:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
        include_in_schema=False,
    )
    async def not_found(path: str) -> Response:
        return PlainTextResponse("Not found", status_code=404)

    return app

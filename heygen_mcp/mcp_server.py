"""
MCP server - exposes the tool registry through the MCP Python SDK.

The SDK owns the protocol (JSON-RPC framing, initialize, version
negotiation, notifications). This module only answers tools/list and
tools/call, and builds a fresh ToolRegistry for each of them so nothing
mutable is shared between requests.

Caller errors (unknown tool, invalid arguments) are answered with JSON-RPC
errors. Failures the tools report themselves come back as normal results.
"""

from __future__ import annotations

from typing import Any

import httpx
from fastapi.concurrency import run_in_threadpool
from mcp import types
from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError

from .config import Config, config
from .registry import CallerError, ToolExecutionError, ToolRegistry, ToolValidationError
from .tools.loader import ToolsConfig, load_tools_config
from .tools.setup import create_registry


def list_tool_definitions(registry: ToolRegistry) -> list[types.Tool]:
    """Tool definitions in the SDK's wire type."""
    return [
        types.Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema)
        for tool in registry.list_tools()
    ]


def call_tool(registry: ToolRegistry, name: str, arguments: dict[str, Any]) -> types.CallToolResult:
    """
    Invoke a tool and convert the outcome for the SDK.

    Raises:
        McpError: INVALID_PARAMS for caller errors, INTERNAL_ERROR when the
                  executor crashed. Messages are already scrubbed.
    """
    try:
        result = registry.invoke(name, arguments)
    except ToolValidationError as e:
        raise McpError(
            types.ErrorData(code=types.INVALID_PARAMS, message=str(e), data={"errors": e.errors})
        ) from e
    except CallerError as e:
        raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(e))) from e
    except ToolExecutionError as e:
        raise McpError(types.ErrorData(code=types.INTERNAL_ERROR, message=str(e))) from e

    return types.CallToolResult(
        content=[types.TextContent(type="text", text=item.text) for item in result.content],
        isError=result.is_error,
    )


def build_server(
    settings: Config | None = None,
    tools_config: ToolsConfig | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Server:
    """
    Build the MCP server shared by every HTTP transport.

    Args:
        settings: Configuration (global config by default)
        tools_config: Parsed tool catalog (packaged tools.yml by default)
        transport: Optional httpx transport for the vendor call
    """
    settings = settings or config
    catalog = tools_config or load_tools_config()

    server = Server(settings.server.name, version=settings.server.version)

    def new_registry() -> ToolRegistry:
        return create_registry(settings, catalog, transport)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return list_tool_definitions(new_registry())

    async def handle_call_tool(request: types.CallToolRequest) -> types.ServerResult:
        params = request.params
        # The vendor call blocks; keep it off the event loop
        result = await run_in_threadpool(
            call_tool, new_registry(), params.name, params.arguments or {}
        )
        return types.ServerResult(result)

    # Set directly: the call_tool decorator turns McpError into an isError result
    server.request_handlers[types.CallToolRequest] = handle_call_tool

    return server

from __future__ import annotations

import logging
from functools import partial
from typing import Any

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from mcp_calendar.app.config import SERVER_NAME, SERVER_VERSION, MCPSettings
from mcp_calendar.auth.google_oauth import CredentialProvider
from mcp_calendar.mcp.router import ToolResponse, call_tool
from mcp_calendar.mcp.schemas import TOOLS

logger = logging.getLogger(__name__)


def tool_definitions() -> list[types.Tool]:
    return [
        types.Tool(
            name=tool.name,
            description=tool.description,
            inputSchema=tool.as_dict()["inputSchema"],
        )
        for tool in TOOLS
    ]


def to_call_tool_result(response: ToolResponse) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=response.text)],
        isError=response.is_error,
    )


async def dispatch(
    name: str,
    arguments: dict[str, Any] | None,
    settings: MCPSettings | None = None,
    provider: CredentialProvider | None = None,
) -> types.CallToolResult:
    """Run one invocation in a worker thread; Google client calls are blocking."""
    response = await anyio.to_thread.run_sync(
        partial(call_tool, name, arguments, provider=provider, settings=settings)
    )
    return to_call_tool_result(response)


def build_server(
    settings: MCPSettings | None = None, provider: CredentialProvider | None = None
) -> Server:
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        logger.info("List tools request received")
        return tool_definitions()

    # The dispatcher validates arguments itself and reports failures as envelopes
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return await dispatch(name, arguments, settings, provider)

    return server


async def run_stdio(settings: MCPSettings) -> None:
    server = build_server(settings)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Calendar MCP Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError

from redmine_mcp import __version__
from redmine_mcp.core.dispatcher import ToolDispatcher
from redmine_mcp.core.results import Failure

log = logging.getLogger(__name__)

SERVER_NAME = "redmine-mcp"


def advertised_tools(dispatcher: ToolDispatcher) -> List[types.Tool]:
    return [
        types.Tool(
            name=op["name"],
            description=op["description"],
            inputSchema=op["inputSchema"],
        )
        for op in dispatcher.list_operations()
    ]


async def call_tool_content(
    dispatcher: ToolDispatcher, name: str, arguments: Optional[Dict[str, Any]]
) -> List[types.TextContent]:
    """Invoke a tool; failures surface as McpError carrying the JSON-RPC code."""
    result = await dispatcher.invoke(name, arguments or {})
    if isinstance(result, Failure):
        raise McpError(types.ErrorData(code=int(result.kind), message=result.message))
    return [types.TextContent(type="text", text=result.text)]


def build_mcp_server(dispatcher: ToolDispatcher) -> Server:
    """Low-level MCP server whose tool list and calls come from the dispatcher."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return advertised_tools(dispatcher)

    # Not @server.call_tool(): it turns McpError into an isError result
    # instead of a JSON-RPC error.
    async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
        content = await call_tool_content(
            dispatcher, req.params.name, req.params.arguments
        )
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    server.request_handlers[types.CallToolRequest] = handle_call_tool

    return server


__all__ = ["SERVER_NAME", "advertised_tools", "build_mcp_server", "call_tool_content"]

"""MCP server wiring for the image generation tool."""

from typing import Any

import structlog
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from replicate_mcp import __version__
from replicate_mcp.tools.handler import ToolHandler

logger = structlog.get_logger(__name__)

SERVER_NAME = "replicate-mcp"


def create_server(handler: ToolHandler) -> Server:
    """Create an MCP server exposing the handler's tools.

    Input validation by the MCP library is disabled so that argument errors
    come back through the handler's own envelope.

    Args:
        handler: Tool handler serving list and call requests

    Returns:
        Configured low-level MCP server
    """
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return handler.list_tools()

    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return await handler.call_tool(name, arguments)

    return server


async def run_stdio(server: Server) -> None:
    """Serve MCP requests over stdin/stdout until the host disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("server.started", server=SERVER_NAME, transport="stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("server.stopped", server=SERVER_NAME)

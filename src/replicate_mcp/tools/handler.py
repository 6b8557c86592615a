"""Tool-call boundary: dispatch calls and wrap every outcome in a result envelope."""

from typing import Any, Optional

import structlog
from mcp import types

from replicate_mcp.models.prediction import TOOL_NAME, GenerationRequest
from replicate_mcp.services.exceptions import ServiceError, UnknownToolError
from replicate_mcp.services.replicate.runner import JobRunner
from replicate_mcp.tools import registry

logger = structlog.get_logger(__name__)


def text_result(text: str, is_error: bool = False) -> types.CallToolResult:
    """Build a single-text-block tool result."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


class ToolHandler:
    """Serves list-tools and call-tool requests on top of a JobRunner.

    call_tool() never raises: service errors and unexpected exceptions alike
    are returned as isError results with an "Error: ..." message.
    """

    def __init__(self, runner: JobRunner):
        self.runner = runner

    def list_tools(self) -> list[types.Tool]:
        return registry.list_tools()

    async def call_tool(
        self, name: str, arguments: Optional[dict[str, Any]]
    ) -> types.CallToolResult:
        """Run one tool call.

        Args:
            name: Requested tool name
            arguments: Tool arguments (None is treated as no arguments)

        Returns:
            CallToolResult with "Generated image URL: <url>" on success
        """
        try:
            if name != TOOL_NAME:
                raise UnknownToolError(f"Unknown tool: {name}")

            request = GenerationRequest.from_arguments(arguments)
            image_url = await self.runner.submit(request)
            return text_result(f"Generated image URL: {image_url}")

        except ServiceError as e:
            logger.warning(
                "tool.call.failed",
                tool=name,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return text_result(f"Error: {e}", is_error=True)

        except Exception as e:
            # Unexpected error - report it to the caller instead of crashing the session
            logger.error(
                "tool.call.failed",
                tool=name,
                error_type=type(e).__name__,
                error_message=str(e),
                exc_info=e,
            )
            return text_result(f"Error: {e}", is_error=True)

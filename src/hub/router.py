"""Tool dispatcher for the ToolHub gateway.

Resolves a tool call against the registry, validates its arguments,
invokes the handler and normalizes whatever comes back into a ToolResult.
This is the boundary where validation and downstream failures are turned
into error results.
"""

import time
from typing import Any, Optional

from pydantic import BaseModel

from shared.logging import get_logger, tool_context
from shared.models import (
    TextContent,
    ToolDefinition,
    ToolResult,
    ToolResultStatus,
)
from shared.schema import ArgumentValidationError, validate_arguments
from hub.registry import ToolRegistry
from proxies.base import DownstreamError

logger = get_logger(__name__)


class ToolDispatcher:
    """
    Dispatches protocol tool calls to registered handlers.

    Holds only the registry; no per-call state is kept between calls.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    async def call_tool(
        self,
        tool_name: str,
        arguments: Optional[dict[str, Any]] = None
    ) -> ToolResult:
        """
        Execute a tool call.

        Args:
            tool_name: Exact tool name
            arguments: Raw, unvalidated arguments from the caller

        Returns:
            Tool execution result; never raises for tool failures
        """
        with tool_context(tool_name):
            return await self._call(tool_name, arguments)

    async def _call(self, tool_name: str, arguments: Optional[dict[str, Any]]) -> ToolResult:
        start_time = time.perf_counter()

        tool = self.registry.get(tool_name)
        if not tool:
            logger.info("Unknown tool requested")
            return ToolResult.failure(
                tool_name,
                ToolResultStatus.NOT_FOUND,
                f"Unknown tool: {tool_name}"
            )

        try:
            validated = validate_arguments(arguments, tool.input_schema)
        except ArgumentValidationError as e:
            logger.info("Tool arguments rejected", errors=e.errors)
            return ToolResult.failure(tool_name, ToolResultStatus.VALIDATION_ERROR, str(e))

        try:
            result = self._normalize(tool, await tool.handler(validated))
        except DownstreamError as e:
            result = ToolResult.failure(
                tool_name,
                ToolResultStatus.DOWNSTREAM_ERROR,
                e.message
            )
        except Exception as e:
            logger.error(
                "Tool execution failed",
                error=str(e),
                exc_info=True
            )
            result = ToolResult.failure(tool_name, ToolResultStatus.ERROR, str(e))

        result.execution_time_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "Tool executed",
            status=result.status.value,
            execution_time_ms=round(result.execution_time_ms, 2)
        )
        return result

    def _normalize(self, tool: ToolDefinition, value: Any) -> ToolResult:
        """Wrap a handler's return value in a ToolResult."""
        if isinstance(value, ToolResult):
            return value

        if isinstance(value, str):
            return ToolResult(tool_name=tool.name, content=[TextContent(text=value)])

        if isinstance(value, BaseModel):
            value = [value]

        return ToolResult(tool_name=tool.name, content=list(value or []))

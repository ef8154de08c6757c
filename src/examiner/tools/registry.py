"""Tool registry: name lookup and dispatch for the file tools.

Every :class:`ToolResult` the registry produces carries an envelope in
``content``, including the ones for unknown tools and crashed calls, so
a host never has to parse two output formats.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from examiner.core.errors import ErrorKind
from examiner.tools.base import ToolDefinition, ToolResult
from examiner.tools.filesystem import FILE_TOOLS
from examiner.tools.result import OperationResult

if TYPE_CHECKING:
    from examiner.tools.base import Tool, ToolCall
    from examiner.tools.executor import OperationExecutor

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Tools by name, in registration order."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if tool.name in self._tools:
            msg = f"Tool already registered: {tool.name}"
            raise ValueError(msg)
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool:
        """Get a tool by name.

        Raises:
            KeyError: If the tool is not found.
        """
        try:
            return self._tools[name]
        except KeyError:
            msg = f"Tool not found: {name}"
            raise KeyError(msg) from None

    def list_definitions(self) -> list[ToolDefinition]:
        return [
            ToolDefinition(
                name=tool.name,
                description=tool.description,
                parameters_schema=tool.parameters_schema,
            )
            for tool in self._tools.values()
        ]

    def list_names(self) -> list[str]:
        return list(self._tools)

    async def execute(self, call: ToolCall) -> ToolResult:
        """Dispatch *call*; never raises."""
        tool = self._tools.get(call.name)
        if tool is None:
            logger.info("Call %s for unknown tool %r", call.id, call.name)
            envelope = OperationResult.fail(
                ErrorKind.INVALID_PARAMETER, f"Tool not found: {call.name}"
            )
            return ToolResult(call.id, envelope.to_json(), is_error=True)

        try:
            content = await tool.execute(**call.arguments)
        except Exception as exc:
            logger.exception("Tool %s crashed on call %s", call.name, call.id)
            envelope = OperationResult.fail(
                ErrorKind.UNKNOWN, f"Tool execution error: {exc}"
            )
            return ToolResult(call.id, envelope.to_json(), is_error=True)
        return ToolResult(call.id, content)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


def create_registry(executor: OperationExecutor) -> ToolRegistry:
    """Registry holding the four file tools over one shared executor."""
    registry = ToolRegistry()
    for tool_cls in FILE_TOOLS:
        registry.register(tool_cls(executor))
    return registry

"""MCP server exposing the read-only file tools."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from examiner.tools.base import ToolCall

if TYPE_CHECKING:
    from examiner.config.schema import ExaminerConfig
    from examiner.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

server = Server("file-examiner")

_registry: ToolRegistry | None = None


def _build_registry(config: ExaminerConfig) -> ToolRegistry:
    from examiner.policy.model import build_policy
    from examiner.tools.executor import OperationExecutor
    from examiner.tools.registry import create_registry

    return create_registry(OperationExecutor(build_policy(config.policy)))


def set_registry(registry: ToolRegistry | None) -> None:
    """Install the registry the server dispatches to."""
    global _registry
    _registry = registry


def _get_registry() -> ToolRegistry:
    """Return the installed registry, loading config on first use."""
    global _registry
    if _registry is None:
        from examiner.config.loader import load_config

        _registry = _build_registry(load_config())
    return _registry


def _get_tools() -> list[Tool]:
    """Define the MCP tools from the registry."""
    return [
        Tool(
            name=definition.name,
            description=definition.description,
            inputSchema=definition.parameters_schema,
        )
        for definition in _get_registry().list_definitions()
    ]


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available MCP tools."""
    return _get_tools()


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict) -> list[TextContent]:  # type: ignore[type-arg]
    """Handle tool calls."""
    result = await _get_registry().execute(ToolCall.create(name, arguments))
    if result.is_error:
        logger.warning("Tool %s failed: %s", name, result.content)
    return [TextContent(type="text", text=result.content)]


async def run_server(config: ExaminerConfig | None = None) -> None:
    """Start the MCP server on stdio."""
    if config is not None:
        set_registry(_build_registry(config))
    registry = _get_registry()
    logger.info("Serving %d file tools over stdio", len(registry))
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )

"""Tool protocol and the records passed between a host and the tools.

A host (the MCP server, a test) describes each tool with a
:class:`ToolDefinition`, asks for work with a :class:`ToolCall` and gets
a :class:`ToolResult` back. Tool output is always the JSON envelope
``{"success": ..., "data" | "error": ...}``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """Name, description and JSON Schema advertised to a host."""

    name: str
    description: str
    parameters_schema: dict[str, Any]


@dataclass(frozen=True, slots=True)
class ToolCall:
    """One invocation: which tool, with which arguments."""

    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, name: str, arguments: dict[str, Any] | None = None) -> ToolCall:
        """Build a call with a fresh random id."""
        return cls(id=uuid.uuid4().hex, name=name, arguments=dict(arguments or {}))


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Outcome of a :class:`ToolCall`.

    ``is_error`` marks a call that could not be dispatched or crashed.
    A file operation that ends in a policy or I/O error is still a
    successful call whose ``content`` is an error envelope.
    """

    tool_call_id: str
    content: str
    is_error: bool = False


@runtime_checkable
class Tool(Protocol):
    """What the registry needs from a tool."""

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def parameters_schema(self) -> dict[str, Any]:
        """JSON Schema (``type: object``) for the call arguments."""
        ...

    async def execute(self, **kwargs: Any) -> str:
        """Run the tool and return its JSON envelope."""
        ...

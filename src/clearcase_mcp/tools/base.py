"""Operation data types.

An :class:`Operation` is one named tool: its description, a pydantic
model describing its parameters, and the async handler that turns
validated parameters into cleartool calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pydantic import BaseModel

    from clearcase_mcp.config.schema import CommentsConfig
    from clearcase_mcp.tools.runner import CleartoolRunner


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """Schema definition for a tool, suitable for listing to MCP hosts."""

    name: str
    description: str
    parameters_schema: dict[str, Any]


@dataclass(frozen=True, slots=True)
class OperationResult:
    """The single text block returned for one tool call."""

    text: str
    output: str = ""
    is_error: bool = False

    @classmethod
    def success(cls, label: str, output: str) -> OperationResult:
        return cls(text=f"{label}:\n{output}", output=output)

    @classmethod
    def failure(cls, label: str, message: str) -> OperationResult:
        return cls(text=f"{label}: {message}", is_error=True)


@dataclass(frozen=True, slots=True)
class OperationContext:
    """What handlers need besides their parameters."""

    runner: CleartoolRunner
    comments: CommentsConfig


@dataclass(frozen=True, slots=True)
class Operation:
    """A registered tool."""

    name: str
    description: str
    params: type[BaseModel]
    handler: Callable[[Any, OperationContext], Awaitable[OperationResult]]
    error_label: str

    @property
    def parameters_schema(self) -> dict[str, Any]:
        """JSON Schema for the tool's parameters."""
        schema = self.params.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema

    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters_schema=self.parameters_schema,
        )

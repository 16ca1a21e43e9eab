"""Operation registry: manages the available tools.

Provides registration, lookup, listing, and execution of
:class:`Operation` entries. Execution validates arguments against the
operation's parameter model and converts every failure into an error
result, so callers never see an exception from a tool call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from clearcase_mcp.tools.base import OperationResult

if TYPE_CHECKING:
    from clearcase_mcp.tools.base import Operation, OperationContext, ToolDefinition

logger = logging.getLogger(__name__)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "arguments"
        parts.append(f"{loc}: {err['msg']}")
    return "Invalid arguments: " + "; ".join(parts)


class OperationRegistry:
    """Registry for managing available operations.

    Supports registration, lookup by name, listing definitions
    (for the MCP ``list_tools`` request), and executing tool calls.
    """

    def __init__(self, context: OperationContext) -> None:
        self._context = context
        self._operations: dict[str, Operation] = {}

    @property
    def context(self) -> OperationContext:
        return self._context

    def register(self, operation: Operation) -> None:
        """Register an operation.

        Raises:
            ValueError: If an operation with the same name is already registered.
        """
        if operation.name in self._operations:
            msg = f"Tool already registered: {operation.name}"
            raise ValueError(msg)
        self._operations[operation.name] = operation

    def get(self, name: str) -> Operation:
        """Get an operation by name.

        Raises:
            KeyError: If the operation is not found.
        """
        if name not in self._operations:
            msg = f"Tool not found: {name}"
            raise KeyError(msg)
        return self._operations[name]

    def list_definitions(self) -> list[ToolDefinition]:
        """Return tool definitions for all registered operations."""
        return [op.definition() for op in self._operations.values()]

    async def execute(self, name: str, arguments: dict[str, Any] | None) -> OperationResult:
        """Execute a tool call and return the result.

        Unknown tools, invalid arguments, and handler failures all come
        back as an :class:`OperationResult` with ``is_error=True``.
        """
        try:
            operation = self.get(name)
        except KeyError:
            return OperationResult(text=f"Unknown tool: {name}", is_error=True)

        try:
            params = operation.params.model_validate(arguments or {})
        except ValidationError as exc:
            return OperationResult.failure(
                operation.error_label, _format_validation_error(exc)
            )

        try:
            return await operation.handler(params, self._context)
        except Exception as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            return OperationResult.failure(operation.error_label, str(exc))

    def __len__(self) -> int:
        return len(self._operations)

    def __contains__(self, name: str) -> bool:
        return name in self._operations

    def list_names(self) -> list[str]:
        """Return names of all registered operations."""
        return list(self._operations.keys())

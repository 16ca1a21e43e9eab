"""MCP server exposing ClearCase tools over stdio."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from typing import TYPE_CHECKING, Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from clearcase_mcp import __version__
from clearcase_mcp.core.errors import ShutdownError
from clearcase_mcp.mcp.lifecycle import ShutdownCoordinator
from clearcase_mcp.tools.operations import build_registry

if TYPE_CHECKING:
    from clearcase_mcp.config.schema import ClearCaseMcpConfig
    from clearcase_mcp.tools.registry import OperationRegistry

logger = logging.getLogger(__name__)


def _get_tools(registry: OperationRegistry) -> list[Tool]:
    """Define the MCP tools."""
    return [
        Tool(
            name=definition.name,
            description=definition.description,
            inputSchema=definition.parameters_schema,
        )
        for definition in registry.list_definitions()
    ]


async def _call_tool(
    registry: OperationRegistry,
    coordinator: ShutdownCoordinator,
    name: str,
    arguments: dict[str, Any] | None,
) -> list[TextContent]:
    """Run one tool call. Always returns exactly one text block."""
    try:
        async with coordinator.track(name):
            result = await registry.execute(name, arguments)
    except ShutdownError as exc:
        return [TextContent(type="text", text=str(exc))]
    return [TextContent(type="text", text=result.text)]


def create_server(
    registry: OperationRegistry,
    coordinator: ShutdownCoordinator,
    name: str = "MCP DevOps ClearCase",
) -> Server:
    """Build an MCP server bound to *registry*."""
    server: Server = Server(name, version=__version__)

    @server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
    async def list_tools() -> list[Tool]:
        """List available MCP tools."""
        return _get_tools(registry)

    @server.call_tool(validate_input=False)  # type: ignore[untyped-decorator]
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:  # type: ignore[type-arg]
        """Handle tool calls."""
        return await _call_tool(registry, coordinator, name, arguments)

    return server


async def run_server(config: ClearCaseMcpConfig) -> None:
    """Start the MCP server on stdio.

    Returns when the host closes the stream. A termination signal
    drains in-flight calls and then exits the process, since the
    blocking stdin reader cannot be interrupted.
    """
    registry = build_registry(config)
    coordinator = ShutdownCoordinator(registry.context.runner)
    server = create_server(registry, coordinator, name=config.server.name)
    coordinator.install_signal_handlers(asyncio.get_running_loop())

    logger.info(
        "Serving %d tools via %s", len(registry), config.cleartool.executable
    )
    async with stdio_server() as (read_stream, write_stream):
        serve = asyncio.create_task(
            server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
        )
        stop = asyncio.create_task(coordinator.wait())
        done, _ = await asyncio.wait({serve, stop}, return_when=asyncio.FIRST_COMPLETED)

        if serve in done:
            stop.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await stop
            serve.result()
            return

        await coordinator.drain(config.server.shutdown_grace)
        logger.info("Shutdown complete")
        logging.shutdown()
        os._exit(0)

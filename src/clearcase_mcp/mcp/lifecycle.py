"""Graceful shutdown for the MCP server.

On SIGINT/SIGTERM the server stops accepting tool calls, gives calls
already in flight a grace period to finish, then kills whatever
cleartool processes are still running.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from clearcase_mcp.core.errors import ShutdownError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from clearcase_mcp.tools.runner import CleartoolRunner

logger = logging.getLogger(__name__)


class ShutdownCoordinator:
    """Tracks in-flight tool calls and coordinates shutdown."""

    def __init__(self, runner: CleartoolRunner) -> None:
        self._runner = runner
        self._closing = False
        self._in_flight = 0
        self._stop = asyncio.Event()
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def closing(self) -> bool:
        return self._closing

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @asynccontextmanager
    async def track(self, name: str) -> AsyncIterator[None]:
        """Wrap one tool call.

        Raises:
            ShutdownError: If shutdown has already been requested.
        """
        if self._closing:
            msg = f"Server is shutting down; {name} was not run."
            raise ShutdownError(msg)
        self._in_flight += 1
        self._idle.clear()
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.set()

    def request_shutdown(self, reason: str) -> None:
        """Stop accepting calls and wake :meth:`wait`. Idempotent."""
        if self._closing:
            return
        logger.info("Shutdown requested (%s)", reason)
        self._closing = True
        self._stop.set()

    async def wait(self) -> None:
        """Block until shutdown is requested."""
        await self._stop.wait()

    async def drain(self, grace: float) -> bool:
        """Wait up to *grace* seconds for in-flight calls.

        Returns ``True`` if every call finished, ``False`` if stragglers
        had to be killed.
        """
        if self._in_flight == 0:
            return True
        logger.info("Waiting up to %gs for %d tool call(s)", grace, self._in_flight)
        try:
            await asyncio.wait_for(self._idle.wait(), timeout=grace)
        except TimeoutError:
            self._runner.kill_all()
            return False
        return True

    def install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Install SIGINT/SIGTERM handlers for graceful shutdown."""
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(
                    sig, self.request_shutdown, f"signal_{sig.name.lower()}"
                )
            except NotImplementedError:
                logger.debug("Signal handlers not supported on this platform")
                return

"""Cleartool runner: executes the external binary in a subprocess.

Every tool ends up here: the argument vector is passed straight to
``asyncio.create_subprocess_exec`` (no shell), both output streams are
buffered until the process exits, and the outcome is either the trimmed
standard output or a :class:`CommandError`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clearcase_mcp.core.errors import (
    CommandFailedError,
    CommandLaunchError,
    CommandTimeoutError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from clearcase_mcp.config.schema import CleartoolConfig

logger = logging.getLogger(__name__)

_SECRET_FLAGS = frozenset({"-password"})
_REDACTED = "********"


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of one finished process."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def redact_args(args: Sequence[str]) -> list[str]:
    """Return a copy of *args* with secret flag values masked."""
    redacted: list[str] = []
    hide_next = False
    for arg in args:
        if hide_next:
            redacted.append(_REDACTED)
            hide_next = False
            continue
        redacted.append(arg)
        hide_next = arg in _SECRET_FLAGS
    return redacted


class CleartoolRunner:
    """Runs cleartool commands using asyncio subprocesses.

    Each call owns its own process and buffers. The runner only keeps
    the set of processes still alive so shutdown can kill them.
    """

    def __init__(self, config: CleartoolConfig | None = None) -> None:
        from clearcase_mcp.config.schema import CleartoolConfig as CTConfig

        self._config = config or CTConfig()
        self._live: set[asyncio.subprocess.Process] = set()

    @property
    def executable(self) -> str:
        return self._config.executable

    @property
    def live_processes(self) -> int:
        return len(self._live)

    async def run(self, args: Sequence[str]) -> str:
        """Run cleartool with *args* and return its trimmed output.

        Raises:
            CommandFailedError: The process exited with a non-zero status.
            CommandLaunchError: The executable could not be started.
            CommandTimeoutError: A configured timeout expired.
        """
        result = await self.execute(args)
        if not result.ok:
            raise CommandFailedError(result.returncode, result.stderr)
        return result.stdout

    async def execute(self, args: Sequence[str]) -> CommandResult:
        """Run cleartool with *args* and return the captured result."""
        argv = [self._config.executable, *args]
        logger.info("Executing command: %s", " ".join(redact_args(argv)))

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise CommandLaunchError(self._config.executable, str(exc)) from exc

        self._live.add(proc)
        try:
            stdout, stderr = await self._communicate(proc)
        except asyncio.CancelledError:
            if proc.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
            raise
        finally:
            self._live.discard(proc)

        returncode = proc.returncode if proc.returncode is not None else -1
        if returncode != 0:
            logger.debug("Command exited with code %d", returncode)
        return CommandResult(
            stdout=self._truncate(stdout.decode(errors="replace").strip()),
            stderr=stderr.decode(errors="replace").strip(),
            returncode=returncode,
        )

    async def _communicate(self, proc: asyncio.subprocess.Process) -> tuple[bytes, bytes]:
        timeout = self._config.timeout
        if timeout is None:
            return await proc.communicate()
        try:
            return await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except TimeoutError:
            proc.kill()
            await proc.communicate()
            raise CommandTimeoutError(timeout) from None

    def _truncate(self, text: str) -> str:
        """Truncate output to max_output characters when a cap is set."""
        limit = self._config.max_output
        if not limit or len(text) <= limit:
            return text
        return text[:limit] + f"\n... [truncated {len(text) - limit} chars]"

    def kill_all(self) -> int:
        """Kill every process still running. Returns how many were signalled."""
        killed = 0
        for proc in list(self._live):
            if proc.returncode is None:
                try:
                    proc.kill()
                except ProcessLookupError:
                    continue
                killed += 1
        if killed:
            logger.warning("Killed %d outstanding cleartool process(es)", killed)
        return killed

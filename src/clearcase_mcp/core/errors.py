"""Exception hierarchy for clearcase-mcp.

Every module imports from here. The hierarchy is:

    ClearCaseError
    ├── CommandError
    │   ├── CommandFailedError(returncode, stderr)
    │   ├── CommandLaunchError(executable)
    │   └── CommandTimeoutError(timeout)
    ├── OperationInputError
    ├── ConfigError
    └── ShutdownError
"""

from __future__ import annotations


class ClearCaseError(Exception):
    """Base exception for all clearcase-mcp errors."""


# ─── Command Errors ───────────────────────────────────────────


class CommandError(ClearCaseError):
    """Base for errors raised while running the external binary."""


class CommandFailedError(CommandError):
    """The command exited with a non-zero status.

    The message is the captured standard error, or a generic status
    message when the command wrote nothing to standard error.
    """

    def __init__(self, returncode: int, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(stderr or f"Process exited with code {returncode}")


class CommandLaunchError(CommandError):
    """The executable could not be started at all."""

    def __init__(self, executable: str, reason: str) -> None:
        self.executable = executable
        super().__init__(f"Failed to start {executable}: {reason}")


class CommandTimeoutError(CommandError):
    """The command ran past its configured timeout and was killed."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout:g} seconds")


# ─── Operation Errors ─────────────────────────────────────────


class OperationInputError(ClearCaseError):
    """Tool arguments are malformed or mutually inconsistent."""


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(ClearCaseError):
    """Invalid configuration."""


# ─── Lifecycle Errors ─────────────────────────────────────────


class ShutdownError(ClearCaseError):
    """A tool call arrived after shutdown was requested."""

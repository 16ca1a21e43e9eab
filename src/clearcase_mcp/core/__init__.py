"""Core types, errors, and shared utilities."""

from clearcase_mcp.core.errors import (
    ClearCaseError,
    CommandError,
    CommandFailedError,
    CommandLaunchError,
    CommandTimeoutError,
    ConfigError,
    OperationInputError,
    ShutdownError,
)
from clearcase_mcp.core.logging import configure_logging

__all__ = [
    "ClearCaseError",
    "CommandError",
    "CommandFailedError",
    "CommandLaunchError",
    "CommandTimeoutError",
    "ConfigError",
    "OperationInputError",
    "ShutdownError",
    "configure_logging",
]

"""Configuration loading and validation."""

from clearcase_mcp.config.loader import load_config
from clearcase_mcp.config.schema import (
    ClearCaseMcpConfig,
    CleartoolConfig,
    CommentsConfig,
    LoggingConfig,
    ServerConfig,
)

__all__ = [
    "ClearCaseMcpConfig",
    "CleartoolConfig",
    "CommentsConfig",
    "LoggingConfig",
    "ServerConfig",
    "load_config",
]

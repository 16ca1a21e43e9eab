"""Pydantic models for clearcase-mcp configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CleartoolConfig(BaseModel):
    """How the external cleartool binary is invoked."""

    executable: str = "cleartool"
    timeout: float | None = Field(default=None, gt=0)
    max_output: int = Field(default=0, ge=0)


class CommentsConfig(BaseModel):
    """Comments used when a tool call omits one."""

    checkout: str = "automated checkout"
    checkin: str = "automated checkin"
    add: str = "automated add"


class ServerConfig(BaseModel):
    """MCP server identity and lifecycle settings."""

    name: str = "MCP DevOps ClearCase"
    shutdown_grace: float = Field(default=5.0, ge=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""


class ClearCaseMcpConfig(BaseModel):
    """Top-level configuration for clearcase-mcp."""

    cleartool: CleartoolConfig = Field(default_factory=CleartoolConfig)
    comments: CommentsConfig = Field(default_factory=CommentsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

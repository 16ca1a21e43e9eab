"""clearcase-mcp - ClearCase cleartool operations as MCP tools."""

__version__ = "0.1.0"

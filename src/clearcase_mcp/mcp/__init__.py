"""MCP protocol surface: server and lifecycle."""

"""ClearCase tool framework.

Provides the operation types, the registry, the cleartool runner,
and the table of tools exposed over MCP.
"""

"""MCP server exposing timezone tools over streamable HTTP."""

__version__ = "1.0.0"

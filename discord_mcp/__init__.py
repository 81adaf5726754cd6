"""Discord MCP server — Discord messaging exposed as MCP tools."""

__version__ = "1.0.0"

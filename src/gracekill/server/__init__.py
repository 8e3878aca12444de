"""MCP server surface for gracekill operations."""

"""Tool handlers registered on the MCP server."""

"""Tool handlers for the Qlik MCP server."""

"""Input validation models for MCP tools."""

"""MCP server exposing Qlik chart data as tools."""

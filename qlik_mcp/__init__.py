"""Qlik MCP server: chart data retrieval from Qlik Cloud over the Model Context Protocol."""

__version__ = "1.0.0"

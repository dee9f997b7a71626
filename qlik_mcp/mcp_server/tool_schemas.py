"""MCP tool schemas (list_tools) for the Qlik chart data service."""

from __future__ import annotations

from typing import List

from mcp.types import Tool

APP_ID_PROPERTY = {
    "type": "string",
    "description": "The ID of the Qlik application (defaults to QLIK_APP_ID env variable if not provided)",
}


async def build_tools() -> List[Tool]:
    return [
        Tool(
            name="qlik_get_apps",
            description=(
                "List all Qlik applications available in the workspace. "
                "Returns {data: [{id, name}], pagination: {next}}; pass pagination.next back as "
                "offset to read the following page."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "limit": {
                        "type": "number",
                        "description": "Maximum number of apps to return, 1 to 100 (default 100)",
                        "default": 100,
                        "minimum": 1,
                        "maximum": 100,
                    },
                    "offset": {
                        "type": "string",
                        "description": "Offset for pagination (the pagination.next cursor)",
                    },
                },
            },
        ),
        Tool(
            name="qlik_get_app_sheets",
            description=(
                "Get all sheets in a Qlik application. "
                "Returns {sheets: [{qInfo: {qId}, qMeta: {title}}]}; use qInfo.qId as sheet_id."
            ),
            inputSchema={
                "type": "object",
                "properties": {"app_id": APP_ID_PROPERTY},
            },
        ),
        Tool(
            name="qlik_get_sheet_charts",
            description=(
                "Get all charts in a specific sheet. Only charts, tables, KPIs and pivot tables are "
                "listed. Returns {charts: [{id, type, bounds}]}; use id as chart_id."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "app_id": APP_ID_PROPERTY,
                    "sheet_id": {
                        "type": "string",
                        "description": "The ID of the sheet to get charts from",
                    },
                },
                "required": ["sheet_id"],
            },
        ),
        Tool(
            name="qlik_get_chart_data",
            description=(
                "Get data from a specific chart. Rows are fetched in pages up to max_rows; "
                "data.truncated is true when the chart holds more rows than were returned. "
                "If the data cannot be retrieved, data.error and data.layout describe the chart instead."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "app_id": APP_ID_PROPERTY,
                    "sheet_id": {
                        "type": "string",
                        "description": "The ID of the sheet containing the chart",
                    },
                    "chart_id": {
                        "type": "string",
                        "description": "The ID of the chart to get data from",
                    },
                    "max_rows": {
                        "type": "number",
                        "description": "Maximum total rows to retrieve (defaults to MAX_TOTAL_ROWS)",
                    },
                    "page_size": {
                        "type": "number",
                        "description": "Rows per engine request (defaults to MAX_ROWS_PER_REQUEST)",
                    },
                    "include_metadata": {
                        "type": "boolean",
                        "description": "Include dimension and measure metadata (default true)",
                        "default": True,
                    },
                },
                "required": ["sheet_id", "chart_id"],
            },
        ),
    ]

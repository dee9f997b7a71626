"""Tool routing and dispatch for MCP server."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from qlik_mcp.errors import map_error_for_mcp
from qlik_mcp.exceptions import QlikMcpError
from qlik_mcp.logger import Logger

from qlik_mcp.mcp_server.responses import _error, _handle_validation_error, _json_text
from qlik_mcp.mcp_server.tool_types import ToolHandler, ToolResponse

from qlik_mcp.mcp_server.tools.apps import _tool_get_apps
from qlik_mcp.mcp_server.tools.charts import _tool_get_chart_data
from qlik_mcp.mcp_server.tools.sheets import _tool_get_app_sheets, _tool_get_sheet_charts


HANDLERS: Dict[str, ToolHandler] = {
    "qlik_get_apps": _tool_get_apps,
    "qlik_get_app_sheets": _tool_get_app_sheets,
    "qlik_get_sheet_charts": _tool_get_sheet_charts,
    "qlik_get_chart_data": _tool_get_chart_data,
}


async def dispatch_tool_call(
    *,
    name: str,
    arguments: Optional[Dict[str, Any]],
    logger: Logger,
) -> ToolResponse:
    arguments = dict(arguments or {})
    logger.info("Tool invocation started", tool=name, args_keys=list(arguments.keys()))

    handler = HANDLERS.get(name)
    if handler is None:
        logger.error("Unknown tool requested", tool=name, available_tools=list(HANDLERS.keys()))
        available_tools = list(HANDLERS.keys())
        return _error(
            code="UNKNOWN_TOOL",
            message=f"Unknown tool: {name}",
            recovery=(
                f"Available tools: {', '.join(available_tools)}. "
                "Call list_tools() to see detailed descriptions and schemas. "
                "Check for typos in the tool name."
            ),
        )

    try:
        result = await handler(arguments)
        logger.info("Tool completed successfully", tool=name)
        return result
    except PydanticValidationError as exc:
        logger.error(
            "Validation error",
            tool=name,
            error_count=len(exc.errors()),
            errors=[{"loc": e["loc"], "msg": e["msg"], "type": e["type"]} for e in exc.errors()],
        )
        return _handle_validation_error(exc)
    except QlikMcpError as exc:
        logger.error(
            "Domain error",
            tool=name,
            error_code=exc.code,
            error_type=type(exc).__name__,
            error_message=str(exc),
        )
        return [_json_text(map_error_for_mcp(exc))]
    except ValueError as exc:
        logger.error(
            "Business rule violation",
            tool=name,
            error_type="ValueError",
            error=str(exc),
        )
        return _error(
            code="INVALID_OPERATION",
            message=str(exc),
            recovery="Review the error message, adjust the request, and try again.",
        )
    except Exception as exc:
        logger.error(
            "Unexpected tool failure",
            tool=name,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return _error(
            code="UNEXPECTED_ERROR",
            message=str(exc) or type(exc).__name__,
            recovery="Check server logs for details and retry the request.",
        )

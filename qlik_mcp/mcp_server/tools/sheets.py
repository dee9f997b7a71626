"""Sheet and chart discovery tool handlers."""

from __future__ import annotations

from typing import Any, Dict, List

from qlik_mcp.mcp_server.responses import _result
from qlik_mcp.mcp_server.state import ensure_components
from qlik_mcp.mcp_server.tool_types import ToolResponse
from qlik_mcp.retrieval.retry import with_retry
from qlik_mcp.validation.models import AppIdInput, GetSheetChartsInput

CHART_TYPE_MARKERS = ("chart", "table", "kpi", "pivot")


def is_chart_cell(cell: Dict[str, Any]) -> bool:
    """True for sheet cells holding a data visualization."""
    cell_type = str(cell.get("type") or "").lower()
    return any(marker in cell_type for marker in CHART_TYPE_MARKERS)


def summarize_charts(layout: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        {"id": cell.get("name"), "type": cell.get("type"), "bounds": cell.get("bounds")}
        for cell in layout.get("cells") or []
        if isinstance(cell, dict) and is_chart_cell(cell)
    ]


async def _tool_get_app_sheets(arguments: Dict[str, Any]) -> ToolResponse:
    payload = AppIdInput.model_validate(arguments)
    components = ensure_components()
    manager = components.new_session_manager()

    async with manager.connected(payload.app_id) as doc:
        sheet_list = await with_retry(
            doc.get_sheet_list,
            components.retry_policy,
            logger=components.logger,
            description="GetSheetList",
            sleep=components.sleep,
        )

    sheets = [{"qInfo": sheet.get("qInfo"), "qMeta": sheet.get("qMeta")} for sheet in sheet_list]
    return _result({"sheets": sheets})


async def _tool_get_sheet_charts(arguments: Dict[str, Any]) -> ToolResponse:
    payload = GetSheetChartsInput.model_validate(arguments)
    components = ensure_components()
    policy = components.retry_policy
    manager = components.new_session_manager()

    async with manager.connected(payload.app_id) as doc:
        sheet = await with_retry(
            lambda: doc.get_object(payload.sheet_id),
            policy,
            logger=components.logger,
            description="GetObject",
            sleep=components.sleep,
        )
        layout = await with_retry(
            sheet.get_layout,
            policy,
            logger=components.logger,
            description="GetLayout",
            sleep=components.sleep,
        )

    return _result({"charts": summarize_charts(layout)})

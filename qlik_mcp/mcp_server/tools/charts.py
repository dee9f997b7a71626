"""Chart data tool handler."""

from __future__ import annotations

from typing import Any, Dict

from qlik_mcp.mcp_server.responses import _result
from qlik_mcp.mcp_server.state import ensure_components
from qlik_mcp.mcp_server.tool_types import ToolResponse
from qlik_mcp.retrieval import assemble_chart_data, with_retry
from qlik_mcp.validation.models import GetChartDataInput


async def _tool_get_chart_data(arguments: Dict[str, Any]) -> ToolResponse:
    payload = GetChartDataInput.model_validate(arguments)
    components = ensure_components()
    settings = components.config.retrieval
    max_rows = settings.max_total_rows if payload.max_rows is None else payload.max_rows
    page_size = settings.max_rows_per_request if payload.page_size is None else payload.page_size
    manager = components.new_session_manager()

    async with manager.connected(payload.app_id) as doc:
        chart_object = await with_retry(
            lambda: doc.get_object(payload.chart_id),
            components.retry_policy,
            logger=components.logger,
            description="GetObject",
            sleep=components.sleep,
        )
        result = await assemble_chart_data(
            chart_object,
            payload.sheet_id,
            payload.chart_id,
            max_rows,
            page_size,
            payload.include_metadata,
            settings=settings,
            logger=components.logger,
            sleep=components.sleep,
        )

    components.logger.info(
        "Chart data assembled",
        chart_id=payload.chart_id,
        fallback=result.is_fallback,
    )
    return _result(result.to_dict())

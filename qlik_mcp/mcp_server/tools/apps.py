"""App discovery tool handler."""

from __future__ import annotations

from typing import Any, Dict

from qlik_mcp.mcp_server.responses import _result
from qlik_mcp.mcp_server.state import ensure_components
from qlik_mcp.mcp_server.tool_types import ToolResponse
from qlik_mcp.retrieval.retry import with_retry
from qlik_mcp.validation.models import GetAppsInput


async def _tool_get_apps(arguments: Dict[str, Any]) -> ToolResponse:
    payload = GetAppsInput.model_validate(arguments)
    components = ensure_components()
    response = await with_retry(
        lambda: components.apps_client.list_apps(limit=payload.limit, offset=payload.offset),
        components.retry_policy,
        logger=components.logger,
        description="ListApps",
        sleep=components.sleep,
    )
    return _result(response)

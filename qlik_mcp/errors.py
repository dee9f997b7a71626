"""Map domain exceptions to inline MCP error payloads with recovery hints."""

from typing import Any, Dict

from qlik_mcp.exceptions import QlikMcpError

RECOVERY_STRATEGIES: Dict[str, str] = {
    "CONFIGURATION_ERROR": "Set QLIK_API_KEY, QLIK_BASE_URL and QLIK_APP_ID and restart the server.",
    "ENGINE_ERROR": (
        "Verify the app_id, sheet_id and chart_id exist and that the API key can access them. "
        "Call qlik_get_app_sheets and qlik_get_sheet_charts to discover valid ids."
    ),
    "REMOTE_REQUEST_FAILED": "Check the tenant URL and API key, then retry the request.",
    "SESSION_ERROR": "Retry the request; each call opens its own engine session.",
    "SESSION_ALREADY_CONNECTED": "Retry the request; each call opens its own engine session.",
    "SESSION_NOT_CONNECTED": "Retry the request; each call opens its own engine session.",
}

DEFAULT_RECOVERY = "Review the error message, adjust the request, and try again."


def map_error_for_mcp(exc: QlikMcpError) -> Dict[str, Any]:
    """Build the inline error payload for a domain exception."""
    return {
        "error": exc.message,
        "error_code": exc.code,
        "recovery_strategy": RECOVERY_STRATEGIES.get(exc.code, DEFAULT_RECOVERY),
        "details": exc.details or None,
    }

"""MCP server response helpers.

Every tool answers with a single text item holding a JSON document. Errors
are reported inline as ``{"error": ..., "error_code": ..., ...}`` so the host
always receives a well-formed response.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from mcp.types import TextContent
from pydantic import ValidationError as PydanticValidationError

from qlik_mcp.mcp_server.tool_types import ToolResponse


def _json_serializer(obj: Any) -> Any:
    """Custom JSON serializer for non-standard types."""
    # Handle Pydantic models
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    # Handle result dataclasses
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    # Fallback
    return str(obj)


def _json_text(payload: Dict[str, Any]) -> TextContent:
    return TextContent(
        type="text",
        text=json.dumps(payload, indent=2, ensure_ascii=True, default=_json_serializer),
    )


def _result(payload: Dict[str, Any]) -> ToolResponse:
    return [_json_text(payload)]


def _error(
    code: str, message: str, recovery: str, details: Optional[Dict[str, Any]] = None
) -> ToolResponse:
    payload = {
        "error": message,
        "error_code": code,
        "recovery_strategy": recovery,
        "details": details,
    }
    return [_json_text(payload)]


def _handle_validation_error(exc: PydanticValidationError) -> ToolResponse:
    errors = exc.errors(include_url=False, include_context=False)
    details = {"validation_errors": errors}

    # Build helpful recovery message based on error types
    missing_fields = [e["loc"][0] for e in errors if e["type"] == "missing" and e["loc"]]
    invalid_fields = [e["loc"][0] for e in errors if e["type"] != "missing" and e["loc"]]

    recovery_msg = "Input validation failed. "
    if missing_fields:
        recovery_msg += f"MISSING REQUIRED FIELDS: {', '.join(str(f) for f in missing_fields)}. "
    if invalid_fields:
        recovery_msg += f"INVALID VALUES: {', '.join(str(f) for f in invalid_fields)}. "
    recovery_msg += "Check the tool's inputSchema for required parameters and their types, correct your input, and retry."

    return _error(
        code="INVALID_ARGUMENTS",
        message=f"Input payload failed validation. {len(errors)} error(s) found.",
        recovery=recovery_msg,
        details=details,
    )

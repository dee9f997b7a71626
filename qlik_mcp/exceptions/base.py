"""Base exception classes for the qlik-mcp server.

Every domain error carries a machine-readable ``code``, a human message and
optional ``details``. The MCP layer turns them into inline error payloads so
the calling assistant can decide how to recover.
"""

from typing import Any, Dict, Optional


class QlikMcpError(Exception):
    """Base class for all qlik-mcp domain errors."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigurationError(QlikMcpError):
    """Raised when required configuration is missing or invalid."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="CONFIGURATION_ERROR", message=message, details=details)


class RemoteRequestError(QlikMcpError):
    """Raised when a Qlik Cloud REST request fails."""

    def __init__(
        self, message: str, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None
    ):
        merged = dict(details or {})
        if status_code is not None:
            merged["status_code"] = status_code
        super().__init__(code="REMOTE_REQUEST_FAILED", message=message, details=merged)
        self.status_code = status_code

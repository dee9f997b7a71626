"""Session-related exceptions."""

from typing import Any, Dict, Optional

from qlik_mcp.exceptions.base import QlikMcpError


class SessionError(QlikMcpError):
    """Base exception for engine session lifecycle errors."""

    def __init__(self, message: str, code: str = "SESSION_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(code=code, message=message, details=details)


class SessionAlreadyConnectedError(SessionError):
    """Raised when connect() is called on a manager that already holds a session."""

    def __init__(self, app_id: Optional[str]):
        super().__init__(
            message=f"A session is already open for app '{app_id}'; disconnect before reconnecting",
            code="SESSION_ALREADY_CONNECTED",
            details={"app_id": app_id},
        )
        self.app_id = app_id


class SessionNotConnectedError(SessionError):
    """Raised when the document handle is requested without an open session."""

    def __init__(self) -> None:
        super().__init__(message="No engine session is open", code="SESSION_NOT_CONNECTED")

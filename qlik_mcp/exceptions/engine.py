"""Engine (JSON-RPC) exceptions."""

from typing import Optional

from qlik_mcp.exceptions.base import QlikMcpError


class EngineError(QlikMcpError):
    """Raised when the Qlik engine answers a request with an error, or the socket fails."""

    def __init__(
        self,
        message: str,
        engine_code: Optional[int] = None,
        parameter: Optional[str] = None,
        method: Optional[str] = None,
    ):
        details = {}
        if engine_code is not None:
            details["engine_code"] = engine_code
        if parameter:
            details["parameter"] = parameter
        if method:
            details["method"] = method
        super().__init__(code="ENGINE_ERROR", message=message, details=details)
        self.engine_code = engine_code
        self.parameter = parameter
        self.method = method

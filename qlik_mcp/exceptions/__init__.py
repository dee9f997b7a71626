"""Custom exceptions for the qlik-mcp server.

All exceptions include error codes and messages designed for LLM processing,
enabling intelligent error recovery and decision-making.
"""

from qlik_mcp.exceptions.base import ConfigurationError, QlikMcpError, RemoteRequestError
from qlik_mcp.exceptions.engine import EngineError
from qlik_mcp.exceptions.session import (
    SessionAlreadyConnectedError,
    SessionError,
    SessionNotConnectedError,
)

__all__ = [
    "QlikMcpError",
    "ConfigurationError",
    "RemoteRequestError",
    "EngineError",
    "SessionError",
    "SessionAlreadyConnectedError",
    "SessionNotConnectedError",
]

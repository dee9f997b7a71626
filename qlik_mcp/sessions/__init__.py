"""Engine session lifecycle management."""

from qlik_mcp.sessions.manager import ConnectionState, SessionManager

__all__ = ["ConnectionState", "SessionManager"]

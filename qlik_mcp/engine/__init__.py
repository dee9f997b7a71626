"""Thin client for the Qlik engine (websocket JSON-RPC) and REST APIs."""

from qlik_mcp.engine.objects import Doc, GenericObject
from qlik_mcp.engine.rest import AppsClient
from qlik_mcp.engine.session import EngineSession

__all__ = ["AppsClient", "Doc", "EngineSession", "GenericObject"]

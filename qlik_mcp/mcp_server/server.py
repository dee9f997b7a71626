"""MCP server instance, handlers and transports (stdio, StreamableHTTP)."""

from __future__ import annotations

import contextlib
from typing import Any, AsyncIterator, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.types import Tool
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Mount

from qlik_mcp.logger import Logger, session_logger
from qlik_mcp.mcp_server.routing import dispatch_tool_call
from qlik_mcp.mcp_server.tool_schemas import build_tools
from qlik_mcp.mcp_server.tool_types import ToolResponse

SERVER_NAME = "qlik-mcp"

app = Server(SERVER_NAME)
logger: Logger = session_logger


@app.list_tools()
async def handle_list_tools() -> List[Tool]:
    logger.debug("Received ListToolsRequest")
    return await build_tools()


@app.call_tool()
async def handle_call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> ToolResponse:
    return await dispatch_tool_call(name=name, arguments=arguments, logger=logger)


async def run_stdio() -> None:
    logger.info("Starting Qlik MCP server", transport="stdio")
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Qlik MCP server running on stdio")
        await app.run(read_stream, write_stream, app.create_initialization_options())


def create_http_app() -> Any:
    """Build the Starlette app serving StreamableHTTP at ``/mcp/``."""
    session_manager_http = StreamableHTTPSessionManager(
        app=app,
        event_store=None,
        json_response=False,
        stateless=False,
    )

    async def handle_streamable_http(scope, receive, send) -> None:
        await session_manager_http.handle_request(scope, receive, send)

    @contextlib.asynccontextmanager
    async def lifespan(starlette_app) -> AsyncIterator[None]:
        logger.info("Starting StreamableHTTP session manager")
        async with session_manager_http.run():
            logger.info("StreamableHTTP session manager ready")
            yield

    starlette_app = Starlette(
        debug=False,
        routes=[Mount("/mcp/", app=handle_streamable_http)],
        lifespan=lifespan,
    )
    return CORSMiddleware(
        starlette_app,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        expose_headers=["Mcp-Session-Id"],
    )


async def run_http(host: str = "0.0.0.0", port: int = 8020) -> None:
    import uvicorn

    logger.info("Starting Qlik MCP server", transport="streamable-http", host=host, port=port)
    config = uvicorn.Config(create_http_app(), host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    await server.serve()

"""Entry point for the Qlik MCP server.

Usage:
    qlik-mcp                              # stdio transport (default)
    qlik-mcp --transport http --port 8020 # StreamableHTTP at /mcp/
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from qlik_mcp.config import load_config
from qlik_mcp.exceptions import ConfigurationError
from qlik_mcp.logger import Logger, session_logger
from qlik_mcp.mcp_server.components import initialize_components
from qlik_mcp.mcp_server.state import set_components

logger: Logger = session_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Qlik MCP Server - chart data retrieval via Model Context Protocol"
    )
    parser.add_argument(
        "--transport",
        choices=("stdio", "http"),
        default=os.environ.get("QLIK_MCP_TRANSPORT", "stdio"),
        help="Transport to serve on (default: stdio, or QLIK_MCP_TRANSPORT env var)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host address to bind to in http mode (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("QLIK_MCP_PORT", "8020")),
        help="Port number to listen on in http mode (default: 8020, or QLIK_MCP_PORT env var)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(logger=logger)
    except ConfigurationError as e:
        logger.critical("FATAL: Configuration invalid", error=str(e), missing=e.details.get("missing"))
        sys.exit(1)

    set_components(initialize_components(config=config, logger=logger))

    from qlik_mcp.mcp_server.server import run_http, run_stdio

    try:
        if args.transport == "http":
            asyncio.run(run_http(host=args.host, port=args.port))
        else:
            asyncio.run(run_stdio())
        logger.info("MCP server shutdown complete")
    except KeyboardInterrupt:
        logger.info("Shutdown complete")
        sys.exit(0)
    except Exception as e:
        logger.critical("Fatal error in main()", error=str(e), error_type=type(e).__name__)
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Component initialization for the MCP server.

Holds the immutable configuration and the factories tool handlers use. A
fresh ``SessionManager`` is built for every invocation so concurrent calls
never share an engine session.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from qlik_mcp.config import ServerConfig
from qlik_mcp.engine import AppsClient
from qlik_mcp.logger import Logger
from qlik_mcp.retrieval.retry import RetryPolicy, Sleep
from qlik_mcp.sessions import SessionManager
from qlik_mcp.sessions.manager import SessionFactory


@dataclass
class ServerComponents:
    config: ServerConfig
    logger: Logger
    apps_client: AppsClient
    session_factory: Optional[SessionFactory] = None
    sleep: Sleep = asyncio.sleep

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy.from_settings(self.config.retrieval)

    def new_session_manager(self) -> SessionManager:
        return SessionManager(
            config=self.config,
            logger=self.logger,
            session_factory=self.session_factory,
            sleep=self.sleep,
        )


def initialize_components(*, config: ServerConfig, logger: Logger) -> ServerComponents:
    """Initialize all server components.

    Args:
            config: Immutable server configuration
            logger: Logger
    """
    apps_client = AppsClient(
        base_url=config.rest_base_url,
        api_key=config.api_key,
        logger=logger,
    )
    logger.info(
        "Server components initialized",
        host=config.host,
        default_app_id=config.default_app_id,
        max_total_rows=config.retrieval.max_total_rows,
        max_rows_per_request=config.retrieval.max_rows_per_request,
    )
    return ServerComponents(config=config, logger=logger, apps_client=apps_client)

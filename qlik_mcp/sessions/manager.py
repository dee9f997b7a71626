"""Session manager for engine connections.

A ``SessionManager`` owns at most one engine session and its document handle
for the duration of a single tool invocation. Tool handlers build a fresh
manager per call and use ``connected()`` so the session is closed on every
exit path.
"""

from __future__ import annotations

import asyncio
import contextlib
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Tuple

from qlik_mcp.config import ServerConfig
from qlik_mcp.engine import Doc, EngineSession
from qlik_mcp.exceptions import SessionAlreadyConnectedError, SessionNotConnectedError
from qlik_mcp.logger import Logger
from qlik_mcp.retrieval.retry import RetryPolicy, Sleep, with_retry

SessionFactory = Callable[[str], Awaitable[Any]]


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class SessionManager:
    """Manages the connect/disconnect lifecycle of one engine session."""

    def __init__(
        self,
        config: ServerConfig,
        logger: Logger,
        session_factory: Optional[SessionFactory] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """
        Initialize the session manager.

        Args:
            config: Server configuration (endpoint, credential, default app, limits)
            logger: Logger instance
            session_factory: Opens an engine session for an app id; defaults to a
                websocket ``EngineSession``
            sleep: Awaitable sleep used for retry backoff
        """
        self.config = config
        self.logger = logger
        self.policy = RetryPolicy.from_settings(config.retrieval)
        self._session_factory = session_factory or self._open_engine_session
        self._sleep = sleep
        self._state = ConnectionState.DISCONNECTED
        self._session: Optional[Any] = None
        self._doc: Optional[Doc] = None
        self._app_id: Optional[str] = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def app_id(self) -> Optional[str]:
        return self._app_id

    @property
    def doc(self) -> Doc:
        if self._state is not ConnectionState.CONNECTED or self._doc is None:
            raise SessionNotConnectedError()
        return self._doc

    async def _open_engine_session(self, app_id: str) -> EngineSession:
        session = EngineSession(self.config.engine_url(app_id), self.config.api_key, self.logger)
        return await session.open()

    async def _open(self, app_id: str) -> Tuple[Any, Doc]:
        session = await self._session_factory(app_id)
        try:
            doc = await session.open_doc(app_id)
        except BaseException:
            await session.close()
            raise
        return session, doc

    async def connect(self, app_id: Optional[str] = None) -> Doc:
        """
        Open a session for ``app_id`` (or the configured default) and its document.

        Returns:
            The opened document handle

        Raises:
            SessionAlreadyConnectedError: If a session is already open or opening
        """
        if self._state is not ConnectionState.DISCONNECTED:
            raise SessionAlreadyConnectedError(self._app_id)

        target_app_id = app_id or self.config.default_app_id
        self._state = ConnectionState.CONNECTING
        self._app_id = target_app_id
        try:
            session, doc = await with_retry(
                lambda: self._open(target_app_id),
                self.policy,
                logger=self.logger,
                description="OpenDoc",
                sleep=self._sleep,
            )
        except BaseException:
            self._state = ConnectionState.DISCONNECTED
            self._app_id = None
            raise

        self._session = session
        self._doc = doc
        self._state = ConnectionState.CONNECTED
        self.logger.info("Engine session opened", app_id=target_app_id)
        return doc

    async def disconnect(self) -> None:
        """Close the session if one is open; a no-op otherwise."""
        session = self._session
        app_id = self._app_id
        self._session = None
        self._doc = None
        self._app_id = None
        self._state = ConnectionState.DISCONNECTED
        if session is None:
            return

        try:
            await session.close()
        except Exception as exc:
            self.logger.warning(
                "Engine session close failed",
                app_id=app_id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return
        self.logger.info("Engine session closed", app_id=app_id)

    @contextlib.asynccontextmanager
    async def connected(self, app_id: Optional[str] = None) -> AsyncIterator[Doc]:
        """Connect, yield the document, and always disconnect."""
        doc = await self.connect(app_id)
        try:
            yield doc
        finally:
            await self.disconnect()

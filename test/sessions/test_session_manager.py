"""Tests for the engine session lifecycle."""

import asyncio

import pytest

from fakes import FakeDoc, FakeEngineSession, FakeSessionFactory, RecordingSleep, TransientError
from qlik_mcp.exceptions import SessionAlreadyConnectedError, SessionNotConnectedError
from qlik_mcp.sessions import ConnectionState, SessionManager


@pytest.fixture
def session_manager(server_config, logger, session_factory, recording_sleep):
    """Create a SessionManager instance backed by fake engine sessions."""
    return SessionManager(
        config=server_config,
        logger=logger,
        session_factory=session_factory,
        sleep=recording_sleep,
    )


class TestConnect:
    @pytest.mark.asyncio
    async def test_connect_uses_default_app(self, session_manager, session_factory, fake_doc):
        doc = await session_manager.connect()

        assert doc is fake_doc
        assert session_manager.state is ConnectionState.CONNECTED
        assert session_manager.app_id == "default-app"
        assert session_factory.sessions[0].opened_apps == ["default-app"]

    @pytest.mark.asyncio
    async def test_connect_explicit_app(self, session_manager, session_factory):
        await session_manager.connect("sales-app")

        assert session_factory.requested_apps == ["sales-app"]
        assert session_manager.app_id == "sales-app"

    @pytest.mark.asyncio
    async def test_connect_rejects_when_already_connected(self, session_manager, session_factory):
        await session_manager.connect()

        with pytest.raises(SessionAlreadyConnectedError):
            await session_manager.connect("other-app")

        assert len(session_factory.sessions) == 1
        assert session_manager.state is ConnectionState.CONNECTED

    @pytest.mark.asyncio
    async def test_connect_retries_and_closes_half_open_sessions(
        self, server_config, logger, fake_doc, recording_sleep
    ):
        factory = FakeSessionFactory(fake_doc, open_failures=2)
        manager = SessionManager(server_config, logger, session_factory=factory, sleep=recording_sleep)

        await manager.connect()

        assert len(factory.sessions) == 3
        assert [s.closed for s in factory.sessions] == [True, True, False]
        assert recording_sleep.calls_ms == [1000, 2000]

    @pytest.mark.asyncio
    async def test_failed_connect_returns_to_disconnected(self, server_config, logger, fake_doc):
        factory = FakeSessionFactory(fake_doc, connect_error=TransientError("unreachable"))
        sleep = RecordingSleep()
        manager = SessionManager(server_config, logger, session_factory=factory, sleep=sleep)

        with pytest.raises(TransientError):
            await manager.connect()

        assert manager.state is ConnectionState.DISCONNECTED
        assert manager.app_id is None
        assert len(factory.requested_apps) == server_config.retrieval.max_retries + 1

    @pytest.mark.asyncio
    async def test_doc_requires_connection(self, session_manager):
        with pytest.raises(SessionNotConnectedError):
            session_manager.doc


class TestDisconnect:
    @pytest.mark.asyncio
    async def test_disconnect_without_session_is_noop(self, session_manager):
        await session_manager.disconnect()
        assert session_manager.state is ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_disconnect_closes_and_allows_reconnect(self, session_manager, session_factory):
        await session_manager.connect()
        await session_manager.disconnect()

        assert session_factory.sessions[0].closed
        assert session_manager.state is ConnectionState.DISCONNECTED

        await session_manager.connect()
        assert len(session_factory.sessions) == 2

    @pytest.mark.asyncio
    async def test_close_failure_is_logged_not_raised(self, server_config, logger, fake_doc):
        factory = FakeSessionFactory(fake_doc, close_error=RuntimeError("socket gone"))
        manager = SessionManager(server_config, logger, session_factory=factory, sleep=RecordingSleep())
        await manager.connect()

        await manager.disconnect()

        assert manager.state is ConnectionState.DISCONNECTED


class TestConnectedContext:
    @pytest.mark.asyncio
    async def test_disconnects_on_success(self, session_manager, session_factory):
        async with session_manager.connected() as doc:
            assert doc is session_manager.doc

        assert session_factory.sessions[0].closed
        assert session_manager.state is ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_disconnects_on_failure_and_keeps_original_error(self, server_config, logger):
        factory = FakeSessionFactory(FakeDoc(), close_error=RuntimeError("socket gone"))
        manager = SessionManager(server_config, logger, session_factory=factory, sleep=RecordingSleep())

        with pytest.raises(KeyError, match="boom"):
            async with manager.connected():
                raise KeyError("boom")

        assert factory.sessions[0].closed
        assert manager.state is ConnectionState.DISCONNECTED


class HangingEngineSession(FakeEngineSession):
    """Blocks in OpenDoc until cancelled."""

    def __init__(self, doc):
        super().__init__(doc)
        self.opening = asyncio.Event()

    async def open_doc(self, app_id):
        self.opening.set()
        await asyncio.Event().wait()


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_during_open_closes_session(self, server_config, logger, fake_doc):
        session = HangingEngineSession(fake_doc)

        async def factory(app_id):
            return session

        manager = SessionManager(server_config, logger, session_factory=factory, sleep=RecordingSleep())

        async def use():
            async with manager.connected():
                pass

        task = asyncio.create_task(use())
        await session.opening.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert session.closed
        assert manager.state is ConnectionState.DISCONNECTED
        assert manager.app_id is None

    @pytest.mark.asyncio
    async def test_cancel_during_backoff_resets_state(self, server_config, logger, fake_doc):
        factory = FakeSessionFactory(fake_doc, open_failures=1)
        backoff_started = asyncio.Event()

        async def hanging_sleep(seconds):
            backoff_started.set()
            await asyncio.Event().wait()

        manager = SessionManager(server_config, logger, session_factory=factory, sleep=hanging_sleep)

        task = asyncio.create_task(manager.connect())
        await backoff_started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert [session.closed for session in factory.sessions] == [True]
        assert manager.state is ConnectionState.DISCONNECTED

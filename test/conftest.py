"""Pytest configuration and fixtures

Provides shared fixtures for all tests: a quiet logger, retrieval settings
with real-looking delays, a recording sleep so no test actually waits, and
server components wired to in-memory engine fakes.
"""

import logging

import pytest

from fakes import FakeDoc, FakeSessionFactory, RecordingSleep
from qlik_mcp.config import RetrievalSettings, ServerConfig
from qlik_mcp.engine import AppsClient
from qlik_mcp.logger import ConsoleLogger
from qlik_mcp.mcp_server.components import ServerComponents
from qlik_mcp.mcp_server.state import set_components


@pytest.fixture
def logger():
    return ConsoleLogger(name="qlik-mcp-test", level=logging.DEBUG)


@pytest.fixture
def settings():
    return RetrievalSettings(
        max_rows_per_request=1000,
        max_total_rows=10000,
        request_delay_ms=100,
        max_retries=3,
        retry_delay_ms=1000,
    )


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def server_config(settings):
    return ServerConfig(
        base_url="https://tenant.eu.qlikcloud.com",
        api_key="test-api-key",
        default_app_id="default-app",
        retrieval=settings,
    )


@pytest.fixture
def fake_doc():
    return FakeDoc()


@pytest.fixture
def session_factory(fake_doc):
    return FakeSessionFactory(fake_doc)


@pytest.fixture
def components(server_config, logger, session_factory, recording_sleep):
    """Install server components backed by fakes; removed after the test."""
    value = ServerComponents(
        config=server_config,
        logger=logger,
        apps_client=AppsClient(server_config.rest_base_url, server_config.api_key, logger),
        session_factory=session_factory,
        sleep=recording_sleep,
    )
    set_components(value)
    yield value
    set_components(None)

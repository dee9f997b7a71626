"""Tests for the Qlik Cloud app listing client."""

import httpx
import pytest

from qlik_mcp.engine.rest import AppsClient, next_cursor
from qlik_mcp.exceptions import RemoteRequestError


def make_client(logger, handler):
    return AppsClient(
        "https://tenant.eu.qlikcloud.com",
        "secret",
        logger,
        transport=httpx.MockTransport(handler),
    )


class TestNextCursor:
    def test_cursor_from_next_link(self):
        payload = {"links": {"next": {"href": "https://t/api/v1/items?limit=2&next=abc123"}}}
        assert next_cursor(payload) == "abc123"

    def test_no_next_link(self):
        assert next_cursor({"links": {"self": {"href": "https://t/api/v1/items"}}}) is None
        assert next_cursor({}) is None


class TestListApps:
    @pytest.mark.asyncio
    async def test_maps_items_and_pagination(self, logger):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(
                200,
                json={
                    "data": [
                        {"name": "Sales", "resourceId": "app-1", "resourceType": "app"},
                        {"name": "Finance", "resourceId": "app-2", "resourceType": "app"},
                    ],
                    "links": {"next": {"href": "https://tenant/api/v1/items?next=cursor-2"}},
                },
            )

        result = await make_client(logger, handler).list_apps(limit=2, offset="cursor-1")

        assert result == {
            "data": [{"id": "app-1", "name": "Sales"}, {"id": "app-2", "name": "Finance"}],
            "pagination": {"next": "cursor-2"},
        }
        assert seen["params"] == {"resourceType": "app", "limit": "2", "next": "cursor-1"}
        assert seen["auth"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_last_page_has_null_next(self, logger):
        client = make_client(logger, lambda request: httpx.Response(200, json={"data": []}))

        result = await client.list_apps()

        assert result == {"data": [], "pagination": {"next": None}}

    @pytest.mark.asyncio
    async def test_http_error_raises_remote_request_error(self, logger):
        client = make_client(logger, lambda request: httpx.Response(401, json={"errors": []}))

        with pytest.raises(RemoteRequestError) as exc_info:
            await client.list_apps()

        assert exc_info.value.status_code == 401
        assert exc_info.value.code == "REMOTE_REQUEST_FAILED"

"""Websocket JSON-RPC session against the Qlik engine.

Only the handful of engine methods the tools need are exposed. Requests are
sent one at a time and the reply is matched by id; engine notifications
(``OnConnected`` and friends) arriving in between are skipped.
"""

from __future__ import annotations

import itertools
import json
from typing import Any, Dict, Optional, Union

import aiohttp

from qlik_mcp.engine.objects import Doc
from qlik_mcp.exceptions import EngineError
from qlik_mcp.logger import Logger

Params = Union[Dict[str, Any], list]

GLOBAL_HANDLE = -1


class EngineSession:
    """One websocket connection to ``wss://{host}/app/{app_id}``."""

    def __init__(
        self,
        url: str,
        api_key: str,
        logger: Logger,
        http_session: Optional[aiohttp.ClientSession] = None,
        heartbeat: float = 30.0,
    ) -> None:
        self.url = url
        self.logger = logger
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._http = http_session
        self._owns_http = http_session is None
        self._heartbeat = heartbeat
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._ids = itertools.count(1)

    @property
    def is_open(self) -> bool:
        return self._ws is not None and not self._ws.closed

    async def open(self) -> "EngineSession":
        if self._http is None:
            self._http = aiohttp.ClientSession()
        try:
            self._ws = await self._http.ws_connect(
                self.url, headers=self._headers, heartbeat=self._heartbeat
            )
        except aiohttp.ClientError as exc:
            await self._close_http()
            raise EngineError(f"Could not connect to engine at {self.url}: {exc}") from exc
        except BaseException:
            await self._close_http()
            raise
        self.logger.debug("Engine websocket opened", url=self.url)
        return self

    async def send(self, method: str, handle: int, params: Optional[Params] = None) -> Dict[str, Any]:
        """Send one JSON-RPC request and wait for its result."""
        if not self.is_open:
            raise EngineError("Engine session is not open", method=method)
        assert self._ws is not None

        request_id = next(self._ids)
        await self._ws.send_json(
            {
                "jsonrpc": "2.0",
                "id": request_id,
                "method": method,
                "handle": handle,
                "params": params if params is not None else {},
            }
        )

        while True:
            message = await self._ws.receive()
            if message.type == aiohttp.WSMsgType.TEXT:
                payload = json.loads(message.data)
            elif message.type in (
                aiohttp.WSMsgType.CLOSE,
                aiohttp.WSMsgType.CLOSING,
                aiohttp.WSMsgType.CLOSED,
                aiohttp.WSMsgType.ERROR,
            ):
                raise EngineError(
                    f"Engine connection closed while waiting for {method}", method=method
                )
            else:
                continue

            if payload.get("id") != request_id:
                self.logger.debug("Engine message skipped", method=payload.get("method"))
                continue

            error = payload.get("error")
            if error:
                raise EngineError(
                    error.get("message") or f"Engine error in {method}",
                    engine_code=error.get("code"),
                    parameter=error.get("parameter"),
                    method=method,
                )
            return payload.get("result") or {}

    async def open_doc(self, app_id: str) -> Doc:
        result = await self.send("OpenDoc", GLOBAL_HANDLE, {"qDocName": app_id})
        handle = (result.get("qReturn") or {}).get("qHandle")
        if handle is None:
            raise EngineError(f"App '{app_id}' could not be opened", method="OpenDoc")
        return Doc(self, handle, app_id)

    async def close(self) -> None:
        try:
            if self._ws is not None and not self._ws.closed:
                await self._ws.close()
        finally:
            self._ws = None
            await self._close_http()

    async def _close_http(self) -> None:
        if self._owns_http and self._http is not None:
            await self._http.close()
            self._http = None

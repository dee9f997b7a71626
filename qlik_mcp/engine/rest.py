"""Qlik Cloud REST client used for app discovery."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from qlik_mcp.exceptions import RemoteRequestError
from qlik_mcp.logger import Logger

ITEMS_PATH = "/api/v1/items"


def next_cursor(payload: Dict[str, Any]) -> Optional[str]:
    """Extract the ``next`` cursor from the items API ``links.next.href``."""
    href = ((payload.get("links") or {}).get("next") or {}).get("href")
    if not href:
        return None
    return httpx.URL(href).params.get("next")


class AppsClient:
    """Lists the apps visible to the configured API key."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        logger: Logger,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.logger = logger
        self.timeout_seconds = timeout_seconds
        self._headers = {"Authorization": f"Bearer {api_key}", "Accept": "application/json"}
        self._transport = transport

    async def list_apps(self, limit: int = 100, offset: Optional[str] = None) -> Dict[str, Any]:
        """Return ``{data: [{id, name}], pagination: {next}}``.

        Raises:
            RemoteRequestError: On a non-2xx answer or transport failure
        """
        params: Dict[str, Any] = {"resourceType": "app", "limit": limit}
        if offset:
            params["next"] = offset

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(ITEMS_PATH, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise RemoteRequestError(
                f"App listing failed with HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteRequestError(f"App listing failed: {exc}") from exc

        apps: List[Dict[str, Any]] = [
            {"id": item.get("resourceId") or item.get("id"), "name": item.get("name")}
            for item in payload.get("data") or []
        ]
        self.logger.info("Apps listed", count=len(apps))
        return {"data": apps, "pagination": {"next": next_cursor(payload)}}

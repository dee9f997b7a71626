"""Engine object handles: the opened document and its generic objects."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from qlik_mcp.exceptions import EngineError

if TYPE_CHECKING:
    from qlik_mcp.engine.session import EngineSession

SHEET_LIST_PROPERTIES: Dict[str, Any] = {
    "qInfo": {"qType": "SheetList"},
    "qAppObjectListDef": {
        "qType": "sheet",
        "qData": {
            "title": "/qMetaDef/title",
            "description": "/qMetaDef/description",
            "cells": "/cells",
        },
    },
}


class GenericObject:
    """A sheet, chart or session object inside an open document."""

    def __init__(self, session: "EngineSession", handle: int, object_id: Optional[str] = None):
        self.session = session
        self.handle = handle
        self.object_id = object_id

    async def get_layout(self) -> Dict[str, Any]:
        result = await self.session.send("GetLayout", self.handle, {})
        return result.get("qLayout") or {}

    async def get_hypercube_data(self, path: str, pages: List[Dict[str, int]]) -> List[Dict[str, Any]]:
        result = await self.session.send(
            "GetHyperCubeData", self.handle, {"qPath": path, "qPages": pages}
        )
        return result.get("qDataPages") or []


class Doc:
    """An opened Qlik app."""

    def __init__(self, session: "EngineSession", handle: int, app_id: str):
        self.session = session
        self.handle = handle
        self.app_id = app_id

    def _object_from(self, result: Dict[str, Any], method: str, object_id: Optional[str]) -> GenericObject:
        handle = (result.get("qReturn") or {}).get("qHandle")
        if handle is None:
            raise EngineError(
                f"Object '{object_id}' not found in app '{self.app_id}'",
                method=method,
                parameter=object_id,
            )
        return GenericObject(self.session, handle, object_id)

    async def get_object(self, object_id: str) -> GenericObject:
        result = await self.session.send("GetObject", self.handle, {"qId": object_id})
        return self._object_from(result, "GetObject", object_id)

    async def create_session_object(self, properties: Dict[str, Any]) -> GenericObject:
        result = await self.session.send("CreateSessionObject", self.handle, {"qProp": properties})
        return self._object_from(result, "CreateSessionObject", None)

    async def get_sheet_list(self) -> List[Dict[str, Any]]:
        sheet_list = await self.create_session_object(SHEET_LIST_PROPERTIES)
        layout = await sheet_list.get_layout()
        return list((layout.get("qAppObjectList") or {}).get("qItems") or [])

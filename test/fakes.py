"""In-memory stand-ins for engine handles used across the test suite."""

from typing import Any, Dict, List, Optional


class RecordingSleep:
    """Awaitable sleep replacement that records requested durations (seconds)."""

    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def calls_ms(self) -> List[int]:
        return [round(seconds * 1000) for seconds in self.calls]


class TransientError(RuntimeError):
    pass


def make_cell(row: int, column: int) -> Dict[str, Any]:
    return {"qText": f"r{row}c{column}", "qNum": float(row * 100 + column), "qState": "O"}


def hypercube_layout(
    total_rows: int,
    dimensions: Optional[List[str]] = None,
    measures: Optional[List[str]] = None,
    visualization: str = "barchart",
) -> Dict[str, Any]:
    dimensions = ["Region"] if dimensions is None else dimensions
    measures = ["Sales"] if measures is None else measures
    return {
        "qInfo": {"qId": "chart-1", "qType": "barchart"},
        "visualization": visualization,
        "title": "Sales by region",
        "qHyperCube": {
            "qDimensionInfo": [
                {"qFallbackTitle": title, "qFieldDefs": [title]} for title in dimensions
            ],
            "qMeasureInfo": [
                {
                    "qFallbackTitle": title,
                    "qNumFormat": {"qType": "M", "qFmt": "$#,##0"},
                }
                for title in measures
            ],
            "qSize": {"qcx": len(dimensions) + len(measures), "qcy": total_rows},
        },
    }


class FakeChartObject:
    """Chart handle serving a synthetic hypercube of ``total_rows`` rows.

    ``page_failures`` makes every hypercube request raise that many times
    before succeeding; ``always_fail_pages`` makes them fail forever.
    """

    def __init__(
        self,
        layout: Dict[str, Any],
        page_failures: int = 0,
        always_fail_pages: bool = False,
        fail_on_page: Optional[int] = None,
    ) -> None:
        self.layout = layout
        self.page_failures = page_failures
        self.always_fail_pages = always_fail_pages
        self.fail_on_page = fail_on_page
        self.page_requests: List[Dict[str, int]] = []
        self.hypercube_calls = 0
        self.layout_calls = 0

    async def get_layout(self) -> Dict[str, Any]:
        self.layout_calls += 1
        return self.layout

    async def get_hypercube_data(self, path: str, pages: List[Dict[str, int]]) -> List[Dict[str, Any]]:
        assert path == "/qHyperCubeDef"
        self.hypercube_calls += 1
        page = pages[0]
        if self.always_fail_pages:
            raise TransientError("rate limited")
        if self.page_failures > 0:
            self.page_failures -= 1
            raise TransientError("rate limited")
        if self.fail_on_page is not None and len(self.page_requests) == self.fail_on_page:
            raise TransientError("page unavailable")
        self.page_requests.append(page)
        matrix = [
            [make_cell(row, column) for column in range(page["qLeft"], page["qLeft"] + page["qWidth"])]
            for row in range(page["qTop"], page["qTop"] + page["qHeight"])
        ]
        return [{"qArea": page, "qMatrix": matrix}]


class FakeSheetObject:
    def __init__(self, layout: Dict[str, Any]) -> None:
        self.layout = layout

    async def get_layout(self) -> Dict[str, Any]:
        return self.layout


class FakeDoc:
    def __init__(self, objects: Optional[Dict[str, Any]] = None, sheets: Optional[List[Dict[str, Any]]] = None):
        self.objects = objects or {}
        self.sheets = sheets or []

    async def get_object(self, object_id: str) -> Any:
        if object_id not in self.objects:
            from qlik_mcp.exceptions import EngineError

            raise EngineError(f"Object '{object_id}' not found", method="GetObject")
        return self.objects[object_id]

    async def get_sheet_list(self) -> List[Dict[str, Any]]:
        return self.sheets


class FakeEngineSession:
    def __init__(self, doc: FakeDoc, open_failures: int = 0, close_error: Optional[Exception] = None):
        self.doc = doc
        self.open_failures = open_failures
        self.close_error = close_error
        self.opened_apps: List[str] = []
        self.closed = False

    async def open_doc(self, app_id: str) -> FakeDoc:
        if self.open_failures > 0:
            self.open_failures -= 1
            raise TransientError("engine busy")
        self.opened_apps.append(app_id)
        return self.doc

    async def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakeSessionFactory:
    """Hands out one ``FakeEngineSession`` per call, remembering each."""

    def __init__(
        self,
        doc: FakeDoc,
        open_failures: int = 0,
        close_error: Optional[Exception] = None,
        connect_error: Optional[Exception] = None,
    ) -> None:
        self.doc = doc
        self.open_failures = open_failures
        self.close_error = close_error
        self.connect_error = connect_error
        self.sessions: List[FakeEngineSession] = []
        self.requested_apps: List[str] = []

    async def __call__(self, app_id: str) -> FakeEngineSession:
        self.requested_apps.append(app_id)
        if self.connect_error is not None:
            raise self.connect_error
        session = FakeEngineSession(self.doc, close_error=self.close_error)
        if self.open_failures > 0:
            self.open_failures -= 1
            session.open_failures = 1
        self.sessions.append(session)
        return session

"""Chart data assembly with layout fallback.

``assemble_chart_data`` always yields a result describing the chart: either a
``ChartTable`` built from the paged hypercube fetch, or a ``LayoutFallback``
carrying the raw layout when bulk retrieval is impossible.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from qlik_mcp.config import RetrievalSettings
from qlik_mcp.logger import Logger
from qlik_mcp.retrieval.metadata import VisualizationMetadata, extract_metadata, fetch_layout
from qlik_mcp.retrieval.paging import RowBatch, fetch_rows
from qlik_mcp.retrieval.retry import RetryPolicy, Sleep

FALLBACK_ERROR = "Could not retrieve hypercube data"


def _numeric(value: Any) -> Optional[float]:
    # The engine sends "NaN" for cells without a numeric representation.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return value


def to_cell(engine_cell: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "text": engine_cell.get("qText"),
        "value": _numeric(engine_cell.get("qNum")),
        "state": engine_cell.get("qState"),
    }


@dataclass(frozen=True)
class ChartTable:
    headers: List[Optional[str]]
    rows: List[List[Dict[str, Any]]]
    row_count: int
    total_row_count: int
    truncated: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headers": self.headers,
            "rows": self.rows,
            "rowCount": self.row_count,
            "totalRowCount": self.total_row_count,
            "truncated": self.truncated,
        }


@dataclass(frozen=True)
class LayoutFallback:
    layout: Dict[str, Any]
    error: str = FALLBACK_ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "layout": self.layout}


@dataclass(frozen=True)
class ChartDataResult:
    type: str
    data: Union[ChartTable, LayoutFallback]
    metadata: Optional[VisualizationMetadata] = field(default=None)

    @property
    def is_fallback(self) -> bool:
        return isinstance(self.data, LayoutFallback)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type}
        if self.metadata is not None:
            payload["metadata"] = self.metadata.to_dict()
        payload["data"] = self.data.to_dict()
        return payload


def build_table(metadata: VisualizationMetadata, batches: List[RowBatch], max_rows: int) -> ChartTable:
    rows = [[to_cell(cell) for cell in row] for batch in batches for row in batch]
    return ChartTable(
        headers=metadata.headers,
        rows=rows,
        row_count=len(rows),
        total_row_count=metadata.total_rows,
        truncated=metadata.total_rows > max_rows,
    )


async def assemble_chart_data(
    chart_object: Any,
    sheet_id: str,
    chart_id: str,
    max_rows: int,
    page_size: int,
    include_metadata: bool,
    *,
    settings: RetrievalSettings,
    logger: Optional[Logger] = None,
    sleep: Sleep = asyncio.sleep,
) -> ChartDataResult:
    """Describe a chart and retrieve its rows, falling back to the raw layout.

    Args:
        chart_object: Engine object handle exposing get_layout/get_hypercube_data
        sheet_id: Sheet containing the chart (diagnostics only)
        chart_id: Chart object identifier (diagnostics only)
        max_rows: Row budget for this call
        page_size: Rows per hypercube request
        include_metadata: Attach the visualization metadata to the result
        settings: Retry and pacing limits
        logger: Diagnostic sink
        sleep: Awaitable sleep taking seconds (injectable for tests)
    """
    policy = RetryPolicy.from_settings(settings)
    metadata = await extract_metadata(chart_object, policy, logger=logger, sleep=sleep)

    try:
        fetch = fetch_rows(
            chart_object,
            metadata,
            max_rows,
            page_size,
            settings=settings,
            logger=logger,
            sleep=sleep,
        )
        if settings.retrieval_timeout_ms > 0:
            batches = await asyncio.wait_for(fetch, timeout=settings.retrieval_timeout_ms / 1000)
        else:
            batches = await fetch
        data: Union[ChartTable, LayoutFallback] = build_table(metadata, batches, max_rows)
    except Exception as exc:
        if logger is not None:
            logger.error(
                "Failed to get hypercube data",
                sheet_id=sheet_id,
                chart_id=chart_id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
        layout = await fetch_layout(chart_object, policy, logger=logger, sleep=sleep)
        data = LayoutFallback(layout=layout)

    return ChartDataResult(
        type=metadata.type,
        data=data,
        metadata=metadata if include_metadata else None,
    )

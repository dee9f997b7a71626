"""Paged hypercube retrieval.

A chart's hypercube is read as a sequence of row windows, each at most
``page_size`` rows tall and as wide as the cube. Pages are requested strictly
one after another: rows are positional, and the tenant rate-limits bursts.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from qlik_mcp.config import RetrievalSettings
from qlik_mcp.logger import Logger
from qlik_mcp.retrieval.metadata import VisualizationMetadata
from qlik_mcp.retrieval.retry import RetryPolicy, Sleep, with_retry

HYPERCUBE_PATH = "/qHyperCubeDef"

RowBatch = List[List[Dict[str, Any]]]


@dataclass(frozen=True)
class PageRequest:
    """Rectangular window into a hypercube."""

    top: int
    height: int
    width: int
    left: int = 0

    def to_engine(self) -> Dict[str, int]:
        return {
            "qTop": self.top,
            "qLeft": self.left,
            "qWidth": self.width,
            "qHeight": self.height,
        }


def rows_to_fetch(total_rows: int, max_rows: int) -> int:
    return max(min(total_rows, max_rows), 0)


def plan_pages(total_rows: int, total_columns: int, max_rows: int, page_size: int) -> List[PageRequest]:
    """Windows covering the first ``min(total_rows, max_rows)`` rows.

    Raises:
        ValueError: If page_size is not positive
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")

    limit = rows_to_fetch(total_rows, max_rows)
    return [
        PageRequest(top=start, height=min(page_size, limit - start), width=total_columns)
        for start in range(0, limit, page_size)
    ]


def _matrix_from(data_pages: Any) -> RowBatch:
    if isinstance(data_pages, list) and data_pages and isinstance(data_pages[0], dict):
        return list(data_pages[0].get("qMatrix") or [])
    return []


async def fetch_rows(
    chart_object: Any,
    metadata: VisualizationMetadata,
    max_rows: int,
    page_size: int,
    *,
    settings: RetrievalSettings,
    logger: Optional[Logger] = None,
    sleep: Sleep = asyncio.sleep,
) -> List[RowBatch]:
    """Fetch the chart's rows page by page, in request order.

    A page that still fails after its retries aborts the whole fetch; the
    exception propagates and already-fetched pages are dropped.
    """
    if metadata.total_rows > max_rows and logger is not None:
        logger.warning(
            f"Chart has {metadata.total_rows} rows but only retrieving {max_rows} due to limit",
            total_rows=metadata.total_rows,
            max_rows=max_rows,
        )

    pages = plan_pages(metadata.total_rows, metadata.total_columns, max_rows, page_size)
    policy = RetryPolicy.from_settings(settings)
    batches: List[RowBatch] = []

    for index, page in enumerate(pages):
        if index > 0:
            await sleep(settings.request_delay_ms / 1000)

        data_pages = await with_retry(
            lambda page=page: chart_object.get_hypercube_data(HYPERCUBE_PATH, [page.to_engine()]),
            policy,
            logger=logger,
            description="GetHyperCubeData",
            sleep=sleep,
        )
        batches.append(_matrix_from(data_pages))

    if logger is not None:
        logger.debug(
            "Hypercube pages fetched",
            pages=len(pages),
            rows=sum(len(batch) for batch in batches),
        )
    return batches

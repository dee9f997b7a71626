"""Chunked, retrying chart data retrieval."""

from qlik_mcp.retrieval.assembler import (
    ChartDataResult,
    ChartTable,
    LayoutFallback,
    assemble_chart_data,
)
from qlik_mcp.retrieval.metadata import (
    DimensionInfo,
    MeasureFormat,
    MeasureInfo,
    VisualizationMetadata,
    build_metadata,
    extract_metadata,
)
from qlik_mcp.retrieval.paging import PageRequest, fetch_rows, plan_pages
from qlik_mcp.retrieval.retry import RetryPolicy, with_retry

__all__ = [
    "ChartDataResult",
    "ChartTable",
    "LayoutFallback",
    "assemble_chart_data",
    "DimensionInfo",
    "MeasureFormat",
    "MeasureInfo",
    "VisualizationMetadata",
    "build_metadata",
    "extract_metadata",
    "PageRequest",
    "fetch_rows",
    "plan_pages",
    "RetryPolicy",
    "with_retry",
]

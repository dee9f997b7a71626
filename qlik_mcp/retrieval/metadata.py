"""Visualization metadata derived from a Qlik object layout."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from qlik_mcp.logger import Logger
from qlik_mcp.retrieval.retry import RetryPolicy, Sleep, with_retry


def _drop_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


@dataclass(frozen=True)
class DimensionInfo:
    title: Optional[str]
    label: Optional[str] = None
    field_definitions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "title": self.title,
                "label": self.label,
                "fieldDefinitions": list(self.field_definitions),
            }
        )


@dataclass(frozen=True)
class MeasureFormat:
    type: Optional[str] = None
    format: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({"type": self.type, "format": self.format})


@dataclass(frozen=True)
class MeasureInfo:
    title: Optional[str]
    label: Optional[str] = None
    format: MeasureFormat = field(default_factory=MeasureFormat)

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {"title": self.title, "label": self.label, "format": self.format.to_dict()}
        )


@dataclass(frozen=True)
class VisualizationMetadata:
    """Normalized description of one chart; totals bound the paged fetch."""

    type: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    footnote: Optional[str] = None
    dimensions: Tuple[DimensionInfo, ...] = ()
    measures: Tuple[MeasureInfo, ...] = ()
    total_rows: int = 0
    total_columns: int = 0

    @property
    def headers(self) -> List[Optional[str]]:
        """Column headers: dimension titles first, then measure titles."""
        return [d.title for d in self.dimensions] + [m.title for m in self.measures]

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "type": self.type,
                "title": self.title,
                "subtitle": self.subtitle,
                "footnote": self.footnote,
                "dimensions": [d.to_dict() for d in self.dimensions],
                "measures": [m.to_dict() for m in self.measures],
                "totalRows": self.total_rows,
                "totalColumns": self.total_columns,
            }
        )


def _first_non_empty(*values: Any) -> Any:
    for value in values:
        if value:
            return value
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _non_negative_int(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def build_metadata(layout: Dict[str, Any]) -> VisualizationMetadata:
    """Pure mapping from a layout dict; missing optional fields never raise."""
    layout = _as_dict(layout)
    viz_type = _first_non_empty(
        layout.get("visualization"),
        _as_dict(layout.get("qInfo")).get("qType"),
        "unknown",
    )
    title = _first_non_empty(layout.get("title"), _as_dict(layout.get("qMetaDef")).get("title"))

    dimensions: Tuple[DimensionInfo, ...] = ()
    measures: Tuple[MeasureInfo, ...] = ()
    total_rows = 0
    total_columns = 0

    hypercube = layout.get("qHyperCube")
    if isinstance(hypercube, dict):
        dimensions = tuple(
            DimensionInfo(
                title=dim.get("qFallbackTitle"),
                label=dim.get("qLabel"),
                field_definitions=tuple(dim.get("qFieldDefs") or ()),
            )
            for dim in (hypercube.get("qDimensionInfo") or [])
            if isinstance(dim, dict)
        )
        measures = tuple(
            MeasureInfo(
                title=measure.get("qFallbackTitle"),
                label=measure.get("qLabel"),
                format=MeasureFormat(
                    type=_as_dict(measure.get("qNumFormat")).get("qType"),
                    format=_as_dict(measure.get("qNumFormat")).get("qFmt"),
                ),
            )
            for measure in (hypercube.get("qMeasureInfo") or [])
            if isinstance(measure, dict)
        )
        size = _as_dict(hypercube.get("qSize"))
        total_rows = _non_negative_int(size.get("qcy"))
        total_columns = _non_negative_int(size.get("qcx"))

    return VisualizationMetadata(
        type=viz_type,
        title=title,
        subtitle=layout.get("subtitle"),
        footnote=layout.get("footnote"),
        dimensions=dimensions,
        measures=measures,
        total_rows=total_rows,
        total_columns=total_columns,
    )


async def fetch_layout(
    viz_object: Any,
    policy: RetryPolicy,
    logger: Optional[Logger] = None,
    sleep: Sleep = asyncio.sleep,
) -> Dict[str, Any]:
    return await with_retry(
        viz_object.get_layout,
        policy,
        logger=logger,
        description="GetLayout",
        sleep=sleep,
    )


async def extract_metadata(
    viz_object: Any,
    policy: RetryPolicy,
    logger: Optional[Logger] = None,
    sleep: Sleep = asyncio.sleep,
) -> VisualizationMetadata:
    """Fetch the object's layout (retried) and describe the visualization."""
    layout = await fetch_layout(viz_object, policy, logger=logger, sleep=sleep)
    metadata = build_metadata(layout)
    if logger is not None:
        logger.debug(
            "Visualization metadata extracted",
            chart_type=metadata.type,
            total_rows=metadata.total_rows,
            total_columns=metadata.total_columns,
        )
    return metadata

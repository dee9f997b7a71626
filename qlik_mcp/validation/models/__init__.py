"""Pydantic models for tool inputs."""

from qlik_mcp.validation.models.inputs import (
    AppIdInput,
    GetAppsInput,
    GetChartDataInput,
    GetSheetChartsInput,
)

__all__ = [
    "AppIdInput",
    "GetAppsInput",
    "GetChartDataInput",
    "GetSheetChartsInput",
]

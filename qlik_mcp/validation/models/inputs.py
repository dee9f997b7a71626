"""Input models for MCP server tools."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GetAppsInput(BaseModel):
    """Input for qlik_get_apps.

    Args:
        limit: Maximum number of apps to return (1-100)
        offset: Pagination cursor returned as ``pagination.next`` by a previous call
    """

    model_config = ConfigDict(extra="ignore")  # Ignore extra fields from MCP

    limit: int = Field(default=100, ge=1, le=100)
    offset: Optional[str] = None


class AppIdInput(BaseModel):
    """Input for qlik_get_app_sheets.

    Args:
        app_id: Qlik application id (defaults to QLIK_APP_ID)
    """

    model_config = ConfigDict(extra="ignore")

    app_id: Optional[str] = None


class GetSheetChartsInput(BaseModel):
    """Input for qlik_get_sheet_charts."""

    model_config = ConfigDict(extra="ignore")

    sheet_id: str
    app_id: Optional[str] = None


class GetChartDataInput(BaseModel):
    """Input for qlik_get_chart_data.

    Args:
        sheet_id: Sheet containing the chart
        chart_id: Chart object id
        app_id: Qlik application id (defaults to QLIK_APP_ID)
        max_rows: Row budget (defaults to MAX_TOTAL_ROWS)
        page_size: Rows per engine request (defaults to MAX_ROWS_PER_REQUEST)
        include_metadata: Attach dimension/measure metadata to the result
    """

    model_config = ConfigDict(extra="ignore")

    sheet_id: str
    chart_id: str
    app_id: Optional[str] = None
    max_rows: Optional[int] = Field(default=None, ge=0)
    page_size: Optional[int] = Field(default=None, gt=0)
    include_metadata: bool = True

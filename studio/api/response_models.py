"""
Pydantic request and response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str
    loaded: bool
    filename: Optional[str] = None
    rows: int
    columns: int
    cards: int


class ColumnInfo(BaseModel):
    name: str
    kind: str
    blanks: int


class ColumnsResponse(BaseModel):
    columns: list[ColumnInfo]
    dimensions: list[str]
    measures: list[str]


class ColumnValuesResponse(BaseModel):
    column: str
    kind: str
    values: list[str]
    candidates: list[str]
    blank_count: int
    active: bool


class ImportResponse(BaseModel):
    status: str
    filename: str
    rows: int
    columns: list[str]


class OperationResponse(BaseModel):
    """Outcome of a state-changing call; applied is False for a no-op."""
    applied: bool
    state: dict[str, Any] = {}


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class PageRequest(BaseModel):
    page: int


class RowsPerPageRequest(BaseModel):
    rows_per_page: int


class SortRequest(BaseModel):
    column: str
    direction: Optional[str] = None   # omitted: toggle asc -> desc


class SelectionRequest(BaseModel):
    values: list[str]


class ValueRequest(BaseModel):
    value: str


class DateRangeRequest(BaseModel):
    date_from: Optional[str] = None
    date_to: Optional[str] = None


class SearchRequest(BaseModel):
    term: str = ""


class EditBeginRequest(BaseModel):
    row_index: int
    column: str


class CardUpdateRequest(BaseModel):
    dimension: Optional[str] = None
    measure: Optional[str] = None
    chart_kind: Optional[str] = None
    expanded: Optional[bool] = None
    colspan: Optional[int] = None


class CardPairRequest(BaseModel):
    source_id: str
    target_id: str


class ReferenceSortRequest(BaseModel):
    column: str

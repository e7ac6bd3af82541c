"""
Meta endpoints: health, columns, column values.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from studio.api.dependencies import get_session, get_session_or_empty, require_column
from studio.api.response_models import (
    ColumnInfo,
    ColumnsResponse,
    ColumnValuesResponse,
    HealthResponse,
)
from studio.session import DashboardSession

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(session: DashboardSession = Depends(get_session_or_empty)):
    return HealthResponse(
        status="ok",
        loaded=session.is_loaded,
        filename=session.filename,
        rows=session.store.row_count(),
        columns=len(session.store.columns),
        cards=len(session.cards),
    )


@router.get("/columns", response_model=ColumnsResponse)
def list_columns(session: DashboardSession = Depends(get_session)):
    store = session.store
    return ColumnsResponse(
        columns=[
            ColumnInfo(name=c, kind=store.column_kind(c).value, blanks=store.blank_count(c))
            for c in store.columns
        ],
        dimensions=session.cards.dimensions,
        measures=session.cards.measures,
    )


@router.get("/columns/{column}/values", response_model=ColumnValuesResponse)
def column_values(column: str, session: DashboardSession = Depends(get_session)):
    """Filter candidates for one column: the full domain, not the filtered subset."""
    require_column(session, column)
    filters = session.filters
    return ColumnValuesResponse(
        column=column,
        kind=session.store.column_kind(column).value,
        values=filters.unique_values(column),
        candidates=filters.candidate_values(column),
        blank_count=filters.blank_count(column),
        active=filters.has_active_filter(column),
    )

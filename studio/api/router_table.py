"""
Table view endpoints: rows, pagination, sort, column filters, cell editing, summary charts.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from studio.analytics.common import sanitize_for_json
from studio.api.dependencies import get_session, require_column
from studio.api.response_models import (
    DateRangeRequest,
    EditBeginRequest,
    OperationResponse,
    PageRequest,
    RowsPerPageRequest,
    SearchRequest,
    SelectionRequest,
    SortRequest,
    ValueRequest,
)
from studio.session import DashboardSession

router = APIRouter(prefix="/api", tags=["table"])


def _safe_json(data: dict) -> JSONResponse:
    return JSONResponse(content=sanitize_for_json(data))


def _filter_result(session: DashboardSession, column: str, applied: bool) -> OperationResponse:
    f = session.filters.filters.get(column)
    return OperationResponse(applied=applied, state={
        "column": column,
        "filter": f.to_dict() if f else None,
        "active": session.filters.has_active_filter(column),
        "filtered_count": session.filtered_count(),
        "page": session.paginator.page,
    })


# ── Rows ───────────────────────────────────────────────────────────

@router.get("/table")
def table(session: DashboardSession = Depends(get_session)):
    """Current page of the filtered and sorted rows."""
    return _safe_json(session.table_payload())


@router.post("/table/page")
def go_to_page(body: PageRequest, session: DashboardSession = Depends(get_session)):
    session.go_to_page(body.page)
    return _safe_json(session.table_payload())


@router.post("/table/rows-per-page")
def rows_per_page(body: RowsPerPageRequest, session: DashboardSession = Depends(get_session)):
    if not session.set_rows_per_page(body.rows_per_page):
        raise HTTPException(400, f"Unsupported rows per page: {body.rows_per_page}")
    return _safe_json(session.table_payload())


# ── Sort ───────────────────────────────────────────────────────────

@router.post("/table/sort")
def sort(body: SortRequest, session: DashboardSession = Depends(get_session)):
    require_column(session, body.column)
    try:
        session.sort.sort(body.column, body.direction)
    except ValueError:
        raise HTTPException(400, f"Invalid sort direction: {body.direction}")
    return _safe_json(session.table_payload())


@router.delete("/table/sort")
def clear_sort(session: DashboardSession = Depends(get_session)):
    session.sort.clear()
    return _safe_json(session.table_payload())


# ── Filters ────────────────────────────────────────────────────────

@router.post("/filters/{column}/selected", response_model=OperationResponse)
def set_selected(column: str, body: SelectionRequest, session: DashboardSession = Depends(get_session)):
    require_column(session, column)
    return _filter_result(session, column, session.filters.set_selected(column, body.values))


@router.post("/filters/{column}/toggle", response_model=OperationResponse)
def toggle_value(column: str, body: ValueRequest, session: DashboardSession = Depends(get_session)):
    require_column(session, column)
    return _filter_result(session, column, session.filters.toggle_value(column, body.value))


@router.post("/filters/{column}/select-all", response_model=OperationResponse)
def toggle_select_all(column: str, session: DashboardSession = Depends(get_session)):
    require_column(session, column)
    return _filter_result(session, column, session.filters.toggle_select_all(column))


@router.post("/filters/{column}/blanks", response_model=OperationResponse)
def toggle_blanks(column: str, session: DashboardSession = Depends(get_session)):
    require_column(session, column)
    return _filter_result(session, column, session.filters.toggle_blanks(column))


@router.post("/filters/{column}/date-range", response_model=OperationResponse)
def set_date_range(column: str, body: DateRangeRequest, session: DashboardSession = Depends(get_session)):
    require_column(session, column)
    applied = session.filters.set_date_range(column, body.date_from, body.date_to)
    return _filter_result(session, column, applied)


@router.post("/filters/{column}/search", response_model=OperationResponse)
def set_search(column: str, body: SearchRequest, session: DashboardSession = Depends(get_session)):
    require_column(session, column)
    result = _filter_result(session, column, session.filters.set_search(column, body.term))
    result.state["candidates"] = session.filters.candidate_values(column)
    return result


@router.post("/filters/{column}/open", response_model=OperationResponse)
def toggle_open(column: str, session: DashboardSession = Depends(get_session)):
    require_column(session, column)
    return _filter_result(session, column, session.filters.toggle_open(column))


@router.delete("/filters/{column}", response_model=OperationResponse)
def clear_filter(column: str, session: DashboardSession = Depends(get_session)):
    require_column(session, column)
    return _filter_result(session, column, session.filters.clear(column))


@router.delete("/filters", response_model=OperationResponse)
def clear_all_filters(session: DashboardSession = Depends(get_session)):
    session.filters.clear_all()
    return OperationResponse(applied=True, state={"filtered_count": session.filtered_count()})


# ── Cell edit ──────────────────────────────────────────────────────

@router.post("/edit/begin", response_model=OperationResponse)
def begin_edit(body: EditBeginRequest, session: DashboardSession = Depends(get_session)):
    edit = session.begin_edit(body.row_index, body.column)
    if edit is None:
        raise HTTPException(404, f"No cell at row {body.row_index}, column '{body.column}'")
    return OperationResponse(applied=True, state=edit.to_dict())


@router.post("/edit/value", response_model=OperationResponse)
def update_edit(body: ValueRequest, session: DashboardSession = Depends(get_session)):
    edit = session.update_edit(body.value)
    return OperationResponse(applied=edit is not None, state=edit.to_dict() if edit else {})


@router.post("/edit/commit", response_model=OperationResponse)
def commit_edit(session: DashboardSession = Depends(get_session)):
    edit = session.edit
    applied = session.commit_edit()
    state = {}
    if applied:
        state = {**edit.to_dict(), "kind": session.store.column_kind(edit.column).value}
    return OperationResponse(applied=applied, state=state)


@router.post("/edit/cancel", response_model=OperationResponse)
def cancel_edit(session: DashboardSession = Depends(get_session)):
    had_edit = session.edit is not None
    session.cancel_edit()
    return OperationResponse(applied=had_edit)


# ── Summary charts ─────────────────────────────────────────────────

@router.get("/summary")
def summary(session: DashboardSession = Depends(get_session)):
    """The fixed region and pillar charts over the filtered rows."""
    return _safe_json({
        "measure": session.default_measure(),
        "filtered_count": session.filtered_count(),
        "charts": {
            dim: [e.to_dict() for e in entries]
            for dim, entries in session.summary_series().items()
        },
    })

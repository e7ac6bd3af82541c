"""
Ad-hoc aggregation endpoints over the filtered rows.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from studio.analytics.aggregation import aggregate_stacked, series_total
from studio.analytics.common import format_value, sanitize_for_json
from studio.analytics.presentation import x_axis_props
from studio.api.dependencies import get_session, require_column
from studio.session import DashboardSession

router = APIRouter(prefix="/api/aggregate", tags=["aggregate"])


def _measure(session: DashboardSession, measure: Optional[str]) -> str:
    measure = measure or session.default_measure()
    if measure is None:
        raise HTTPException(400, "No measure column available")
    return require_column(session, measure)


@router.get("")
def aggregate_series(
    dimension: str = Query(..., description="Column to group by"),
    measure: Optional[str] = Query(None, description="Column to sum (defaults to the first measure)"),
    width: float = Query(400, description="Chart container width in px"),
    session: DashboardSession = Depends(get_session),
):
    require_column(session, dimension)
    measure = _measure(session, measure)
    entries = session.series(dimension, measure)
    total = series_total(entries)
    return JSONResponse(content=sanitize_for_json({
        "dimension": dimension,
        "measure": measure,
        "series": [e.to_dict() for e in entries],
        "total": total,
        "formatted_total": format_value(total),
        "x_axis": x_axis_props(len(entries), width),
    }))


@router.get("/stacked")
def aggregate_stacked_series(
    dimension: str = Query(...),
    segment: str = Query(..., description="Column whose values become the stacked segments"),
    measure: Optional[str] = Query(None),
    percentage: bool = Query(False, description="Add per-segment share of each bar"),
    session: DashboardSession = Depends(get_session),
):
    require_column(session, dimension)
    require_column(session, segment)
    measure = _measure(session, measure)
    result = aggregate_stacked(session.processed(), dimension, segment, measure, percentage)
    return JSONResponse(content=sanitize_for_json({
        "dimension": dimension, "segment": segment, "measure": measure, **result,
    }))

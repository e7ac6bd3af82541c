"""
Executive view endpoints: card grid operations, undo/redo, series, workbook export.
"""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse, JSONResponse

from studio.analytics.common import sanitize_for_json
from studio.api.dependencies import get_session
from studio.api.response_models import CardPairRequest, CardUpdateRequest, OperationResponse
from studio.config import EXPORTS_FOLDER
from studio.reports import card_report
from studio.session import DashboardSession

router = APIRouter(prefix="/api/cards", tags=["cards"])


def _result(session: DashboardSession, applied: bool) -> OperationResponse:
    return OperationResponse(applied=applied, state=sanitize_for_json(session.cards.state()))


def _require_card(session: DashboardSession, card_id: str) -> None:
    if session.cards.get(card_id) is None:
        raise HTTPException(404, f"Unknown card '{card_id}'")


@router.get("")
def list_cards(session: DashboardSession = Depends(get_session)):
    return JSONResponse(content=sanitize_for_json(session.cards.state()))


@router.post("", response_model=OperationResponse)
def add_card(session: DashboardSession = Depends(get_session)):
    """Add a card; a no-op at capacity or without eligible columns."""
    return _result(session, session.cards.add() is not None)


@router.patch("/{card_id}", response_model=OperationResponse)
def update_card(card_id: str, body: CardUpdateRequest, session: DashboardSession = Depends(get_session)):
    _require_card(session, card_id)
    changes = body.model_dump(exclude_none=True)
    return _result(session, session.cards.update(card_id, **changes))


@router.delete("/{card_id}", response_model=OperationResponse)
def remove_card(card_id: str, session: DashboardSession = Depends(get_session)):
    return _result(session, session.cards.remove(card_id))


@router.post("/reorder", response_model=OperationResponse)
def reorder(body: CardPairRequest, session: DashboardSession = Depends(get_session)):
    return _result(session, session.cards.reorder(body.source_id, body.target_id))


@router.post("/merge", response_model=OperationResponse)
def merge(body: CardPairRequest, session: DashboardSession = Depends(get_session)):
    return _result(session, session.cards.merge_expand(body.source_id, body.target_id))


@router.post("/{card_id}/expand", response_model=OperationResponse)
def expand_alone(card_id: str, session: DashboardSession = Depends(get_session)):
    return _result(session, session.cards.expand_alone(card_id))


@router.post("/{card_id}/collapse", response_model=OperationResponse)
def collapse(card_id: str, session: DashboardSession = Depends(get_session)):
    return _result(session, session.cards.collapse(card_id))


@router.post("/undo", response_model=OperationResponse)
def undo(session: DashboardSession = Depends(get_session)):
    return _result(session, session.cards.undo())


@router.post("/redo", response_model=OperationResponse)
def redo(session: DashboardSession = Depends(get_session)):
    return _result(session, session.cards.redo())


@router.get("/export")
def export(session: DashboardSession = Depends(get_session)):
    EXPORTS_FOLDER.mkdir(parents=True, exist_ok=True)
    name = f"Executive_View_{datetime.now():%Y%m%d_%H%M%S}.xlsx"
    path = card_report.generate_excel(session, EXPORTS_FOLDER / name)
    return FileResponse(path=str(path), filename=path.name,
                        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")


@router.get("/{card_id}/series")
def card_series(card_id: str, session: DashboardSession = Depends(get_session)):
    payload = session.card_payload(card_id)
    if payload is None:
        raise HTTPException(404, f"Unknown card '{card_id}'")
    return JSONResponse(content=sanitize_for_json(payload))

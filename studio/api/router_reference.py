"""
Reference table endpoints: approvals inbox and source-data history.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from studio.analytics.common import sanitize_for_json
from studio.api.dependencies import get_inbox, get_source_data
from studio.api.response_models import OperationResponse, ReferenceSortRequest
from studio.reference.workspace import InboxWorkspace, ReferenceTable, SourceDataWorkspace

router = APIRouter(prefix="/api", tags=["reference"])


def _table(workspace, tab: str) -> ReferenceTable:
    table = workspace.table(tab)
    if table is None:
        raise HTTPException(404, f"Unknown tab '{tab}' (expected one of {', '.join(workspace.TABS)})")
    return table


# ── Inbox ──────────────────────────────────────────────────────────

@router.get("/inbox/{tab}")
def inbox_tab(tab: str, inbox: InboxWorkspace = Depends(get_inbox)):
    payload = _table(inbox, tab).payload()
    payload["counts"] = inbox.counts()
    return JSONResponse(content=sanitize_for_json(payload))


@router.post("/inbox/{tab}/sort")
def sort_inbox(tab: str, body: ReferenceSortRequest, inbox: InboxWorkspace = Depends(get_inbox)):
    table = _table(inbox, tab)
    table.toggle_sort(body.column)
    return JSONResponse(content=sanitize_for_json(table.payload()))


@router.post("/inbox/pending/{index}/{action}", response_model=OperationResponse)
def resolve_pending(index: int, action: str, inbox: InboxWorkspace = Depends(get_inbox)):
    """Approve or reject the pending record shown at `index`."""
    if action not in ("approve", "reject"):
        raise HTTPException(400, f"Invalid action: {action}")
    moved = inbox.resolve(index, action)
    if moved is None:
        raise HTTPException(404, f"No pending record at index {index}")
    return OperationResponse(applied=True, state={"record": moved, "counts": inbox.counts()})


# ── Source data ────────────────────────────────────────────────────

@router.get("/source-data/{tab}")
def source_data_tab(tab: str, source: SourceDataWorkspace = Depends(get_source_data)):
    payload = _table(source, tab).payload()
    payload["file_type"] = source.file_type
    return JSONResponse(content=sanitize_for_json(payload))


@router.post("/source-data/{tab}/sort")
def sort_source_data(tab: str, body: ReferenceSortRequest,
                     source: SourceDataWorkspace = Depends(get_source_data)):
    table = _table(source, tab)
    table.toggle_sort(body.column)
    return JSONResponse(content=sanitize_for_json(table.payload()))

"""
Upload endpoints: replace the dataset from a CSV upload or the bundled sample.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from loguru import logger

from studio.api.dependencies import get_session_or_empty
from studio.api.response_models import ImportResponse
from studio.data.loader import DatasetImportError
from studio.session import DashboardSession

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload", response_model=ImportResponse)
async def upload_csv(
    file: UploadFile = File(...),
    session: DashboardSession = Depends(get_session_or_empty),
):
    """Import one CSV. On any error the current dataset stays loaded."""
    if not file.filename:
        raise HTTPException(400, "Missing filename")
    content = await file.read()
    try:
        parsed = session.import_csv(content, file.filename)
    except DatasetImportError as exc:
        logger.warning("Import of {} rejected: {}", file.filename, exc)
        raise HTTPException(400, str(exc))
    return ImportResponse(
        status="loaded", filename=file.filename, rows=parsed.row_count, columns=parsed.columns,
    )


@router.post("/sample", response_model=ImportResponse)
def load_sample(session: DashboardSession = Depends(get_session_or_empty)):
    try:
        parsed = session.load_sample()
    except DatasetImportError as exc:
        raise HTTPException(400, str(exc))
    return ImportResponse(
        status="loaded", filename=session.filename or "", rows=parsed.row_count, columns=parsed.columns,
    )

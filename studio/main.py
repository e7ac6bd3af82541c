"""
Budget Studio: FastAPI app factory with startup session setup.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from studio.api.dependencies import set_session, set_workspaces
from studio.api.router_aggregate import router as aggregate_router
from studio.api.router_cards import router as cards_router
from studio.api.router_meta import router as meta_router
from studio.api.router_reference import router as reference_router
from studio.api.router_table import router as table_router
from studio.api.router_upload import router as upload_router
from studio.config import FIXTURES_FOLDER, LOAD_SAMPLE_ON_START, configure_logging
from studio.data.loader import DatasetImportError
from studio.reference.workspace import InboxWorkspace, SourceDataWorkspace
from studio.session import DashboardSession


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the session and reference workspaces at startup."""
    configure_logging()

    session = DashboardSession()
    if LOAD_SAMPLE_ON_START:
        try:
            session.load_sample()
        except DatasetImportError as exc:
            logger.warning("Sample dataset not loaded: {}", exc)
    set_session(session)
    set_workspaces(InboxWorkspace(FIXTURES_FOLDER), SourceDataWorkspace(FIXTURES_FOLDER))

    if session.is_loaded:
        logger.info("Budget Studio ready: {} rows from {}", session.store.row_count(), session.filename)
    else:
        logger.info("Budget Studio ready: no dataset yet, upload a CSV")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Budget Studio API",
        description="Budget allocation dashboard: filter, sort, aggregate and arrange view cards",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(upload_router)
    app.include_router(table_router)
    app.include_router(cards_router)
    app.include_router(aggregate_router)
    app.include_router(reference_router)
    return app


app = create_app()

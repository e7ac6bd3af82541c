"""
FastAPI dependencies: the dashboard session and reference workspace singletons.
"""
from __future__ import annotations

from fastapi import HTTPException

from studio.reference.workspace import InboxWorkspace, SourceDataWorkspace
from studio.session import DashboardSession

# ---------------------------------------------------------------------------
# Global singletons (set during startup)
# ---------------------------------------------------------------------------
_session: DashboardSession | None = None
_inbox: InboxWorkspace | None = None
_source_data: SourceDataWorkspace | None = None


def set_session(session: DashboardSession) -> None:
    global _session
    _session = session


def set_workspaces(inbox: InboxWorkspace, source_data: SourceDataWorkspace) -> None:
    global _inbox, _source_data
    _inbox = inbox
    _source_data = source_data


def get_session_or_empty() -> DashboardSession:
    """Return the session even if no dataset is loaded (for upload/meta endpoints)."""
    if _session is None:
        raise HTTPException(503, "Server not initialized yet")
    return _session


def get_session() -> DashboardSession:
    session = get_session_or_empty()
    if not session.is_loaded:
        raise HTTPException(503, "No dataset loaded yet")
    return session


def get_inbox() -> InboxWorkspace:
    if _inbox is None:
        raise HTTPException(503, "Server not initialized yet")
    return _inbox


def get_source_data() -> SourceDataWorkspace:
    if _source_data is None:
        raise HTTPException(503, "Server not initialized yet")
    return _source_data


def require_column(session: DashboardSession, column: str) -> str:
    if not session.store.has_column(column):
        raise HTTPException(404, f"Unknown column '{column}'")
    return column

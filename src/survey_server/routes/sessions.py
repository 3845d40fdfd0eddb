"""Session management endpoints — get-or-create, list, delete.

A session is identified by an opaque id.  Asking for an unknown id creates
a new session instead of failing, so clients can keep a stale id around
without special handling.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from survey_forms.models import CamelModel, SessionInfo, SessionSummary
from survey_forms.service import SurveyService

from survey_server.dependencies import get_db, get_service

router = APIRouter(tags=["sessions"])


# ------------------------------------------------------------------
# Request / response models
# ------------------------------------------------------------------

class OpenSessionRequest(CamelModel):
    """Body for POST /sessions (``{"sessionId": ...}``), optional."""
    session_id: str | None = None


class DeleteAllResult(BaseModel):
    """Response body for DELETE /sessions."""
    deleted: int


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/sessions")
async def open_session(
    body: OpenSessionRequest | None = None,
    db: AsyncSession = Depends(get_db),
    service: SurveyService = Depends(get_service),
) -> SessionInfo:
    """Return the session with ``session_id``, or create a new one.

    The body may be omitted entirely to always get a new session.
    """
    session_id = body.session_id if body is not None else None
    return await service.get_or_create_session(db, session_id)


@router.get("/sessions")
async def list_sessions(
    db: AsyncSession = Depends(get_db),
    service: SurveyService = Depends(get_service),
) -> list[SessionSummary]:
    """List sessions holding at least one answer, most recently updated first."""
    return await service.list_sessions(db)


@router.delete("/sessions")
async def delete_all_sessions(
    db: AsyncSession = Depends(get_db),
    service: SurveyService = Depends(get_service),
) -> DeleteAllResult:
    """Delete every session and all of their answers."""
    deleted = await service.delete_all_sessions(db)
    return DeleteAllResult(deleted=deleted)


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    db: AsyncSession = Depends(get_db),
    service: SurveyService = Depends(get_service),
) -> None:
    """Delete one session and its answers.  Returns 404 if it does not exist."""
    await service.delete_session(db, session_id)

"""Answer endpoints — load form defaults and save submitted answers.

``GET`` returns the nested default values a form is pre-populated with.
Saving accepts either the flat answer list (``PUT .../answers``) or the
nested values a form produced (``POST .../values``), which are flattened
server-side.  Both are idempotent upserts.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from survey_forms.models.answer import FlatAnswer
from survey_forms.service import SurveyService

from survey_server.dependencies import get_db, get_service

router = APIRouter(tags=["answers"])


class SaveResult(BaseModel):
    """Response body for answer saves."""
    saved: int


@router.get("/sessions/{session_id}/answers")
async def get_answers(
    session_id: str,
    db: AsyncSession = Depends(get_db),
    service: SurveyService = Depends(get_service),
) -> dict[str, Any]:
    """Return the session's answers as nested form default values."""
    return await service.get_session_answers(db, session_id)


@router.put("/sessions/{session_id}/answers")
async def save_answers(
    session_id: str,
    answers: list[FlatAnswer],
    db: AsyncSession = Depends(get_db),
    service: SurveyService = Depends(get_service),
) -> SaveResult:
    """Upsert a list of flat answers (camelCase JSON keys)."""
    saved = await service.save_answers(db, session_id, answers)
    return SaveResult(saved=saved)


@router.post("/sessions/{session_id}/values")
async def save_values(
    session_id: str,
    values: dict[str, Any],
    db: AsyncSession = Depends(get_db),
    service: SurveyService = Depends(get_service),
) -> SaveResult:
    """Flatten nested form values and upsert the resulting answers.

    Returns 422 when a value has a shape that cannot be flattened.
    """
    try:
        saved = await service.save_values(db, session_id, values)
    except TypeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return SaveResult(saved=saved)

"""Question schema endpoints — the locale-resolved question tree.

The locale comes from the ``locale`` query parameter, then the ``locale``
cookie, then the server default.  ``PUT /locale`` stores the choice in
the cookie.
"""

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from survey_forms.constants import LOCALE_COOKIE_MAX_AGE, LOCALE_COOKIE_NAME
from survey_forms.locale import resolve_locale
from survey_forms.models.question import QuestionNode
from survey_forms.service import SurveyService

from survey_server.dependencies import get_db, get_locale, get_service

router = APIRouter(tags=["questions"])


class SetLocaleRequest(BaseModel):
    """Body for PUT /locale."""
    locale: str


class LocaleResult(BaseModel):
    """The locale that was actually stored."""
    locale: str


@router.get("/questions")
async def get_questions(
    locale: str = Depends(get_locale),
    db: AsyncSession = Depends(get_db),
    service: SurveyService = Depends(get_service),
) -> list[QuestionNode]:
    """Return the root question nodes with their nested children."""
    return await service.get_questions_hierarchy(db, locale)


@router.put("/locale")
async def set_locale(body: SetLocaleRequest, response: Response) -> LocaleResult:
    """Persist the preferred locale in a cookie.

    Unsupported locales are replaced by the default before being stored.
    """
    locale = resolve_locale(body.locale)
    response.set_cookie(
        LOCALE_COOKIE_NAME,
        locale,
        max_age=LOCALE_COOKIE_MAX_AGE,
    )
    return LocaleResult(locale=locale)

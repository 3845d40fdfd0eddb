"""FastAPI dependency injection — provides DB sessions, the service, and locale.

Each request that touches the database gets a fresh ``AsyncSession`` via
``get_db()``.  The session is committed on success and rolled back on error,
matching the SDK convention where the service and repositories call
``flush()`` but never ``commit()``.
"""

from typing import AsyncGenerator

from fastapi import Cookie, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from survey_db.engine import get_session_factory
from survey_forms.constants import LOCALE_COOKIE_NAME
from survey_forms.locale import resolve_locale
from survey_forms.service import SurveyService


# ------------------------------------------------------------------
# Database session — transaction boundary lives here
# ------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session; commit on success, rollback on error.

    A save is many independent upserts; committing them together here means
    a failed request leaves none of them behind.
    """
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ------------------------------------------------------------------
# Service — stashed on app.state by the app factory
# ------------------------------------------------------------------

def get_service(request: Request) -> SurveyService:
    """Return the SurveyService singleton from ``app.state``."""
    return request.app.state.service


# ------------------------------------------------------------------
# Locale — query parameter first, then the locale cookie
# ------------------------------------------------------------------

async def get_locale(
    locale: str | None = Query(None),
    locale_cookie: str | None = Cookie(None, alias=LOCALE_COOKIE_NAME),
) -> str:
    """Resolve the request locale, falling back to the default locale."""
    return resolve_locale(locale or locale_cookie)

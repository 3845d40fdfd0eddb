"""survey_db — persistence layer for questionnaire schemas and answers.

This package provides the ORM models, async engine factory, and the
repositories that read the question schema and read/write form sessions
and their flat answer rows.  It is consumed by the ``survey_forms`` service
layer and the FastAPI server.
"""

from survey_db.engine import get_engine, get_session_factory
from survey_db.models import Answer, ContentType, FormSession, Question
from survey_db.repository import (
    AnswerRepository,
    QuestionRepository,
    SessionRepository,
)

__all__ = [
    "Answer",
    "ContentType",
    "FormSession",
    "Question",
    "get_engine",
    "get_session_factory",
    "AnswerRepository",
    "QuestionRepository",
    "SessionRepository",
]

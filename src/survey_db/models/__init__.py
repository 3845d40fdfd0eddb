"""ORM models for survey_db."""

from survey_db.models.answer import Answer
from survey_db.models.base import Base
from survey_db.models.enums import ContentType
from survey_db.models.question import (
    EnumOption,
    EnumOptionLabel,
    Question,
    QuestionLabel,
)
from survey_db.models.session import FormSession

__all__ = [
    "Answer",
    "Base",
    "ContentType",
    "EnumOption",
    "EnumOptionLabel",
    "FormSession",
    "Question",
    "QuestionLabel",
]

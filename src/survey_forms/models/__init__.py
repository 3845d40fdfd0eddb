"""Public model re-exports for survey_forms.

Consumers should import from ``survey_forms.models`` rather than reaching
into sub-modules directly.
"""

# --- Base ---
from survey_forms.models.base import CamelModel

# --- Question schema ---
from survey_forms.models.question import (
    ContentType,
    EnumOptionDefinition,
    EnumOptionNode,
    QuestionDefinition,
    QuestionNode,
)

# --- Answers ---
from survey_forms.models.answer import (
    AnswerLike,
    FlatAnswer,
    NestedValue,
    NestedValues,
    Primitive,
    RowArray,
    RowObject,
)

# --- Sessions ---
from survey_forms.models.session import SessionInfo, SessionSummary

__all__ = [
    # Base
    "CamelModel",
    # Questions
    "ContentType",
    "EnumOptionDefinition",
    "EnumOptionNode",
    "QuestionDefinition",
    "QuestionNode",
    # Answers
    "AnswerLike",
    "FlatAnswer",
    "NestedValue",
    "NestedValues",
    "Primitive",
    "RowArray",
    "RowObject",
    # Sessions
    "SessionInfo",
    "SessionSummary",
]

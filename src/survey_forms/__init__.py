"""survey_forms — hierarchical questionnaire SDK.

Public API:
    SurveyService        — question tree, session lifecycle, answer load/save
    SessionNotFoundError — raised when saving to or deleting an unknown session
    build_tree           — flat question definitions -> locale-resolved tree
    decode_answers       — flat answer rows -> nested form default values
    flatten_values       — nested form values -> flat answers
    QuestionIndex        — question -> parent / table lookup used by decoding
    load_questions       — read a CSV or YAML question schema file
    resolve_locale       — map a requested locale onto a supported one

Data models:
    QuestionDefinition   — flat schema record (all locales)
    QuestionNode         — locale-resolved tree node
    FlatAnswer           — one stored answer (camelCase JSON wire shape)
    SessionInfo          — public view of a form session
    SessionSummary       — session listing entry with answer count
"""

from survey_forms.codec import QuestionIndex, decode_answers, flatten_values
from survey_forms.locale import resolve_locale
from survey_forms.models import (
    EnumOptionDefinition,
    EnumOptionNode,
    FlatAnswer,
    NestedValues,
    QuestionDefinition,
    QuestionNode,
    SessionInfo,
    SessionSummary,
)
from survey_forms.schema import load_questions
from survey_forms.service import SessionNotFoundError, SurveyService
from survey_forms.tree import build_tree

__all__ = [
    # Service
    "SurveyService",
    "SessionNotFoundError",
    # Core transforms
    "build_tree",
    "decode_answers",
    "flatten_values",
    "QuestionIndex",
    "load_questions",
    "resolve_locale",
    # Models
    "EnumOptionDefinition",
    "EnumOptionNode",
    "FlatAnswer",
    "NestedValues",
    "QuestionDefinition",
    "QuestionNode",
    "SessionInfo",
    "SessionSummary",
]

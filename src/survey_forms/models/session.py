"""Session models — the public view of form sessions.

Decoupled from the ORM ``FormSession`` so API consumers never see database
internals.  Both serialise with camelCase keys (``createdAt``,
``answerCount``).
"""

from datetime import datetime

from survey_forms.models.base import CamelModel


class SessionInfo(CamelModel):
    """Identity and timestamps of a form session."""

    id: str
    created_at: datetime
    updated_at: datetime


class SessionSummary(SessionInfo):
    """Session listing entry with the number of stored answers."""

    answer_count: int

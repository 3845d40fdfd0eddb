"""SurveyService — the presentation-facing interface of the SDK.

Wires the repositories in ``survey_db`` to the pure tree builder and answer
codec:

  - ``get_questions_hierarchy``: one bulk schema read -> ``build_tree``
  - ``get_session_answers``: answer rows + question index -> ``decode_answers``
  - ``save_answers`` / ``save_values``: flat (or nested, via
    ``flatten_values``) answers -> one upsert per answer
  - session lifecycle: get-or-create, list, delete

Every method takes an ``AsyncSession``; methods flush but never commit, so
the caller (the FastAPI ``get_db`` dependency, or a CLI) owns the
transaction.

Usage::

    service = SurveyService()
    tree = await service.get_questions_hierarchy(db, locale="en")
    info = await service.get_or_create_session(db, session_id=maybe_id)
    defaults = await service.get_session_answers(db, info.id)
    await service.save_answers(db, info.id, answers)
    await db.commit()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from survey_db.models.question import (
    EnumOption,
    EnumOptionLabel,
    Question,
    QuestionLabel,
)
from survey_db.models.session import FormSession
from survey_db.repository import (
    AnswerRepository,
    QuestionRepository,
    SessionRepository,
)

from survey_forms.codec import QuestionIndex, decode_answers, flatten_values
from survey_forms.locale import resolve_locale
from survey_forms.models.answer import FlatAnswer, NestedValue, NestedValues
from survey_forms.models.question import (
    EnumOptionDefinition,
    QuestionDefinition,
    QuestionNode,
)
from survey_forms.models.session import SessionInfo, SessionSummary
from survey_forms.tree import build_tree

logger = logging.getLogger(__name__)


class SessionNotFoundError(ValueError):
    """Raised when an operation targets a session id that does not exist."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: session_id={session_id}")
        self.session_id = session_id


class SurveyService:
    """Reads the question tree and reads/writes a session's answers."""

    def __init__(self) -> None:
        self._questions = QuestionRepository()
        self._sessions = SessionRepository()
        self._answers = AnswerRepository()

    # ==================================================================
    # Question schema
    # ==================================================================

    async def get_questions_hierarchy(
        self, db: AsyncSession, locale: str | None = None
    ) -> list[QuestionNode]:
        """Return the question tree with labels resolved for ``locale``."""
        definitions = await self.list_question_definitions(db)
        return build_tree(definitions, resolve_locale(locale))

    async def list_question_definitions(
        self, db: AsyncSession
    ) -> list[QuestionDefinition]:
        """Return the stored schema as flat definitions, all locales included."""
        rows = await self._questions.list_all(db)
        return [self._to_definition(row) for row in rows]

    async def import_questions(
        self, db: AsyncSession, definitions: Sequence[QuestionDefinition]
    ) -> int:
        """Replace the stored schema with ``definitions``.

        All existing answers are deleted as well, since they reference the
        old question ids.
        """
        rows = [self._to_question_row(d) for d in definitions]
        count = await self._questions.replace_all(db, rows)
        logger.info("Imported %d questions", count)
        return count

    # ==================================================================
    # Sessions
    # ==================================================================

    async def get_or_create_session(
        self, db: AsyncSession, session_id: str | None = None
    ) -> SessionInfo:
        """Return the session with ``session_id``, or a new one.

        An unknown id is not an error: a fresh session (with a new id) is
        created instead.
        """
        if session_id:
            row = await self._sessions.get_by_id(db, session_id)
            if row is not None:
                return self._to_session_info(row)
            logger.info("Session %s not found, creating a new one", session_id)

        row = await self._sessions.create_session(db)
        logger.info("Created session %s", row.id)
        return self._to_session_info(row)

    async def list_sessions(self, db: AsyncSession) -> list[SessionSummary]:
        """List sessions that hold at least one answer, most recent first."""
        rows = await self._sessions.list_with_answer_counts(db)
        return [
            SessionSummary(
                id=row.id,
                created_at=row.created_at,
                updated_at=row.updated_at,
                answer_count=count,
            )
            for row, count in rows
            if count > 0
        ]

    async def delete_session(self, db: AsyncSession, session_id: str) -> None:
        """Delete a session and its answers.

        Raises:
            SessionNotFoundError: no session has this id
        """
        deleted = await self._sessions.delete_session(db, session_id)
        if not deleted:
            raise SessionNotFoundError(session_id)
        logger.info("Deleted session %s", session_id)

    async def delete_all_sessions(self, db: AsyncSession) -> int:
        """Delete every session and answer.  Returns the number of sessions removed."""
        deleted = await self._sessions.delete_all(db)
        logger.info("Deleted all sessions: %d removed", deleted)
        return deleted

    async def reset_session(self, db: AsyncSession, session_id: str) -> SessionInfo:
        """Return the session with exactly ``session_id``, emptied of answers.

        Unlike ``get_or_create_session``, a missing session is created under
        the given id.  Used to (re)seed sessions with well-known ids.
        """
        row = await self._sessions.get_by_id(db, session_id)
        if row is None:
            row = await self._sessions.create_session(db, session_id=session_id)
        cleared = await self._answers.delete_for_session(db, session_id)
        logger.info("Reset session %s: %d answers cleared", session_id, cleared)
        return self._to_session_info(row)

    # ==================================================================
    # Answers
    # ==================================================================

    async def get_session_answers(
        self, db: AsyncSession, session_id: str
    ) -> NestedValues:
        """Return the session's answers as nested form default values.

        Only the questions that were actually answered, and their parents,
        are looked up to tell table row fields apart from singletons.
        """
        answers = await self._answers.list_for_session(db, session_id)
        question_ids = list({a.question_id for a in answers})
        parents = await self._questions.get_parent_map(db, question_ids)
        parent_ids = [p for p in set(parents.values()) if p is not None]
        table_ids = await self._questions.get_table_ids(db, parent_ids)
        index = QuestionIndex(parents=parents, table_ids=table_ids)
        return decode_answers(answers, index)

    async def save_answers(
        self, db: AsyncSession, session_id: str, answers: Sequence[FlatAnswer]
    ) -> int:
        """Upsert every answer under (session_id, question_id, row_index).

        Touches the session's ``updated_at`` first.  Each upsert overwrites
        ``value`` and ``row_label`` of an existing row or inserts a new one,
        so saving the same input twice leaves the store unchanged.

        Raises:
            SessionNotFoundError: no session has this id
        """
        row = await self._sessions.get_by_id(db, session_id)
        if row is None:
            raise SessionNotFoundError(session_id)
        await self._sessions.touch(db, row)

        for answer in answers:
            await self._answers.upsert(
                db,
                session_id=session_id,
                question_id=answer.question_id,
                row_index=answer.row_index,
                value=answer.value,
                row_label=answer.row_label or None,
            )
        logger.info("Saved %d answers for session %s", len(answers), session_id)
        return len(answers)

    async def save_values(
        self, db: AsyncSession, session_id: str, values: Mapping[str, NestedValue]
    ) -> int:
        """Flatten nested form values and save them (see ``save_answers``)."""
        return await self.save_answers(db, session_id, flatten_values(values))

    # ==================================================================
    # Row conversion
    # ==================================================================

    @staticmethod
    def _to_session_info(row: FormSession) -> SessionInfo:
        return SessionInfo(
            id=row.id,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _to_definition(row: Question) -> QuestionDefinition:
        return QuestionDefinition(
            id=row.id,
            parent_id=row.parent_id,
            order=row.order,
            content_type=row.content_type,
            unit=row.unit,
            labels={lbl.locale: lbl.label for lbl in row.labels},
            enum_options=[
                EnumOptionDefinition(
                    id=opt.id,
                    order=opt.order,
                    labels={lbl.locale: lbl.label for lbl in opt.labels},
                )
                for opt in row.enum_options
            ],
        )

    @staticmethod
    def _to_question_row(definition: QuestionDefinition) -> Question:
        return Question(
            id=definition.id,
            parent_id=definition.parent_id,
            order=definition.order,
            content_type=definition.content_type,
            unit=definition.unit,
            labels=[
                QuestionLabel(locale=locale, label=label)
                for locale, label in definition.labels.items()
            ],
            enum_options=[
                EnumOption(
                    id=opt.id,
                    order=opt.order,
                    labels=[
                        EnumOptionLabel(locale=locale, label=label)
                        for locale, label in opt.labels.items()
                    ],
                )
                for opt in definition.enum_options
            ],
        )

"""Async repositories for the question schema, form sessions and answers.

All public methods accept an ``AsyncSession`` so the caller controls
transaction boundaries.  Methods call ``flush()`` but never ``commit()``.

The repositories avoid business logic (tree assembly, nested value
decoding); that belongs in ``survey_forms``.  Structural invariants such as
"one answer per (session, question, row index)" are enforced by the
partial unique indexes declared on :class:`Answer`.
"""

from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from survey_db.models.answer import Answer
from survey_db.models.enums import ContentType
from survey_db.models.question import (
    EnumOption,
    EnumOptionLabel,
    Question,
    QuestionLabel,
)
from survey_db.models.session import FormSession


class QuestionRepository:
    """Reads and bulk-replaces the ``questions`` schema tables."""

    async def list_all(self, db: AsyncSession) -> list[Question]:
        """Return every question with labels and enum options loaded eagerly.

        Rows are ordered by ``order`` then ``id``; callers that build a
        tree still re-sort per sibling group.
        """
        stmt = (
            select(Question)
            .options(
                selectinload(Question.labels),
                selectinload(Question.enum_options).selectinload(EnumOption.labels),
            )
            .order_by(Question.order, Question.id)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def get_parent_map(
        self, db: AsyncSession, question_ids: list[str]
    ) -> dict[str, str | None]:
        """Map each known question id to its parent id."""
        if not question_ids:
            return {}
        stmt = select(Question.id, Question.parent_id).where(
            Question.id.in_(set(question_ids))
        )
        result = await db.execute(stmt)
        return {qid: parent_id for qid, parent_id in result.all()}

    async def get_table_ids(self, db: AsyncSession, question_ids: list[str]) -> set[str]:
        """Return the subset of ``question_ids`` whose content type is ``table``."""
        if not question_ids:
            return set()
        stmt = select(Question.id).where(
            Question.id.in_(set(question_ids)),
            Question.content_type == ContentType.TABLE.value,
        )
        result = await db.execute(stmt)
        return set(result.scalars().all())

    async def replace_all(self, db: AsyncSession, questions: list[Question]) -> int:
        """Delete all answers and schema rows, then insert ``questions``.

        Answers reference questions, so they go first.  Child tables are
        cleared explicitly rather than relying on ``ON DELETE CASCADE``,
        which SQLite only honours with foreign keys enabled.
        """
        await db.execute(delete(Answer))
        await db.execute(delete(EnumOptionLabel))
        await db.execute(delete(EnumOption))
        await db.execute(delete(QuestionLabel))
        await db.execute(delete(Question))
        db.add_all(questions)
        await db.flush()
        return len(questions)


class SessionRepository:
    """Async read/write operations on the ``form_sessions`` table."""

    # ------------------------------------------------------------------
    # Create / read
    # ------------------------------------------------------------------

    async def create_session(
        self, db: AsyncSession, *, session_id: str | None = None
    ) -> FormSession:
        """Insert a new session row and return it.

        When ``session_id`` is omitted a random UUID is generated.
        """
        session = FormSession(id=session_id) if session_id else FormSession()
        db.add(session)
        await db.flush()  # Populate defaults (id, timestamps)
        return session

    async def get_by_id(self, db: AsyncSession, session_id: str) -> FormSession | None:
        """Fetch a session by its id."""
        return await db.get(FormSession, session_id)

    async def list_with_answer_counts(
        self, db: AsyncSession
    ) -> list[tuple[FormSession, int]]:
        """List sessions having at least one answer, most recently updated first."""
        answer_count = func.count(Answer.id).label("answer_count")
        stmt = (
            select(FormSession, answer_count)
            .join(Answer, Answer.session_id == FormSession.id)
            .group_by(FormSession.id)
            .having(answer_count > 0)
            .order_by(FormSession.updated_at.desc())
        )
        result = await db.execute(stmt)
        return [(row, count) for row, count in result.all()]

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def touch(self, db: AsyncSession, session: FormSession) -> FormSession:
        """Refresh ``updated_at`` so the session sorts as recently edited."""
        session.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return session

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_session(self, db: AsyncSession, session_id: str) -> int:
        """Delete one session and its answers.  Returns the sessions removed (0 or 1)."""
        await db.execute(delete(Answer).where(Answer.session_id == session_id))
        result = await db.execute(
            delete(FormSession).where(FormSession.id == session_id)
        )
        await db.flush()
        return result.rowcount

    async def delete_all(self, db: AsyncSession) -> int:
        """Delete every session and every answer.  Returns the sessions removed."""
        await db.execute(delete(Answer))
        result = await db.execute(delete(FormSession))
        await db.flush()
        return result.rowcount


class AnswerRepository:
    """Async read/write operations on the ``answers`` table."""

    async def list_for_session(self, db: AsyncSession, session_id: str) -> list[Answer]:
        """Return a session's answers in insertion order."""
        stmt = (
            select(Answer)
            .where(Answer.session_id == session_id)
            .order_by(Answer.id)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_key(
        self,
        db: AsyncSession,
        *,
        session_id: str,
        question_id: str,
        row_index: int | None,
    ) -> Answer | None:
        """Fetch the answer stored under (session_id, question_id, row_index)."""
        if row_index is None:
            row_filter = Answer.row_index.is_(None)
        else:
            row_filter = Answer.row_index == row_index
        stmt = select(Answer).where(
            Answer.session_id == session_id,
            Answer.question_id == question_id,
            row_filter,
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_for_session(self, db: AsyncSession, session_id: str) -> int:
        """Delete every answer of one session.  Returns the rows removed."""
        result = await db.execute(delete(Answer).where(Answer.session_id == session_id))
        await db.flush()
        return result.rowcount

    async def upsert(
        self,
        db: AsyncSession,
        *,
        session_id: str,
        question_id: str,
        row_index: int | None,
        value: str,
        row_label: str | None,
    ) -> Answer:
        """Overwrite the answer at the upsert key, or insert it.

        Only the numeric ``row_index`` takes part in the lookup; the row
        label is payload and is overwritten along with the value.
        """
        existing = await self.get_by_key(
            db, session_id=session_id, question_id=question_id, row_index=row_index,
        )
        if existing is not None:
            existing.value = value
            existing.row_label = row_label
            await db.flush()
            return existing

        answer = Answer(
            session_id=session_id,
            question_id=question_id,
            row_index=row_index,
            value=value,
            row_label=row_label,
        )
        db.add(answer)
        await db.flush()
        return answer

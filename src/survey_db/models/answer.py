"""Answer ORM model — the atomic unit of persisted input.

One row per (session, question, row index).  ``row_index`` is set only for
fields of a table question; ``row_label`` is the optional human name of
that row.
"""

from datetime import datetime, timezone

from sqlalchemy import TIMESTAMP, ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_db.models.base import Base
from survey_db.models.session import FormSession


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Answer(Base):
    """A single stored value for one question (and optionally one table row)."""

    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(
        Text, ForeignKey("form_sessions.id", ondelete="CASCADE"), nullable=False
    )
    question_id: Mapped[str] = mapped_column(
        Text, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    # Numbers are stored as their decimal text
    value: Mapped[str] = mapped_column(Text, nullable=False)
    row_index: Mapped[int | None] = mapped_column(Integer, nullable=True)
    row_label: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    session: Mapped[FormSession] = relationship(back_populates="answers")

    __table_args__ = (
        # NULLs are distinct in a plain unique index, so the upsert key is
        # split into two partial indexes: singleton answers and row answers.
        Index(
            "uq_answer_singleton",
            "session_id",
            "question_id",
            unique=True,
            postgresql_where=text("row_index IS NULL"),
            sqlite_where=text("row_index IS NULL"),
        ),
        Index(
            "uq_answer_row",
            "session_id",
            "question_id",
            "row_index",
            unique=True,
            postgresql_where=text("row_index IS NOT NULL"),
            sqlite_where=text("row_index IS NOT NULL"),
        ),
        Index("ix_answer_session", "session_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Answer(session={self.session_id!r}, question={self.question_id!r}, "
            f"row={self.row_index!r}, value={self.value!r})>"
        )

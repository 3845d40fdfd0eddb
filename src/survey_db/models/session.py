"""FormSession ORM model — one row per respondent session.

A session owns its answers; deleting the session cascades to them.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import TIMESTAMP, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_db.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FormSession(Base):
    """A single respondent's in-progress or completed set of answers."""

    __tablename__ = "form_sessions"

    # Opaque identifier; seeded sessions may use readable ids
    id: Mapped[str] = mapped_column(
        Text,
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    # Refreshed on every save
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        index=True,
    )

    answers: Mapped[list["Answer"]] = relationship(  # noqa: F821
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<FormSession(id={self.id!r}, updated_at={self.updated_at!s})>"

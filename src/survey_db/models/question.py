"""Question schema ORM models.

The schema is process-wide configuration: it is imported in bulk (see
``QuestionRepository.replace_all``) and read back in a single query per page
view.  Labels live in side tables keyed by locale so new locales need no
schema change.
"""

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_db.models.base import Base


class Question(Base):
    """One node of the question hierarchy.

    ``parent_id`` is intentionally not a foreign key: the schema is loaded
    verbatim from an external file and the tree builder tolerates (and
    logs) references to parents that do not exist.
    """

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    parent_id: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    # Sibling display order
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # One of ContentType values, or NULL for a grouping node
    content_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    unit: Mapped[str | None] = mapped_column(Text, nullable=True)

    labels: Mapped[list["QuestionLabel"]] = relationship(
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    enum_options: Mapped[list["EnumOption"]] = relationship(
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="EnumOption.order",
    )

    def __repr__(self) -> str:
        return (
            f"<Question(id={self.id!r}, parent={self.parent_id!r}, "
            f"type={self.content_type!r}, order={self.order})>"
        )


class QuestionLabel(Base):
    """Display text of a question in one locale."""

    __tablename__ = "question_labels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[str] = mapped_column(
        Text, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    locale: Mapped[str] = mapped_column(String(8), nullable=False)
    label: Mapped[str] = mapped_column(Text, nullable=False)

    question: Mapped[Question] = relationship(back_populates="labels")

    __table_args__ = (
        UniqueConstraint("question_id", "locale", name="uq_question_label_locale"),
    )


class EnumOption(Base):
    """One selectable value of an ``enum`` question."""

    __tablename__ = "enum_options"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    question_id: Mapped[str] = mapped_column(
        Text, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    question: Mapped[Question] = relationship(back_populates="enum_options")
    labels: Mapped[list["EnumOptionLabel"]] = relationship(
        back_populates="enum_option",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class EnumOptionLabel(Base):
    """Display text of an enum option in one locale."""

    __tablename__ = "enum_option_labels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    enum_option_id: Mapped[str] = mapped_column(
        Text, ForeignKey("enum_options.id", ondelete="CASCADE"), nullable=False
    )
    locale: Mapped[str] = mapped_column(String(8), nullable=False)
    label: Mapped[str] = mapped_column(Text, nullable=False)

    enum_option: Mapped[EnumOption] = relationship(back_populates="labels")

    __table_args__ = (
        UniqueConstraint("enum_option_id", "locale", name="uq_enum_option_label_locale"),
    )

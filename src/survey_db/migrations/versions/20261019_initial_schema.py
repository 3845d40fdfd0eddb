"""Initial schema: questions, labels, enum options, form sessions, answers.

The answers table carries two partial unique indexes that together enforce
one row per (session_id, question_id, row_index), treating a NULL
row_index as a single slot.

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- Question schema ---
    op.create_table(
        "questions",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("parent_id", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("content_type", sa.String(16), nullable=True),
        sa.Column("unit", sa.Text(), nullable=True),
    )
    op.create_index("ix_questions_parent_id", "questions", ["parent_id"])

    op.create_table(
        "question_labels",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "question_id",
            sa.Text(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("locale", sa.String(8), nullable=False),
        sa.Column("label", sa.Text(), nullable=False),
        sa.UniqueConstraint("question_id", "locale", name="uq_question_label_locale"),
    )

    op.create_table(
        "enum_options",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column(
            "question_id",
            sa.Text(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_enum_options_question_id", "enum_options", ["question_id"])

    op.create_table(
        "enum_option_labels",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "enum_option_id",
            sa.Text(),
            sa.ForeignKey("enum_options.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("locale", sa.String(8), nullable=False),
        sa.Column("label", sa.Text(), nullable=False),
        sa.UniqueConstraint(
            "enum_option_id", "locale", name="uq_enum_option_label_locale"
        ),
    )

    # --- Sessions and answers ---
    op.create_table(
        "form_sessions",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index("ix_form_sessions_updated_at", "form_sessions", ["updated_at"])

    op.create_table(
        "answers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "session_id",
            sa.Text(),
            sa.ForeignKey("form_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "question_id",
            sa.Text(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("row_index", sa.Integer(), nullable=True),
        sa.Column("row_label", sa.Text(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index("ix_answer_session", "answers", ["session_id"])
    # --- Upsert key: split so a NULL row_index still counts as one slot ---
    op.create_index(
        "uq_answer_singleton",
        "answers",
        ["session_id", "question_id"],
        unique=True,
        postgresql_where=sa.text("row_index IS NULL"),
    )
    op.create_index(
        "uq_answer_row",
        "answers",
        ["session_id", "question_id", "row_index"],
        unique=True,
        postgresql_where=sa.text("row_index IS NOT NULL"),
    )


def downgrade() -> None:
    op.drop_index("uq_answer_row", table_name="answers")
    op.drop_index("uq_answer_singleton", table_name="answers")
    op.drop_index("ix_answer_session", table_name="answers")
    op.drop_table("answers")
    op.drop_index("ix_form_sessions_updated_at", table_name="form_sessions")
    op.drop_table("form_sessions")
    op.drop_table("enum_option_labels")
    op.drop_index("ix_enum_options_question_id", table_name="enum_options")
    op.drop_table("enum_options")
    op.drop_table("question_labels")
    op.drop_index("ix_questions_parent_id", table_name="questions")
    op.drop_table("questions")

"""Question schema import CLI — ``survey-seed``.

Loads a CSV or YAML question schema file and replaces the stored schema
with it.  Existing answers are deleted too, since they reference the old
question ids.  With ``--sample-sessions`` it also (re)creates the demo
sessions of ``survey_server.sample_sessions``.  Intended for deployments
and local development.

Examples::

    # Import the schema from a semicolon-delimited CSV
    uv run survey-seed questions.csv

    # Create the tables first (local SQLite or a fresh database)
    DATABASE_URL=sqlite+aiosqlite:///survey.db uv run survey-seed --create-tables questions.yaml

    # Import the schema, then fill the demo sessions
    uv run survey-seed questions.csv --sample-sessions

    # Refresh only the demo sessions against the stored schema
    uv run survey-seed --sample-sessions
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)


class SeedResult(NamedTuple):
    """Rows written by one seed run."""

    questions: int = 0
    sessions: int = 0
    answers: int = 0


async def run_seed(
    path: Path | str | None = None,
    *,
    create_tables: bool = False,
    sample_sessions: bool = False,
) -> SeedResult:
    """Import the schema file and/or the sample sessions.

    Creates its own database session and commits once, so a failing run
    leaves the previous schema and sessions in place.
    """
    # Lazy imports to avoid loading DB machinery at module import time
    from survey_db.engine import dispose_engine, get_engine, get_session_factory
    from survey_db.models import Base
    from survey_forms.schema import load_questions
    from survey_forms.service import SurveyService

    from survey_server.sample_sessions import seed_sample_sessions

    definitions = load_questions(path) if path is not None else None
    service = SurveyService()
    questions = sessions = answers = 0

    try:
        if create_tables:
            async with get_engine().begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

        factory = get_session_factory()
        async with factory() as db:
            if definitions is not None:
                questions = await service.import_questions(db, definitions)
            if sample_sessions:
                sessions, answers = await seed_sample_sessions(db, service)
            await db.commit()

        result = SeedResult(questions=questions, sessions=sessions, answers=answers)
        logger.info(
            "Seed complete: questions=%d, sessions=%d, answers=%d, source=%s",
            result.questions, result.sessions, result.answers, path,
        )
        return result
    finally:
        await dispose_engine()


def cli() -> None:
    """Console-script entry point: ``survey-seed``."""
    parser = argparse.ArgumentParser(
        prog="survey-seed",
        description="Replace the stored question schema and/or seed demo sessions.",
    )
    parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=None,
        help="Question schema file (.csv, semicolon-delimited, or .yaml/.yml)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        default=False,
        help="Create missing tables before importing (no migrations)",
    )
    parser.add_argument(
        "--sample-sessions",
        action="store_true",
        default=False,
        help="(Re)create the demo sessions, clearing their previous answers",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )

    args = parser.parse_args()
    if args.path is None and not args.sample_sessions:
        parser.error("give a schema file, --sample-sessions, or both")

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    result = asyncio.run(
        run_seed(
            args.path,
            create_tables=args.create_tables,
            sample_sessions=args.sample_sessions,
        )
    )

    if args.path is not None:
        print(f"Imported questions: {result.questions}")
    if args.sample_sessions:
        print(f"Sample sessions: {result.sessions} ({result.answers} answers)")
    sys.exit(0)

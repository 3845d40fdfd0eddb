"""Demo form sessions for local development — ``survey-seed --sample-sessions``.

Two sessions with fixed ids are (re)created and filled with realistic
answers: labelled table rows, plus one option picked for every enum
question outside a table.  Rows are only written for tables (and fields)
that exist in the stored schema, so the sessions adapt to whatever schema
was imported.

Row field values are strings stored verbatim, except for enum fields where
an ``int`` selects the option at that position.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from sqlalchemy.ext.asyncio import AsyncSession

from survey_forms.codec import QuestionIndex
from survey_forms.models.answer import FlatAnswer
from survey_forms.models.question import QuestionDefinition
from survey_forms.service import SurveyService

logger = logging.getLogger(__name__)

SampleValue = Union[str, int]
SampleRow = tuple[str, dict[str, SampleValue]]


@dataclass(frozen=True)
class SampleSession:
    """One demo session.

    Attributes:
        id: fixed session id
        enum_choice: position of the option picked for standalone enum
            questions (clamped to the last option)
        tables: table id -> ordered ``(row label, {field id: value})`` rows
    """

    id: str
    enum_choice: int = 0
    tables: dict[str, list[SampleRow]] = field(default_factory=dict)


SAMPLE_SESSIONS: tuple[SampleSession, ...] = (
    SampleSession(
        id="session-techcorp-france",
        enum_choice=0,
        tables={
            "S1-6_01": [
                ("Total", {"S1-6_02": "1250", "S1-6_03": "1180", "S1-6_11": "85"}),
            ],
            "S1-6_04": [
                ("France", {"S1-6_05": "850", "S1-6_06": "820"}),
                ("Allemagne", {"S1-6_05": "250", "S1-6_06": "230"}),
                ("Espagne", {"S1-6_05": "150", "S1-6_06": "130"}),
            ],
            "S1-6_07": [
                ("CDI Hommes", {"S1-6_08": "520", "S1-6_09": "500", "S1-6_10": "25"}),
                ("CDI Femmes", {"S1-6_08": "480", "S1-6_09": "460", "S1-6_10": "30"}),
                ("CDD", {"S1-6_08": "250", "S1-6_09": "220", "S1-6_10": "30"}),
            ],
            "CUSTOM_03": [
                ("Île-de-France", {"CUSTOM_04": "12500000", "CUSTOM_05": "850", "CUSTOM_06": 0}),
                ("Auvergne-Rhône-Alpes", {"CUSTOM_04": "4800000", "CUSTOM_05": "250", "CUSTOM_06": 1}),
                ("Nouvelle-Aquitaine", {"CUSTOM_04": "2300000", "CUSTOM_05": "150", "CUSTOM_06": 2}),
            ],
        },
    ),
    SampleSession(
        id="session-greentech-uk",
        enum_choice=1,
        tables={
            "S1-6_01": [
                ("Total", {"S1-6_02": "3500", "S1-6_03": "3200", "S1-6_11": "420"}),
            ],
            "S1-6_04": [
                ("United Kingdom", {"S1-6_05": "2100", "S1-6_06": "1950"}),
                ("Ireland", {"S1-6_05": "800", "S1-6_06": "750"}),
                ("Netherlands", {"S1-6_05": "600", "S1-6_06": "500"}),
            ],
            "S1-6_07": [
                ("Permanent Male", {"S1-6_08": "1800", "S1-6_09": "1700", "S1-6_10": "180"}),
                ("Permanent Female", {"S1-6_08": "1400", "S1-6_09": "1300", "S1-6_10": "150"}),
                ("Fixed-term", {"S1-6_08": "300", "S1-6_09": "200", "S1-6_10": "90"}),
            ],
            "CUSTOM_03": [
                ("London", {"CUSTOM_04": "45000000", "CUSTOM_05": "2100", "CUSTOM_06": 0}),
                ("Dublin", {"CUSTOM_04": "18500000", "CUSTOM_05": "800", "CUSTOM_06": 1}),
                ("Amsterdam", {"CUSTOM_04": "14200000", "CUSTOM_05": "600", "CUSTOM_06": 1}),
            ],
        },
    ),
)


def _option_ids(question: QuestionDefinition) -> list[str]:
    return [opt.id for opt in sorted(question.enum_options, key=lambda o: o.order)]


def _row_value(question: QuestionDefinition, value: SampleValue) -> Optional[str]:
    """Text to store for one row field, or None when the option does not exist."""
    if isinstance(value, int) and question.content_type == "enum":
        options = _option_ids(question)
        return options[value] if value < len(options) else None
    return str(value)


def build_sample_answers(
    sample: SampleSession, definitions: Sequence[QuestionDefinition]
) -> list[FlatAnswer]:
    """Flat answers for ``sample``, restricted to questions in ``definitions``."""
    by_id = {d.id: d for d in definitions}
    index = QuestionIndex.from_definitions(definitions)
    answers: list[FlatAnswer] = []

    for table_id, rows in sample.tables.items():
        if table_id not in index.table_ids:
            logger.info("Table %s not in schema, skipping sample rows", table_id)
            continue
        for row_index, (row_label, fields) in enumerate(rows):
            for question_id, raw in fields.items():
                question = by_id.get(question_id)
                if question is None or question.parent_id != table_id:
                    continue
                value = _row_value(question, raw)
                if value is None:
                    continue
                answers.append(
                    FlatAnswer(
                        question_id=question_id,
                        value=value,
                        row_index=row_index,
                        row_label=row_label,
                    )
                )

    # Standalone enums; enum row fields are filled by the table rows above
    for question in definitions:
        if question.content_type != "enum" or index.table_of(question.id):
            continue
        options = _option_ids(question)
        if options:
            choice = min(sample.enum_choice, len(options) - 1)
            answers.append(FlatAnswer(question_id=question.id, value=options[choice]))

    return answers


async def seed_sample_sessions(
    db: AsyncSession,
    service: SurveyService,
    samples: Sequence[SampleSession] = SAMPLE_SESSIONS,
) -> tuple[int, int]:
    """Reset and fill every sample session.  Returns (sessions, answers) written.

    Each session's previous answers are cleared first, so re-running the
    seed never leaves stale rows behind.
    """
    definitions = await service.list_question_definitions(db)
    total = 0
    for sample in samples:
        info = await service.reset_session(db, sample.id)
        answers = build_sample_answers(sample, definitions)
        total += await service.save_answers(db, info.id, answers)
        logger.info("Seeded sample session %s with %d answers", info.id, len(answers))
    return len(samples), total

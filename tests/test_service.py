"""SurveyService tests.

Two layers:
  - Orchestration with mocked repositories: MockSessionRow mimics
    FormSession, the mock repositories keep rows in dicts, and AsyncMock
    stands in for AsyncSession.  Covers get-or-create and the save path
    without a database.
  - Integration against in-memory SQLite (``seeded_db`` fixture): schema
    import, hierarchy read, idempotent saves and nested decoding.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from survey_forms.models.answer import FlatAnswer
from survey_forms.service import SessionNotFoundError, SurveyService


# =====================================================================
# Mock infrastructure
# =====================================================================


@dataclass
class MockSessionRow:
    """In-memory stand-in for the FormSession ORM model."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    updated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


@dataclass
class MockAnswerRow:
    session_id: str
    question_id: str
    value: str
    row_index: int | None = None
    row_label: str | None = None


class MockSessionRepository:
    """In-memory SessionRepository replacement keyed by session id."""

    def __init__(self):
        self.rows: dict[str, MockSessionRow] = {}

    async def create_session(self, db, *, session_id=None):
        row = MockSessionRow(id=session_id) if session_id else MockSessionRow()
        self.rows[row.id] = row
        return row

    async def get_by_id(self, db, session_id):
        return self.rows.get(session_id)

    async def touch(self, db, session):
        session.updated_at = datetime.now(timezone.utc)
        return session

    async def delete_session(self, db, session_id):
        return 1 if self.rows.pop(session_id, None) is not None else 0


class MockAnswerRepository:
    """In-memory AnswerRepository replacement keyed like the unique indexes."""

    def __init__(self):
        self.rows: dict[tuple, MockAnswerRow] = {}

    async def upsert(self, db, *, session_id, question_id, row_index, value, row_label):
        key = (session_id, question_id, row_index)
        row = self.rows.get(key)
        if row is None:
            row = MockAnswerRow(session_id, question_id, value, row_index, row_label)
            self.rows[key] = row
        else:
            row.value = value
            row.row_label = row_label
        return row


def _make_service():
    """SurveyService wired to in-memory repositories, plus a mock db."""
    service = SurveyService()
    service._sessions = MockSessionRepository()
    service._answers = MockAnswerRepository()
    db = AsyncMock()
    return service, db


# =====================================================================
# Orchestration (mocked repositories)
# =====================================================================


class TestSessionLifecycle:

    @pytest.mark.asyncio
    async def test_no_id_creates_session(self):
        service, db = _make_service()
        info = await service.get_or_create_session(db)
        assert info.id in service._sessions.rows

    @pytest.mark.asyncio
    async def test_known_id_returns_existing(self):
        service, db = _make_service()
        first = await service.get_or_create_session(db)
        again = await service.get_or_create_session(db, first.id)
        assert again.id == first.id
        assert len(service._sessions.rows) == 1

    @pytest.mark.asyncio
    async def test_unknown_id_creates_fresh_session(self):
        service, db = _make_service()
        info = await service.get_or_create_session(db, "does-not-exist")
        assert info.id != "does-not-exist"
        assert list(service._sessions.rows) == [info.id]

    @pytest.mark.asyncio
    async def test_delete_unknown_session_raises(self):
        service, db = _make_service()
        with pytest.raises(SessionNotFoundError, match="Session not found"):
            await service.delete_session(db, "missing")


class TestSaveOrchestration:

    @pytest.mark.asyncio
    async def test_save_touches_session(self):
        service, db = _make_service()
        info = await service.get_or_create_session(db)
        row = service._sessions.rows[info.id]
        row.updated_at -= timedelta(hours=1)
        before = row.updated_at

        await service.save_answers(db, info.id, [FlatAnswer(question_id="Q", value="1")])

        assert row.updated_at > before

    @pytest.mark.asyncio
    async def test_blank_row_label_stored_as_none(self):
        service, db = _make_service()
        info = await service.get_or_create_session(db)
        await service.save_answers(
            db, info.id,
            [FlatAnswer(question_id="A", value="1", row_index=0, row_label="")],
        )
        (row,) = service._answers.rows.values()
        assert row.row_label is None

    @pytest.mark.asyncio
    async def test_save_to_unknown_session_raises(self):
        service, db = _make_service()
        with pytest.raises(SessionNotFoundError):
            await service.save_answers(db, "missing", [])

    @pytest.mark.asyncio
    async def test_save_values_flattens_before_upsert(self):
        service, db = _make_service()
        info = await service.get_or_create_session(db)

        saved = await service.save_values(db, info.id, {
            "S1-1": "Acme",
            "T": [{"_rowLabel": "France", "A": 850, "B": ""}],
        })

        assert saved == 2
        assert set(service._answers.rows) == {
            (info.id, "S1-1", None),
            (info.id, "A", 0),
        }
        assert service._answers.rows[(info.id, "A", 0)].value == "850"


# =====================================================================
# Integration (SQLite)
# =====================================================================


class TestHierarchy:

    @pytest.mark.asyncio
    async def test_hierarchy_from_store(self, seeded_db, service):
        roots = await service.get_questions_hierarchy(seeded_db, "en")

        assert [r.id for r in roots] == ["S1", "S2"]
        company = roots[0]
        assert [c.id for c in company.children] == ["S1-1", "T", "S1-2"]
        assert [c.id for c in company.children[1].children] == ["A", "B"]
        sector = company.children[2]
        assert [(o.id, o.label) for o in sector.enum_options] == [
            ("S1-2-0", "Industry"),
            ("S1-2-1", ""),
        ]

    @pytest.mark.asyncio
    async def test_unsupported_locale_uses_default(self, seeded_db, service):
        roots = await service.get_questions_hierarchy(seeded_db, "de")
        assert roots[0].label == "Entreprise"

    @pytest.mark.asyncio
    async def test_reimport_replaces_schema(self, seeded_db, service, definitions):
        count = await service.import_questions(seeded_db, definitions[:1])
        roots = await service.get_questions_hierarchy(seeded_db, "en")
        assert count == 1
        assert [r.id for r in roots] == ["S1"]
        assert roots[0].children == []


class TestAnswersRoundTrip:

    @pytest.mark.asyncio
    async def test_save_then_read_nested(self, seeded_db, service):
        info = await service.get_or_create_session(seeded_db)
        await service.save_answers(seeded_db, info.id, [
            FlatAnswer(question_id="S1-1", value="Acme"),
            FlatAnswer(question_id="A", value="850", row_index=0, row_label="France"),
            FlatAnswer(question_id="B", value="820", row_index=0, row_label="France"),
            FlatAnswer(question_id="A", value="250", row_index=1, row_label="Germany"),
        ])

        values = await service.get_session_answers(seeded_db, info.id)

        assert values == {
            "S1-1": "Acme",
            "T": [
                {"_rowLabel": "France", "A": "850", "B": "820"},
                {"_rowLabel": "Germany", "A": "250"},
            ],
        }

    @pytest.mark.asyncio
    async def test_saving_twice_is_idempotent(self, seeded_db, service):
        info = await service.get_or_create_session(seeded_db)
        values = {"S1-1": "Acme", "T": [{"_rowLabel": "France", "A": "850"}]}

        await service.save_values(seeded_db, info.id, values)
        first = await service.get_session_answers(seeded_db, info.id)
        await service.save_values(seeded_db, info.id, values)
        second = await service.get_session_answers(seeded_db, info.id)

        assert first == second == values
        summaries = await service.list_sessions(seeded_db)
        assert [(s.id, s.answer_count) for s in summaries] == [(info.id, 2)]

    @pytest.mark.asyncio
    async def test_unknown_session_has_no_answers(self, seeded_db, service):
        assert await service.get_session_answers(seeded_db, "missing") == {}

    @pytest.mark.asyncio
    async def test_list_sessions_most_recent_first(self, seeded_db, service):
        older = await service.get_or_create_session(seeded_db)
        newer = await service.get_or_create_session(seeded_db)
        await service.get_or_create_session(seeded_db)  # never answered

        await service.save_values(seeded_db, older.id, {"S1-1": "a"})
        await service.save_values(seeded_db, newer.id, {"S1-1": "b", "S2-1": 3})

        summaries = await service.list_sessions(seeded_db)
        assert [(s.id, s.answer_count) for s in summaries] == [
            (newer.id, 2),
            (older.id, 1),
        ]

    @pytest.mark.asyncio
    async def test_delete_all_sessions(self, seeded_db, service):
        for _ in range(3):
            await service.get_or_create_session(seeded_db)
        assert await service.delete_all_sessions(seeded_db) == 3
        assert await service.list_sessions(seeded_db) == []

    @pytest.mark.asyncio
    async def test_reset_session_creates_with_fixed_id(self, seeded_db, service):
        info = await service.reset_session(seeded_db, "session-demo")
        assert info.id == "session-demo"
        assert await service.get_session_answers(seeded_db, "session-demo") == {}

    @pytest.mark.asyncio
    async def test_reset_session_clears_existing_answers(self, seeded_db, service):
        info = await service.reset_session(seeded_db, "session-demo")
        await service.save_values(seeded_db, info.id, {"S1-1": "Acme", "S2-1": 3})

        again = await service.reset_session(seeded_db, "session-demo")
        assert again.id == "session-demo"
        assert await service.get_session_answers(seeded_db, "session-demo") == {}

    @pytest.mark.asyncio
    async def test_list_question_definitions(self, seeded_db, service):
        defs = {d.id: d for d in await service.list_question_definitions(seeded_db)}
        assert len(defs) == 8
        assert defs["A"].parent_id == "T"
        assert [o.id for o in defs["S1-2"].enum_options] == ["S1-2-0", "S1-2-1"]

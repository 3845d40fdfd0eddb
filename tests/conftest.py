import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from helpers.factories import sample_definitions
from survey_db.models import Base
from survey_forms.service import SurveyService


@pytest.fixture
def definitions():
    return sample_definitions()


@pytest_asyncio.fixture
async def session_factory():
    """In-memory SQLite database with all tables created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def service():
    return SurveyService()


@pytest_asyncio.fixture
async def seeded_db(db, service, definitions):
    """Database session with the sample schema imported and committed."""
    await service.import_questions(db, definitions)
    await db.commit()
    return db

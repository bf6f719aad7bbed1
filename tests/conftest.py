"""
Shared pytest configuration.

Every test gets its own SQLite database (aiosqlite, foreign keys on) created
from ``Base.metadata``. API tests run the app in-process through httpx's
ASGITransport with ``get_db`` pointed at that database.
"""
import os
from datetime import datetime

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_JSON", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.database import Base, create_engine_for, get_db
import app.models  # noqa: F401
from app.models.enums import DrillCategory
from app.schemas.library import DrillCreate, FocusCreate
from app.schemas.program import TemplateCreate
from app.services.enrollment_service import EnrollmentService
from app.services.library_service import LibraryService
from app.services.template_service import TemplateService

COACH = "coach-1"
PLAYER = "player-1"
TEAM = "team-1"
START = datetime(2026, 3, 2, 8, 30)


@pytest_asyncio.fixture
async def engine(tmp_path):
    test_engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'programs.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as db:
        yield db


@pytest_asyncio.fixture
async def client(session_maker):
    from app.main import create_app

    async def _get_test_db():
        async with session_maker() as db:
            try:
                yield db
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    test_app = create_app()
    test_app.dependency_overrides[get_db] = _get_test_db
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def coach_headers():
    return {"X-User-Id": COACH, "X-Team-Id": TEAM}


@pytest.fixture
def player_headers():
    return {"X-User-Id": PLAYER}


@pytest_asyncio.fixture
async def template(session):
    return await TemplateService(session).create_template(
        COACH, TEAM, TemplateCreate(title="Spring hitting", weeks_count=4, cycle_days=7)
    )


@pytest_asyncio.fixture
async def drill(session):
    return await LibraryService(session).create_drill(
        COACH,
        TEAM,
        DrillCreate(title="Tee work", category=DrillCategory.HITTING, cues=["Hands inside"]),
    )


@pytest_asyncio.fixture
async def other_drill(session):
    return await LibraryService(session).create_drill(
        COACH,
        TEAM,
        DrillCreate(title="Long toss", category=DrillCategory.THROWING),
    )


@pytest_asyncio.fixture
async def focus(session):
    return await LibraryService(session).create_focus(
        COACH, TEAM, FocusCreate(name="Stay closed", cues=["Front shoulder in"])
    )


@pytest_asyncio.fixture
async def enrollment(session, template):
    return await EnrollmentService(session).enroll_player(template.id, PLAYER, COACH, START)

"""
Shared fixtures: a file-backed SQLite database per test and an API client
bound to it.

A file (not :memory:) database lets several sessions run concurrently
against the same data, as they do in production.
"""
from datetime import datetime, timedelta

import httpx
import pytest

from hackjudge.database import build_engine, build_sessionmaker, get_db, init_db
from hackjudge.main import app
from hackjudge.orm.criteria import Criterion
from hackjudge.orm.project import ProjectStatus
from hackjudge.rate_limit import limiter
from hackjudge.services.project_feed_service import upsert_project_status

EVENT_ID = "spring-hack"
BASE_TIME = datetime(2025, 3, 1, 12, 0, 0)


@pytest.fixture
async def engine(tmp_path):
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'hackjudge_test.db'}")
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_project(db):
    """Publish a project through the status feed; minutes offsets submitted_at."""
    async def _make(
        project_id: str,
        event_id: str = EVENT_ID,
        status: ProjectStatus = ProjectStatus.SUBMITTED,
        minutes: int = 0,
        submitted: bool = True,
        title: str = None
    ):
        return await upsert_project_status(
            project_id=project_id,
            event_id=event_id,
            status=status,
            submitted_at=BASE_TIME + timedelta(minutes=minutes) if submitted else None,
            title=title or project_id.title(),
            db=db,
        )
    return _make


@pytest.fixture
def make_criteria(db):
    """Configure criteria for an event: rows of (id, weight, max_score)."""
    async def _make(rows, event_id: str = EVENT_ID):
        for order, (criteria_id, weight, max_score) in enumerate(rows, start=1):
            db.add(Criterion(
                id=criteria_id,
                event_id=event_id,
                name=criteria_id.title(),
                weight=weight,
                max_score=max_score,
                order=order,
            ))
        await db.commit()
    return _make


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# Scenario A ratings on the default template
SCENARIO_A = {"innovation": 8, "technical": 9, "design": 7, "impact": 8, "presentation": 9}


def uniform_ratings(value: float) -> dict:
    """Same raw rating on every default criterion; the judge total equals value."""
    return {c: value for c in SCENARIO_A}

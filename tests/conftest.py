"""Shared test fixtures."""

from datetime import date, time

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from matchday.config import Settings
from matchday.db.engine import create_engine, create_tables, get_session
from matchday.db.repository import Repository
from matchday.models.availability import AvailabilityWindow, Weekday

# A Monday, so the first Saturday of a run is START + 5 days.
START = date(2026, 3, 2)


@pytest.fixture
def settings() -> Settings:
    """Test settings with defaults."""
    return Settings(matchday_env="test", database_url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def engine() -> AsyncEngine:
    """Create an in-memory SQLite engine with all tables."""
    eng = create_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
async def repo(engine: AsyncEngine) -> Repository:
    """Yield a repository with a session bound to the in-memory database."""
    async with get_session(engine) as session:
        yield Repository(session)


@pytest.fixture
async def scope(repo: Repository) -> tuple[str, str]:
    """An open tournament starting on START and one category."""
    tournament = await repo.create_tournament(
        "Liga de Prueba", START, status="open_for_inscription"
    )
    category = await repo.create_category("Libre")
    return tournament.id, category.id


def window(day: Weekday, start: str, end: str) -> AvailabilityWindow:
    return AvailabilityWindow(
        day_of_week=day,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
    )


@pytest.fixture
def make_team(repo: Repository, scope: tuple[str, str]):
    """Factory: register a team in ``scope`` with optional weekly windows."""

    async def _make(name: str, *windows: AvailabilityWindow) -> str:
        team = await repo.create_team(scope[0], scope[1], name)
        if windows:
            await repo.replace_availability(team.id, windows)
        return team.id

    return _make


SATURDAY_MORNING = window(Weekday.SATURDAY, "09:00", "12:00")

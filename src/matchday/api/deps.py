"""FastAPI dependencies: app settings, one session per request, repository."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from matchday.config import Settings
from matchday.db import engine as db
from matchday.db.repository import Repository


async def get_engine(request: Request) -> AsyncEngine:
    return request.app.state.engine


async def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_session(
    engine: Annotated[AsyncEngine, Depends(get_engine)],
) -> AsyncGenerator[AsyncSession, None]:
    """The request's transaction: committed when the handler returns, rolled back if it raises."""
    async with db.get_session(engine) as session:
        yield session


async def get_repo(session: Annotated[AsyncSession, Depends(get_session)]) -> Repository:
    return Repository(session)


RepoDep = Annotated[Repository, Depends(get_repo)]
SettingsDep = Annotated[Settings, Depends(get_settings)]

"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from matchday.api.fixtures import router as fixtures_router
from matchday.api.matches import router as matches_router
from matchday.api.standings import router as standings_router
from matchday.api.teams import router as teams_router
from matchday.api.tournaments import router as tournaments_router
from matchday.config import Settings
from matchday.core.errors import MatchdayError
from matchday.db.engine import create_engine, create_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: create the engine and any missing tables. Shutdown: dispose it."""
    settings: Settings = app.state.settings
    engine = create_engine(settings.database_url)
    await create_tables(engine)
    app.state.engine = engine
    logger.info("startup env=%s database=%s", settings.matchday_env, settings.database_url)

    yield

    await engine.dispose()


async def _matchday_error(request: Request, exc: MatchdayError) -> JSONResponse:
    logger.warning(
        "request_rejected path=%s status=%d code=%s detail=%s",
        request.url.path,
        exc.status_code,
        exc.code,
        exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_failed path=%s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": "INTERNAL_ERROR"},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the Matchday FastAPI application."""
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.matchday_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Matchday",
        version="0.1.0",
        description="Fixture scheduling, results and standings for amateur tournaments",
        docs_url="/docs" if settings.matchday_env != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(MatchdayError, _matchday_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error)

    app.include_router(tournaments_router)
    app.include_router(teams_router)
    app.include_router(fixtures_router)
    app.include_router(matches_router)
    app.include_router(standings_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.matchday_env}

    return app


app = create_app()

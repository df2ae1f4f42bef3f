import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

import sadhana.models  # noqa: F401 - register all models with Base.metadata
from sadhana.api.routes.activities import router as activities_router
from sadhana.api.routes.insights import router as insights_router
from sadhana.config import get_settings
from sadhana.database import engine, init_db
from sadhana.schemas.system import StatusResponse


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Single-file SQLite deployment: the schema comes straight from the models
    await init_db()
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    app = FastAPI(
        title="Sadhana",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.include_router(activities_router)
    app.include_router(insights_router)

    @app.get("/api/system/status", response_model=StatusResponse)
    async def system_status() -> StatusResponse:
        return StatusResponse(status="ok")

    return app


app = create_app()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

import shootbook.models  # noqa: F401  register all models with Base.metadata
from shootbook.api.routes.dashboard import router as dashboard_router
from shootbook.api.routes.images import router as images_router
from shootbook.api.routes.sessions import router as sessions_router
from shootbook.config import get_settings
from shootbook.database import create_tables, engine


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await create_tables()
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="Shootbook",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.include_router(sessions_router)
    app.include_router(images_router)
    app.include_router(dashboard_router)

    # Serve locally stored images when the base URL is a path on this app
    if settings.image_store == "local" and settings.image_base_url.startswith("/"):
        app.mount(
            settings.image_base_url,
            StaticFiles(directory=settings.image_dir, check_dir=False),
            name="session-images",
        )

    @app.get("/api/system/status")
    async def system_status() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()

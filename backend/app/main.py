from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_error_handlers
from app.api.middleware import register_middleware
from app.api.router import api_router
from app.core.config import Settings, settings as default_settings
from app.core.logging_config import setup_logging
from app.db.repository import SqlAlchemyUserStore
from app.db.session import Database
from app.schemas.users import HealthOut
from app.services.user_service import UserService

logger = logging.getLogger(__name__)


def create_app(database_url: str | None = None, settings: Settings | None = None) -> FastAPI:
    cfg = settings or default_settings
    setup_logging(cfg.log_level)

    database = Database.from_url(database_url, cfg)
    database.create_tables()
    logger.info("Database connection established")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info("Shutting down server...")
        database.dispose()

    app = FastAPI(title=cfg.project_name, version=cfg.api_version, lifespan=lifespan)

    # Store -> service, built once and shared by every request.
    app.state.db = database
    app.state.user_service = UserService(SqlAlchemyUserStore(database))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    register_middleware(app)
    register_error_handlers(app)

    app.include_router(api_router, prefix="/api")

    @app.get("/health", response_model=HealthOut)
    def health() -> HealthOut:
        return HealthOut(status="ok", time=datetime.now(timezone.utc).isoformat())

    return app


def serve() -> None:
    """Run the API with uvicorn using host/port from the environment."""
    import uvicorn

    setup_logging(default_settings.log_level)
    logger.info("Server starting on %s:%s", default_settings.host, default_settings.port)
    uvicorn.run(
        "app.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


app = create_app()

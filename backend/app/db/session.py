from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, settings as default_settings
from app.db.models import Base

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return url in {"sqlite://", "sqlite:///:memory:"} or ":memory:" in url


def create_engine_from_url(database_url: str | None = None, settings: Settings | None = None) -> Engine:
    cfg = settings or default_settings
    url = database_url or cfg.database_url
    connect_args: dict[str, object] = {}

    if url.startswith("sqlite"):
        # Needed for FastAPI + SQLite usage with multiple threads.
        connect_args = {"check_same_thread": False}
        if cfg.statement_timeout_ms > 0:
            # SQLite has no statement deadline; bound the wait on a locked file instead.
            connect_args["timeout"] = cfg.statement_timeout_ms / 1000.0
        # In-memory databases must reuse one connection, otherwise every
        # session sees a fresh empty schema.
        if _is_memory_sqlite(url):
            return create_engine(
                url,
                echo=cfg.sql_echo,
                connect_args=connect_args,
                poolclass=StaticPool,
                pool_pre_ping=True,
            )
        return create_engine(url, echo=cfg.sql_echo, connect_args=connect_args, pool_pre_ping=True)

    if url.startswith("postgresql") and cfg.statement_timeout_ms > 0:
        connect_args = {"options": f"-c statement_timeout={cfg.statement_timeout_ms}"}

    return create_engine(
        url,
        echo=cfg.sql_echo,
        connect_args=connect_args,
        pool_pre_ping=True,
        pool_size=cfg.pool_size,
        max_overflow=cfg.max_overflow,
    )


@dataclass
class Database:
    engine: Engine
    SessionLocal: sessionmaker

    @classmethod
    def from_url(cls, database_url: str | None = None, settings: Settings | None = None) -> "Database":
        engine = create_engine_from_url(database_url, settings)
        SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
        return cls(engine=engine, SessionLocal=SessionLocal)

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        logger.info("Closing database connection pool")
        self.engine.dispose()

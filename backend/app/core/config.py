"""Application settings.

Values are read from environment variables once, at import time. Tests and
embedding code can build their own ``Settings`` and hand it to
``create_app`` instead of mutating the module-level instance.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "User Age API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./users.db")
    sql_echo: bool = _env_bool("SQL_ECHO")
    # Connections kept open in the pool (max idle) and the extra connections
    # allowed on top of it; max open is pool_size + max_overflow.
    pool_size: int = int(os.getenv("POOL_SIZE", "10"))
    max_overflow: int = int(os.getenv("MAX_OVERFLOW", "20"))
    # 0 disables the per-statement deadline.
    statement_timeout_ms: int = int(os.getenv("STATEMENT_TIMEOUT_MS", "0"))

    # HTTP
    cors_origins: list[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))


settings = Settings()

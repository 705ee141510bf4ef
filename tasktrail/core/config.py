"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Values are validated at load time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SUPPORTED_URL_PREFIXES = ("postgresql+asyncpg://", "sqlite+aiosqlite://")
_READ_ISOLATION_LEVELS = ("READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    The storage engine is chosen by DATABASE_URL: postgresql+asyncpg for
    production, sqlite+aiosqlite for local runs and tests.
    """

    # App
    app_name: str = "tasktrail"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./tasktrail.db"
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    # Seconds a statement may wait on the driver (asyncpg command_timeout,
    # SQLite busy timeout).
    db_command_timeout: int | None = None
    # Isolation level for snapshot reads on PostgreSQL (ignored on SQLite,
    # where a deferred transaction in WAL mode is already a snapshot).
    db_read_isolation_level: str = "REPEATABLE READ"

    # Upper bound for one unit of work (seconds); exceeded -> rollback.
    transaction_timeout_seconds: float = 30.0

    # Archival: tasks not updated for this many days are moved to archived_task.
    archive_after_days: int = 365

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def is_sqlite(self) -> bool:
        """True when DATABASE_URL points at SQLite."""
        return self.database_url.startswith("sqlite")

    @model_validator(mode="after")
    def validate_database_and_limits(self) -> "Settings":
        """Validate database URL, read isolation level and positive limits."""
        if not self.database_url.startswith(_SUPPORTED_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must use one of the async drivers "
                f"{', '.join(_SUPPORTED_URL_PREFIXES)}; got: {self.database_url!r}"
            )
        if self.db_read_isolation_level.upper() not in _READ_ISOLATION_LEVELS:
            raise ValueError(
                f"db_read_isolation_level must be one of {_READ_ISOLATION_LEVELS}, "
                f"got: {self.db_read_isolation_level!r}"
            )
        if self.transaction_timeout_seconds <= 0:
            raise ValueError("transaction_timeout_seconds must be positive")
        if self.archive_after_days < 1:
            raise ValueError("archive_after_days must be >= 1")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()

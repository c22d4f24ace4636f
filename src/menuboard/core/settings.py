"""Application settings and configuration.

This module defines all configuration options for the Menuboard Stage service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Menuboard Stage", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Document store configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./menuboard.db",
        alias="DATABASE_URL",
    )
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Platform limits of the document store
    store_batch_write_limit: int = Field(default=500, alias="STORE_BATCH_WRITE_LIMIT")
    store_in_filter_limit: int = Field(default=30, alias="STORE_IN_FILTER_LIMIT")

    # Cascade engine tuning
    batch_commit_concurrency: int = Field(default=8, alias="BATCH_COMMIT_CONCURRENCY")

    # Withdrawal (anonymization) policy
    withdrawal_reason_max_length: int = Field(
        default=500, alias="WITHDRAWAL_REASON_MAX_LENGTH"
    )
    withdrawal_feedback_max_length: int = Field(
        default=1000, alias="WITHDRAWAL_FEEDBACK_MAX_LENGTH"
    )
    reactivation_window_days: int = Field(default=30, alias="REACTIVATION_WINDOW_DAYS")
    withdrawn_user_name: str = Field(default="Withdrawn user", alias="WITHDRAWN_USER_NAME")
    withdrawn_author_name: str = Field(
        default="Withdrawn chef", alias="WITHDRAWN_AUTHOR_NAME"
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts async driver URLs to their synchronous counterparts for
        Alembic migrations.

        Returns:
            Database URL compatible with synchronous database drivers
        """
        url = self.database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        if url.startswith("sqlite+aiosqlite"):
            return url.replace("sqlite+aiosqlite", "sqlite", 1)
        return url


settings = Settings()  # type: ignore[call-arg]

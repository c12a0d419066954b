"""Application settings and configuration.

This module defines all configuration options for the Group Finder service.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Group Finder", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    admin_user_ids: list[str] = Field(default_factory=list, alias="ADMIN_USER_IDS")

    # Submission store
    store_backend: Literal["sql", "memory"] = Field(default="sql", alias="STORE_BACKEND")
    database_url: str = Field(default="sqlite:///./groupfinder.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")
    store_read_timeout_seconds: float = Field(default=5.0, alias="STORE_READ_TIMEOUT_SECONDS")
    store_write_timeout_seconds: float = Field(default=10.0, alias="STORE_WRITE_TIMEOUT_SECONDS")

    # Live directory refresh
    directory_poll_interval_seconds: float = Field(
        default=20.0,
        alias="DIRECTORY_POLL_INTERVAL_SECONDS",
    )
    directory_use_change_feed: bool = Field(default=True, alias="DIRECTORY_USE_CHANGE_FEED")

    # New submission notifications
    submission_webhook_url: str | None = Field(default=None, alias="SUBMISSION_WEBHOOK_URL")
    submission_webhook_timeout_seconds: float = Field(
        default=5.0,
        alias="SUBMISSION_WEBHOOK_TIMEOUT_SECONDS",
    )
    public_base_url: str = Field(default="http://localhost:8000", alias="PUBLIC_BASE_URL")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def webhook_enabled(self) -> bool:
        """Return True when new-submission notifications should be sent."""
        return bool(self.submission_webhook_url)


settings = Settings()

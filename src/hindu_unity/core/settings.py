"""Application settings and configuration.

This module defines all configuration options for the Hindu Unity service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Hindu Unity", alias="APP_NAME")
    site_url: str = Field(default="http://localhost:5173", alias="SITE_URL")

    # Security and authentication
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./hindu_unity.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Redis configuration for token revocation and request cooldowns
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    recovery_token_expire_minutes: int = Field(
        default=60,
        alias="RECOVERY_TOKEN_EXPIRE_MINUTES",
    )
    password_min_length: int = Field(default=6, alias="PASSWORD_MIN_LENGTH")
    password_reset_cooldown_seconds: int = Field(
        default=120,
        alias="PASSWORD_RESET_COOLDOWN_SECONDS",
    )

    # Feed and activity
    feed_page_size: int = Field(default=10, alias="FEED_PAGE_SIZE")
    live_user_window_minutes: int = Field(default=5, alias="LIVE_USER_WINDOW_MINUTES")
    last_seen_resolution_seconds: int = Field(default=60, alias="LAST_SEEN_RESOLUTION_SECONDS")
    realtime_queue_size: int = Field(default=100, alias="REALTIME_QUEUE_SIZE")

    # Media companion API (pre-signed upload URLs)
    media_api_base_url: str | None = Field(default=None, alias="MEDIA_API_BASE_URL")
    media_api_timeout_seconds: float = Field(default=10.0, alias="MEDIA_API_TIMEOUT_SECONDS")
    avatar_max_bytes: int = Field(default=5 * 1024 * 1024, alias="AVATAR_MAX_BYTES")

    # Places / geocoding API
    maps_api_key: str | None = Field(default=None, alias="GOOGLE_MAPS_API_KEY")
    maps_api_base_url: str = Field(
        default="https://maps.googleapis.com/maps/api",
        alias="MAPS_API_BASE_URL",
    )
    maps_region: str = Field(default="IN", alias="MAPS_REGION")
    maps_language: str = Field(default="en", alias="MAPS_LANGUAGE")
    maps_timeout_seconds: float = Field(default=10.0, alias="MAPS_TIMEOUT_SECONDS")

    # External content ingestion pipeline
    ingest_api_key: str | None = Field(default=None, alias="INGEST_API_KEY")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
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

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]

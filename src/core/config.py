"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Groops API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/groops",
        description="PostgreSQL connection URL with asyncpg driver",
    )

    # JWT Authentication
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Secret key for JWT signing",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=60 * 24)

    # Membership workflow
    membership_lockout_minutes: int = Field(
        default=60,
        ge=0,
        description="Membership changes are refused this many minutes before an event starts",
    )
    activity_log_max_attempts: int = Field(default=3, ge=1)
    activity_log_backoff_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Linear backoff step between activity log attempts",
    )

    # Background work
    unread_check_delay_seconds: float = Field(default=10.0, ge=0)
    unread_check_timeout_seconds: float = Field(default=5.0, gt=0)
    email_send_timeout_seconds: float = Field(default=10.0, gt=0)
    reminders_enabled: bool = Field(default=True)
    reminder_interval_seconds: int = Field(default=300, gt=0)

    # Email (SendGrid)
    sendgrid_api_key: str = Field(
        default="",
        description="SendGrid API key; emails are only logged when empty",
    )
    sendgrid_from_email: str = Field(default="notifications@groops.fun")
    sendgrid_from_name: str = Field(default="Groops")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Hosting providers supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
